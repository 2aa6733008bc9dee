"""Process entry point: wires the services, starts the job scheduler, auto-starts agents."""

import asyncio
import logging
import signal
from dataclasses import dataclass

from agent_hub.agents.factory import AgentFactory
from agent_hub.agents.focus import FocusAgentExecutor
from agent_hub.agents.manager import AgentManager
from agent_hub.agents.registry import AgentRegistry
from agent_hub.core.config import settings
from agent_hub.core.config_store import SqlConfigStore
from agent_hub.core.db import engine, redis
from agent_hub.core.models.enums import AgentType
from agent_hub.core.observability import flush_traces
from agent_hub.core.scheduler import scheduler
from agent_hub.focus.aggregator import DataAggregator
from agent_hub.focus.cache import BriefingCache
from agent_hub.focus.engine import PrioritizationEngine
from agent_hub.focus.repository import BriefingRepository
from agent_hub.scheduling.daily import DailyBriefingScheduler

logger = logging.getLogger(__name__)


@dataclass
class Services:
    manager: AgentManager
    briefings: BriefingCache
    daily: DailyBriefingScheduler


def build_services() -> Services:
    config_store = SqlConfigStore(default_language=settings.default_language)
    briefings = BriefingCache(
        aggregator=DataAggregator(),
        engine=PrioritizationEngine(),
        repository=BriefingRepository(),
        config_store=config_store,
    )
    factory = AgentFactory({AgentType.focus: FocusAgentExecutor(briefings)}, scheduler=scheduler)
    manager = AgentManager(AgentRegistry(), factory, config_store)
    return Services(
        manager=manager,
        briefings=briefings,
        daily=DailyBriefingScheduler(manager, scheduler=scheduler),
    )


async def main() -> None:
    services = build_services()

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    scheduler.start()
    result = await services.manager.auto_start_agents()
    logger.info("Auto-start: %s", result.message)
    services.daily.start()

    try:
        await stop.wait()
    finally:
        logger.info("Shutting down")
        await services.daily.stop()
        await services.manager.stop_all()
        scheduler.shutdown(wait=False)
        await redis.aclose()
        await engine.dispose()
        flush_traces()


def run() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    run()
