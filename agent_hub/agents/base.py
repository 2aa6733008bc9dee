"""Per-user agent instance and its introspection snapshot."""

import contextlib
import enum
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from agent_hub.agents.activity import log_agent_run
from agent_hub.core.config_store import AgentSettings
from agent_hub.core.models.enums import AgentType, ScheduleType
from agent_hub.core.scheduler import scheduler as default_scheduler

logger = logging.getLogger(__name__)

AGENT_NAMES: dict[AgentType, str] = {
    AgentType.email: "Email Agent",
    AgentType.legal: "Legal Agent",
    AgentType.financial: "Financial Agent",
    AgentType.stablecoin: "Stablecoin Agent",
    AgentType.focus: "Focus Agent",
}


class AgentStatus(str, enum.Enum):
    idle = "idle"
    running = "running"
    error = "error"


def agent_id_for(agent_type: AgentType, user_id: str) -> str:
    return f"{agent_type.value}-agent-{user_id}"


@dataclass(frozen=True)
class AgentInfo:
    agent_id: str
    user_id: str
    agent_type: AgentType
    name: str
    status: AgentStatus
    schedule: ScheduleType
    interval_minutes: int | None
    last_run: datetime | None
    run_count: int
    last_error: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.agent_id,
            "user_id": self.user_id,
            "type": self.agent_type.value,
            "name": self.name,
            "status": self.status.value,
            "schedule": self.schedule.value,
            "interval_minutes": self.interval_minutes,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "run_count": self.run_count,
            "last_error": self.last_error,
        }


class Agent:
    """One (user, agent type) instance.

    Interval agents are an APScheduler job keyed by ``agent_id``: the first
    run fires on ``start`` and then every ``interval_minutes`` until ``stop``.
    Manual agents only execute through ``run_once``.
    """

    def __init__(
        self,
        user_id: str,
        agent_type: AgentType,
        settings: AgentSettings,
        executor,
        scheduler: BaseScheduler | None = None,
    ):
        self.user_id = user_id
        self.agent_type = agent_type
        self.settings = settings
        self.executor = executor
        self.status = AgentStatus.idle
        self.last_run: datetime | None = None
        self.run_count = 0
        self.last_error: str | None = None
        self.scheduler = scheduler or default_scheduler

    @property
    def agent_id(self) -> str:
        return agent_id_for(self.agent_type, self.user_id)

    @property
    def is_running(self) -> bool:
        return self.status != AgentStatus.idle

    def start(self) -> None:
        if self.is_running:
            return
        self.status = AgentStatus.running
        if self.settings.schedule == ScheduleType.interval:
            self.scheduler.add_job(
                self._scheduled_run,
                IntervalTrigger(minutes=self.settings.interval_minutes),
                id=self.agent_id,
                next_run_time=datetime.now(UTC),
                replace_existing=True,
                coalesce=True,
                max_instances=1,
                misfire_grace_time=60,
            )
        logger.info("Agent %s started (%s)", self.agent_id, self.settings.schedule.value)

    async def stop(self) -> None:
        if self.is_running and self.settings.schedule == ScheduleType.interval:
            with contextlib.suppress(JobLookupError):
                self.scheduler.remove_job(self.agent_id)
        if self.is_running:
            logger.info("Agent %s stopped", self.agent_id)
        self.status = AgentStatus.idle

    async def _scheduled_run(self) -> None:
        try:
            await self.run_once()
        except Exception:
            logger.exception("Scheduled run failed for %s", self.agent_id)

    async def run_once(self, input: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute the agent logic once and record the run in ``agent_logs``."""
        start = time.monotonic()
        try:
            result = await self.executor.execute(self.user_id, self.settings, input or {})
        except Exception as e:
            self.last_error = str(e) or type(e).__name__
            if self.is_running:
                self.status = AgentStatus.error
            await log_agent_run(
                user_id=self.user_id,
                agent_id=self.agent_id,
                agent_type=self.agent_type.value,
                success=False,
                duration_ms=int((time.monotonic() - start) * 1000),
                error_message=self.last_error,
            )
            raise
        finally:
            self.last_run = datetime.now(UTC)
            self.run_count += 1

        self.last_error = None
        if self.is_running:
            self.status = AgentStatus.running
        await log_agent_run(
            user_id=self.user_id,
            agent_id=self.agent_id,
            agent_type=self.agent_type.value,
            success=True,
            duration_ms=int((time.monotonic() - start) * 1000),
            processed_count=int(result.get("processed_count", 0)),
            details=result,
        )
        return result

    def snapshot(self) -> AgentInfo:
        return AgentInfo(
            agent_id=self.agent_id,
            user_id=self.user_id,
            agent_type=self.agent_type,
            name=AGENT_NAMES[self.agent_type],
            status=self.status,
            schedule=self.settings.schedule,
            interval_minutes=(
                self.settings.interval_minutes
                if self.settings.schedule == ScheduleType.interval
                else None
            ),
            last_run=self.last_run,
            run_count=self.run_count,
            last_error=self.last_error,
        )
