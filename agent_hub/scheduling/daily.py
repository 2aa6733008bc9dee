"""Daily briefing scheduler.

Registers a cron job on the shared APScheduler instance that fires once per
day at ``settings.daily_briefing_time`` in ``settings.timezone`` and
regenerates the ``today`` briefing for every active user with a live focus
agent.

The date of the last run in which no user failed is kept in Redis, so a
restart after the trigger time catches up on a missed or failed day without
running a completed day twice.
"""

import contextlib
import logging
from datetime import UTC, datetime, time
from typing import Any
from zoneinfo import ZoneInfo

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger

from agent_hub.agents.manager import AgentManager
from agent_hub.core.config import settings
from agent_hub.core.db import redis
from agent_hub.core.models.enums import AgentType, BriefingScope
from agent_hub.core.scheduler import scheduler as default_scheduler

logger = logging.getLogger(__name__)

JOB_ID = "focus-daily-briefing"
CATCH_UP_JOB_ID = "focus-daily-briefing-catch-up"
LAST_RUN_KEY = "focus:daily:last_run"
LAST_RUN_TTL_S = 2 * 24 * 3600
MISFIRE_GRACE_S = 3600


class DailyBriefingScheduler:
    def __init__(
        self,
        manager: AgentManager,
        at: time | None = None,
        tz: ZoneInfo | None = None,
        scheduler: BaseScheduler | None = None,
    ):
        self.manager = manager
        self.at = at or time(*settings.daily_briefing_hour_minute)
        self.tz = tz or ZoneInfo(settings.timezone)
        self.scheduler = scheduler or default_scheduler

    def trigger(self) -> CronTrigger:
        return CronTrigger(hour=self.at.hour, minute=self.at.minute, timezone=self.tz)

    def start(self, now: datetime | None = None) -> None:
        self.scheduler.add_job(
            self._fire,
            self.trigger(),
            id=JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
            misfire_grace_time=MISFIRE_GRACE_S,
        )
        logger.info("Daily briefing scheduled at %s %s", self.at.strftime("%H:%M"), self.tz.key)

        # Today's fire time already passed: run once now. The last-run marker
        # turns this into a no-op when today already completed.
        local_now = (now or datetime.now(UTC)).astimezone(self.tz)
        if local_now.time() >= self.at:
            self.scheduler.add_job(self._fire, id=CATCH_UP_JOB_ID, replace_existing=True)

    async def stop(self) -> None:
        for job_id in (JOB_ID, CATCH_UP_JOB_ID):
            with contextlib.suppress(JobLookupError):
                self.scheduler.remove_job(job_id)

    async def _fire(self) -> None:
        try:
            await self.run_daily()
        except Exception:
            logger.exception("Daily briefing run failed")

    async def _already_ran(self, day: str) -> bool:
        try:
            return await redis.get(LAST_RUN_KEY) == day
        except Exception as e:
            logger.warning("Could not read last-run marker: %s", e)
            return False

    async def _mark_ran(self, day: str) -> None:
        try:
            await redis.set(LAST_RUN_KEY, day, ex=LAST_RUN_TTL_S)
        except Exception as e:
            logger.warning("Could not store last-run marker: %s", e)

    async def run_daily(self, now: datetime | None = None) -> dict[str, Any]:
        """Regenerate today's briefing for every active user, one failure boundary per user."""
        now = now or datetime.now(UTC)
        day = now.astimezone(self.tz).date().isoformat()
        if await self._already_ran(day):
            logger.info("Daily briefings already generated for %s, skipping", day)
            return {"date": day, "skipped": True, "generated": [], "failed": []}

        generated: list[str] = []
        failed: list[str] = []
        for user_id in self.manager.get_active_users().data:
            try:
                if not self.manager.has_live_agent(user_id, AgentType.focus):
                    continue
                result = await self.manager.run_agent_once(
                    user_id, AgentType.focus, {"scope": BriefingScope.today.value}
                )
                if not result.success:
                    logger.warning("Daily briefing failed for user %s: %s", user_id, result.message)
                    failed.append(user_id)
                    continue
                generated.append(user_id)
            except Exception:
                logger.exception("Daily briefing failed for user %s", user_id)
                failed.append(user_id)

        if not failed:
            await self._mark_ran(day)
        logger.info(
            "Daily briefings for %s: %d generated, %d failed", day, len(generated), len(failed)
        )
        return {"date": day, "skipped": False, "generated": generated, "failed": failed}
