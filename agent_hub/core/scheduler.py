"""Process-wide APScheduler instance.

Interval agents and the daily briefing job register here. ``runtime.main``
starts it once the event loop is running and shuts it down on exit.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from agent_hub.core.config import settings

scheduler = AsyncIOScheduler(timezone=settings.timezone)
