"""Agent run log: one ``agent_logs`` row per execution."""

import logging
import uuid
from typing import Any

from sqlalchemy import insert

from agent_hub.core.db import async_session
from agent_hub.core.models.agent_log import AgentLog
from agent_hub.core.models.enums import AgentLogEvent

logger = logging.getLogger(__name__)


async def log_agent_run(
    *,
    user_id: str,
    agent_id: str,
    agent_type: str,
    success: bool,
    duration_ms: int = 0,
    processed_count: int = 0,
    error_message: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Persist an agent run. Fire-and-forget: errors are logged, not raised."""
    try:
        async with async_session() as session:
            await session.execute(
                insert(AgentLog).values(
                    id=uuid.uuid4(),
                    user_id=uuid.UUID(user_id),
                    agent_id=agent_id,
                    agent_type=agent_type,
                    event_type=(AgentLogEvent.completed if success else AgentLogEvent.failed).value,
                    success=success,
                    duration_ms=duration_ms,
                    processed_count=processed_count,
                    error_message=error_message,
                    details=details,
                )
            )
            await session.commit()
    except Exception:
        logger.exception("Failed to log run for agent %s", agent_id)
