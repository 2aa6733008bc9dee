import uuid
from datetime import datetime

from sqlalchemy import desc, insert, select

from agent_hub.core.db import async_session
from agent_hub.core.exceptions import PersistenceError
from agent_hub.core.models.enums import BriefingScope
from agent_hub.core.models.focus_briefing import FocusBriefingRecord
from agent_hub.focus.types import FocusBriefing


def _to_briefing(row: FocusBriefingRecord) -> FocusBriefing:
    return FocusBriefing(
        scope=row.scope,
        briefing_text=row.briefing_text,
        key_highlights=row.key_highlights or [],
        prioritized_items=row.prioritized_items or [],
        total_items=row.total_items,
        urgent_count=row.urgent_count,
        generated_at=row.generated_at,
        expires_at=row.expires_at,
    )


class BriefingRepository:
    """Append-only store of generated briefings; the newest row per key wins."""

    def __init__(self, session_factory=async_session):
        self._session_factory = session_factory

    async def _first(self, stmt) -> FocusBriefing | None:
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).scalars().first()
        return _to_briefing(row) if row else None

    def _latest_stmt(self, user_id: str, scope: BriefingScope):
        return (
            select(FocusBriefingRecord)
            .where(
                FocusBriefingRecord.user_id == uuid.UUID(user_id),
                FocusBriefingRecord.scope == BriefingScope(scope).value,
            )
            .order_by(desc(FocusBriefingRecord.generated_at))
            .limit(1)
        )

    async def latest(self, user_id: str, scope: BriefingScope) -> FocusBriefing | None:
        return await self._first(self._latest_stmt(user_id, scope))

    async def latest_valid(
        self, user_id: str, scope: BriefingScope, now: datetime
    ) -> FocusBriefing | None:
        """Newest briefing with ``expires_at`` strictly after ``now``."""
        return await self._first(
            self._latest_stmt(user_id, scope).where(FocusBriefingRecord.expires_at > now)
        )

    async def save(self, user_id: str, briefing: FocusBriefing) -> None:
        payload = briefing.model_dump(mode="json")
        try:
            async with self._session_factory() as session:
                await session.execute(
                    insert(FocusBriefingRecord).values(
                        user_id=uuid.UUID(user_id),
                        scope=briefing.scope.value,
                        briefing_text=briefing.briefing_text,
                        key_highlights=payload["key_highlights"],
                        prioritized_items=payload["prioritized_items"],
                        total_items=briefing.total_items,
                        urgent_count=briefing.urgent_count,
                        generated_at=briefing.generated_at,
                        expires_at=briefing.expires_at,
                    )
                )
                await session.commit()
        except Exception as e:
            raise PersistenceError(f"Failed to store briefing: {e}") from e
