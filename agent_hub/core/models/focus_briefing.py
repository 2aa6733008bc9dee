import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from agent_hub.core.models.base import Base


class FocusBriefingRecord(Base):
    __tablename__ = "focus_briefings"
    __table_args__ = (Index("ix_focus_briefings_user_scope", "user_id", "scope", "generated_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE")
    )
    scope: Mapped[str] = mapped_column(String(10))
    briefing_text: Mapped[str] = mapped_column(Text)
    key_highlights: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    prioritized_items: Mapped[list] = mapped_column(JSONB)
    total_items: Mapped[int] = mapped_column(Integer, default=0)
    urgent_count: Mapped[int] = mapped_column(Integer, default=0)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
