import uuid

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from agent_hub.core.models.base import Base, TimestampMixin


class UserConfig(Base, TimestampMixin):
    __tablename__ = "user_configs"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True
    )
    language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    vip_senders: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    # {"email": {"enabled": true, "interval_minutes": 10, ...}, ...}
    agent_settings: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    # Read on boot by AgentManager.auto_start_agents
    agents_active: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
