"""Per-user configuration: account status, VIP senders, per-agent settings.

Stored settings are JSON merged over ``DEFAULT_AGENT_SETTINGS`` so new agent
types get sane values for users that never configured them.
"""

import copy
import logging
import uuid
from typing import Any, Protocol

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert

from agent_hub.core.db import async_session
from agent_hub.core.exceptions import ConfigurationError, PersistenceError
from agent_hub.core.models.enums import AccountStatus, AgentType, ScheduleType
from agent_hub.core.models.user import User
from agent_hub.core.models.user_config import UserConfig

logger = logging.getLogger(__name__)


class AgentSettings(BaseModel):
    enabled: bool = True
    schedule: ScheduleType = ScheduleType.manual
    interval_minutes: int = Field(default=10, ge=1)
    options: dict[str, Any] = Field(default_factory=dict)


DEFAULT_AGENT_SETTINGS: dict[AgentType, dict[str, Any]] = {
    AgentType.email: {"enabled": True, "schedule": "interval", "interval_minutes": 10},
    AgentType.legal: {"enabled": True, "schedule": "manual"},
    AgentType.financial: {"enabled": True, "schedule": "manual"},
    AgentType.stablecoin: {"enabled": False, "schedule": "interval", "interval_minutes": 60},
    AgentType.focus: {"enabled": True, "schedule": "manual"},
}


class UserSettings(BaseModel):
    user_id: str
    account_status: AccountStatus = AccountStatus.pending
    language: str = "en"
    vip_senders: list[str] = Field(default_factory=list)
    agents_active: bool = False
    agents: dict[AgentType, AgentSettings] = Field(default_factory=dict)

    def agent(self, agent_type: AgentType) -> AgentSettings:
        if agent_type in self.agents:
            return self.agents[agent_type]
        return AgentSettings(**DEFAULT_AGENT_SETTINGS[agent_type])

    @property
    def can_run_agents(self) -> bool:
        return self.account_status == AccountStatus.active


def _deep_merge(base: dict, patch: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def build_user_settings(
    user_id: str,
    account_status: str | None,
    stored_agents: dict | None,
    *,
    language: str | None = None,
    vip_senders: list | None = None,
    agents_active: bool = False,
    default_language: str = "en",
) -> UserSettings:
    """Merge stored agent JSON over defaults into a validated ``UserSettings``."""
    raw = {t.value: dict(v) for t, v in DEFAULT_AGENT_SETTINGS.items()}
    agents = _deep_merge(raw, stored_agents or {})
    return UserSettings(
        user_id=user_id,
        account_status=account_status or AccountStatus.pending,
        language=language or default_language,
        vip_senders=[s.lower() for s in (vip_senders or [])],
        agents_active=agents_active,
        agents={AgentType(k): AgentSettings(**v) for k, v in agents.items() if k in AgentType.__members__},
    )


class ConfigStore(Protocol):
    async def load(self, user_id: str) -> UserSettings: ...

    async def save(self, user_id: str, patch: dict[str, Any]) -> UserSettings: ...

    async def set_agents_active(self, user_id: str, active: bool) -> None: ...

    async def list_active_user_ids(self) -> list[str]: ...


class SqlConfigStore:
    """ConfigStore backed by the ``users`` and ``user_configs`` tables."""

    def __init__(self, session_factory=async_session, default_language: str = "en"):
        self._session_factory = session_factory
        self._default_language = default_language

    async def load(self, user_id: str) -> UserSettings:
        uid = uuid.UUID(user_id)
        async with self._session_factory() as session:
            row = (
                await session.execute(
                    select(User.account_status, UserConfig)
                    .outerjoin(UserConfig, UserConfig.user_id == User.id)
                    .where(User.id == uid)
                )
            ).first()
        if row is None:
            raise ConfigurationError(f"Unknown user {user_id}")

        status, cfg = row
        return build_user_settings(
            user_id,
            status,
            cfg.agent_settings if cfg else None,
            language=cfg.language if cfg else None,
            vip_senders=cfg.vip_senders if cfg else None,
            agents_active=bool(cfg and cfg.agents_active),
            default_language=self._default_language,
        )

    async def save(self, user_id: str, patch: dict[str, Any]) -> UserSettings:
        """Deep-merge ``patch`` into the stored config.

        Recognised keys: ``agents`` (per-type settings), ``language``,
        ``vip_senders``.
        """
        current = await self.load(user_id)
        stored_agents = {t.value: s.model_dump(mode="json") for t, s in current.agents.items()}
        agents = _deep_merge(stored_agents, patch.get("agents", {}))
        for key, value in agents.items():
            try:
                AgentSettings(**value)
            except ValueError as e:
                raise ConfigurationError(f"Invalid settings for agent {key}: {e}") from e

        values: dict[str, Any] = {"agent_settings": agents}
        if "language" in patch:
            values["language"] = patch["language"]
        if "vip_senders" in patch:
            values["vip_senders"] = list(patch["vip_senders"])

        try:
            async with self._session_factory() as session:
                stmt = insert(UserConfig).values(user_id=uuid.UUID(user_id), **values)
                stmt = stmt.on_conflict_do_update(index_elements=[UserConfig.user_id], set_=values)
                await session.execute(stmt)
                await session.commit()
        except Exception as e:
            logger.exception("Failed to save config for user %s", user_id)
            raise PersistenceError(str(e)) from e

        return await self.load(user_id)

    async def set_agents_active(self, user_id: str, active: bool) -> None:
        try:
            async with self._session_factory() as session:
                stmt = insert(UserConfig).values(user_id=uuid.UUID(user_id), agents_active=active)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[UserConfig.user_id], set_={"agents_active": active}
                )
                await session.execute(stmt)
                await session.commit()
        except Exception as e:
            logger.exception("Failed to persist active flag for user %s", user_id)
            raise PersistenceError(str(e)) from e

    async def list_active_user_ids(self) -> list[str]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserConfig.user_id)
                .join(User, User.id == UserConfig.user_id)
                .where(
                    UserConfig.agents_active.is_(True),
                    User.account_status == AccountStatus.active.value,
                )
            )
            return [str(uid) for uid in result.scalars().all()]
