"""Agent lifecycle controller.

Owns the live agent instances of every user through an ``AgentRegistry``.
Every public method returns an ``OperationResult`` and never raises: failures
are caught and logged per (user, agent type) so one user's misconfiguration
cannot stop other users or sibling agents from running.
"""

import asyncio
import logging
from typing import Any

from agent_hub.agents.base import Agent, agent_id_for
from agent_hub.agents.factory import AgentFactory
from agent_hub.agents.registry import AgentRegistry
from agent_hub.core.config_store import ConfigStore, UserSettings
from agent_hub.core.exceptions import AgentHubError, ConfigurationError
from agent_hub.core.models.enums import AgentType
from agent_hub.core.results import OperationResult

logger = logging.getLogger(__name__)


def _require_runnable(settings: UserSettings) -> None:
    if not settings.can_run_agents:
        raise ConfigurationError(
            f"Account status '{settings.account_status.value}' does not allow running agents"
        )


def _agent_type(value: AgentType | str) -> AgentType:
    try:
        return AgentType(value)
    except ValueError as e:
        raise ConfigurationError(f"Unknown agent type '{value}'") from e


def _fail(user_id: str, agent_type: AgentType | str | None, op: str, exc: Exception) -> OperationResult:
    target = getattr(agent_type, "value", agent_type) or "*"
    if isinstance(exc, AgentHubError):
        logger.warning("%s failed for user %s agent %s: %s", op, user_id, target, exc)
    else:
        logger.exception("%s failed for user %s agent %s", op, user_id, target)
    return OperationResult.fail(exc)


class AgentManager:
    def __init__(self, registry: AgentRegistry, factory: AgentFactory, config_store: ConfigStore):
        self.registry = registry
        self.factory = factory
        self.config_store = config_store

    async def _start(self, settings: UserSettings, agent_type: AgentType) -> tuple[Agent, bool]:
        """Start one agent under its key lock. Returns (agent, created)."""
        async with self.registry.locked(settings.user_id, agent_type):
            existing = self.registry.get(settings.user_id, agent_type)
            if existing is not None and existing.is_running:
                return existing, False
            agent_settings = settings.agent(agent_type)
            if not agent_settings.enabled:
                raise ConfigurationError(f"Agent '{agent_type.value}' is disabled for this user")
            agent = self.factory.build(settings.user_id, agent_type, agent_settings)
            if existing is not None:
                self.registry.remove(settings.user_id, agent_type)
            self.registry.put(agent)
            agent.start()
            return agent, True

    async def _stop(self, user_id: str, agent_type: AgentType) -> bool:
        async with self.registry.locked(user_id, agent_type):
            agent = self.registry.remove(user_id, agent_type)
            if agent is None:
                return False
            await agent.stop()
            return True

    # ------------------------------------------------------------------
    # Lifecycle

    async def initialize_for_user(self, user_id: str) -> OperationResult:
        """Start every agent type the user has enabled. Idempotent per type."""
        try:
            settings = await self.config_store.load(user_id)
            _require_runnable(settings)
        except Exception as e:
            return _fail(user_id, None, "initialize", e)

        started: list[str] = []
        skipped: list[str] = []
        errors: dict[str, str] = {}
        first_error: str | None = None
        for agent_type in AgentType:
            if not settings.agent(agent_type).enabled:
                continue
            if not self.factory.has(agent_type):
                logger.warning(
                    "No executor for agent %s, skipping for user %s", agent_type.value, user_id
                )
                skipped.append(agent_type.value)
                continue
            try:
                await self._start(settings, agent_type)
                started.append(agent_type.value)
            except Exception as e:
                failure = _fail(user_id, agent_type, "initialize", e)
                errors[agent_type.value] = failure.message
                first_error = first_error or failure.error

        logger.info("Initialized agents for user %s: %s", user_id, ", ".join(started) or "none")
        return OperationResult(
            success=not errors,
            data={"started": started, "skipped": skipped, "errors": errors},
            message=f"{len(started)} agent(s) running",
            error=first_error,
        )

    async def start_agent(self, user_id: str, agent_type: AgentType) -> OperationResult:
        try:
            agent_type = _agent_type(agent_type)
            settings = await self.config_store.load(user_id)
            _require_runnable(settings)
            agent, created = await self._start(settings, agent_type)
        except Exception as e:
            return _fail(user_id, agent_type, "start", e)
        return OperationResult.ok(
            agent.snapshot().to_dict(),
            "Agent started" if created else "Agent already running",
        )

    async def stop_agent(self, user_id: str, agent_type: AgentType) -> OperationResult:
        try:
            agent_type = _agent_type(agent_type)
            stopped = await self._stop(user_id, agent_type)
        except Exception as e:
            return _fail(user_id, agent_type, "stop", e)
        return OperationResult.ok(
            {"agent_id": agent_id_for(agent_type, user_id), "stopped": stopped},
            "Agent stopped" if stopped else "Agent was not running",
        )

    async def stop_for_user(self, user_id: str) -> OperationResult:
        """Stop and remove every agent of one user (used on suspension)."""
        stopped: list[str] = []
        errors: dict[str, str] = {}
        for agent in self.registry.for_user(user_id):
            try:
                if await self._stop(user_id, agent.agent_type):
                    stopped.append(agent.agent_type.value)
            except Exception as e:
                errors[agent.agent_type.value] = _fail(user_id, agent.agent_type, "stop", e).message
        if stopped:
            logger.info("Stopped agents for user %s: %s", user_id, ", ".join(stopped))
        return OperationResult(
            success=not errors,
            data={"stopped": stopped, "errors": errors},
            message=f"{len(stopped)} agent(s) stopped",
        )

    async def run_agent_once(
        self, user_id: str, agent_type: AgentType, input: dict[str, Any] | None = None
    ) -> OperationResult:
        """Execute an agent a single time without changing its running state.

        A live instance is reused so its run counters advance; otherwise a
        transient instance is built and discarded.
        """
        try:
            agent_type = _agent_type(agent_type)
            agent = self.registry.get(user_id, agent_type)
            if agent is None:
                settings = await self.config_store.load(user_id)
                _require_runnable(settings)
                agent = self.factory.build(user_id, agent_type, settings.agent(agent_type))
            result = await agent.run_once(input)
        except Exception as e:
            return _fail(user_id, agent_type, "run_once", e)
        return OperationResult.ok(result, "Agent executed")

    async def update_agent_config(
        self, user_id: str, agent_type: AgentType | None = None
    ) -> OperationResult:
        """Apply new configuration by stopping and recreating agents."""
        if agent_type is None:
            await self.stop_for_user(user_id)
            return await self.initialize_for_user(user_id)

        try:
            agent_type = _agent_type(agent_type)
            await self._stop(user_id, agent_type)
            settings = await self.config_store.load(user_id)
            _require_runnable(settings)
            if not settings.agent(agent_type).enabled:
                return OperationResult.ok(None, "Agent disabled, not restarted")
            agent, _ = await self._start(settings, agent_type)
        except Exception as e:
            return _fail(user_id, agent_type, "update_config", e)
        return OperationResult.ok(agent.snapshot().to_dict(), "Agent restarted with new config")

    async def set_agents_active_state(self, user_id: str, active: bool) -> OperationResult:
        """Persist the flag ``auto_start_agents`` reads after a restart."""
        try:
            await self.config_store.set_agents_active(user_id, active)
        except Exception as e:
            return _fail(user_id, None, "set_active", e)
        logger.info("Agents active flag for user %s -> %s", user_id, active)
        return OperationResult.ok({"agents_active": active})

    async def stop_all(self) -> OperationResult:
        """Graceful shutdown: stop every agent of every user."""
        results = await asyncio.gather(
            *(self.stop_for_user(uid) for uid in self.registry.user_ids())
        )
        logger.info("All agents stopped")
        return OperationResult(
            success=all(r.success for r in results),
            data={"users": len(results)},
            message="All agents stopped",
        )

    async def auto_start_agents(self) -> OperationResult:
        """Rebuild live agents from the persisted active flags on boot."""
        try:
            user_ids = await self.config_store.list_active_user_ids()
        except Exception as e:
            return _fail("*", None, "auto_start", e)

        if not user_ids:
            logger.info("No users with active agents to auto-start")
            return OperationResult.ok({"started": [], "failed": []})

        logger.info("Auto-starting agents for %d user(s)", len(user_ids))
        started: list[str] = []
        failed: list[str] = []
        for user_id in user_ids:
            result = await self.initialize_for_user(user_id)
            (started if result.success else failed).append(user_id)

        return OperationResult(
            success=not failed,
            data={"started": started, "failed": failed},
            message=f"Auto-start done: {len(started)} ok, {len(failed)} failed",
        )

    # ------------------------------------------------------------------
    # Introspection

    def get_user_agents(self, user_id: str) -> OperationResult:
        return OperationResult.ok([a.snapshot().to_dict() for a in self.registry.for_user(user_id)])

    def get_agent_info(self, user_id: str, agent_id: str) -> OperationResult:
        for agent in self.registry.for_user(user_id):
            if agent.agent_id == agent_id:
                return OperationResult.ok(agent.snapshot().to_dict())
        return OperationResult.fail(f"Agent {agent_id} not found", error="NotFound")

    def get_active_users(self) -> OperationResult:
        return OperationResult.ok(self.registry.user_ids())

    def has_live_agent(self, user_id: str, agent_type: AgentType) -> bool:
        return self.registry.get(user_id, agent_type) is not None
