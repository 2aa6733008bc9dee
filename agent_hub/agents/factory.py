from typing import Any, Protocol

from apscheduler.schedulers.base import BaseScheduler

from agent_hub.agents.base import Agent
from agent_hub.core.config_store import AgentSettings
from agent_hub.core.exceptions import ConfigurationError
from agent_hub.core.models.enums import AgentType


class AgentExecutor(Protocol):
    """Domain logic of one agent type."""

    async def execute(
        self, user_id: str, settings: AgentSettings, input: dict[str, Any]
    ) -> dict[str, Any]: ...


class AgentFactory:
    def __init__(
        self,
        executors: dict[AgentType, AgentExecutor] | None = None,
        scheduler: BaseScheduler | None = None,
    ):
        self._executors: dict[AgentType, AgentExecutor] = dict(executors or {})
        self.scheduler = scheduler

    def register(self, agent_type: AgentType, executor: AgentExecutor) -> None:
        self._executors[agent_type] = executor

    def has(self, agent_type: AgentType) -> bool:
        return agent_type in self._executors

    def build(self, user_id: str, agent_type: AgentType, settings: AgentSettings) -> Agent:
        executor = self._executors.get(agent_type)
        if executor is None:
            raise ConfigurationError(f"No executor registered for agent type '{agent_type.value}'")
        return Agent(user_id, agent_type, settings, executor, scheduler=self.scheduler)
