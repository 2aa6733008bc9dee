"""Concurrency-safe map of live agent instances keyed by (user_id, agent_type).

Every state transition for a key happens inside ``locked(user_id, type)``,
so concurrent start/stop calls for the same key are serialised while
different keys proceed independently. A key's lock is dropped once no
caller holds or waits on it.
"""

import asyncio
import contextlib
from collections import Counter
from collections.abc import AsyncIterator

from agent_hub.agents.base import Agent
from agent_hub.core.models.enums import AgentType

AgentKey = tuple[str, AgentType]


class AgentRegistry:
    def __init__(self) -> None:
        self._agents: dict[AgentKey, Agent] = {}
        self._locks: dict[AgentKey, asyncio.Lock] = {}
        self._lock_users: Counter[AgentKey] = Counter()

    @contextlib.asynccontextmanager
    async def locked(self, user_id: str, agent_type: AgentType) -> AsyncIterator[None]:
        key = (user_id, agent_type)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if self._lock_users[key] <= 0:
                del self._lock_users[key]
                self._locks.pop(key, None)

    def get(self, user_id: str, agent_type: AgentType) -> Agent | None:
        return self._agents.get((user_id, agent_type))

    def put(self, agent: Agent) -> None:
        key = (agent.user_id, agent.agent_type)
        if key in self._agents:
            raise RuntimeError(f"Agent {agent.agent_id} already registered")
        self._agents[key] = agent

    def remove(self, user_id: str, agent_type: AgentType) -> Agent | None:
        return self._agents.pop((user_id, agent_type), None)

    def for_user(self, user_id: str) -> list[Agent]:
        return [a for (uid, _), a in self._agents.items() if uid == user_id]

    def user_ids(self) -> list[str]:
        return list(dict.fromkeys(uid for uid, _ in self._agents))

    def __len__(self) -> int:
        return len(self._agents)
