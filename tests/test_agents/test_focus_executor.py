from unittest.mock import AsyncMock

from agent_hub.agents.factory import AgentFactory
from agent_hub.agents.focus import FocusAgentExecutor
from agent_hub.agents.manager import AgentManager
from agent_hub.agents.registry import AgentRegistry
from agent_hub.core.config_store import AgentSettings
from agent_hub.core.models.enums import AgentType, BriefingScope
from agent_hub.focus.fallback import empty_briefing


async def test_executor_refreshes_requested_scope(now):
    cache = AsyncMock()
    cache.refresh.return_value = empty_briefing(BriefingScope.week, now)

    result = await FocusAgentExecutor(cache).execute("u1", AgentSettings(), {"scope": "week"})

    cache.refresh.assert_awaited_once_with("u1", BriefingScope.week)
    assert result["scope"] == "week"
    assert result["processed_count"] == 0


async def test_executor_defaults_to_today(now):
    cache = AsyncMock()
    cache.refresh.return_value = empty_briefing(BriefingScope.today, now)

    await FocusAgentExecutor(cache).execute("u1", AgentSettings(), {})

    cache.refresh.assert_awaited_once_with("u1", BriefingScope.today)


async def test_run_once_through_manager(config_store, user_id, now):
    cache = AsyncMock()
    cache.refresh.return_value = empty_briefing(BriefingScope.today, now)
    config_store.add_user(user_id)
    manager = AgentManager(
        AgentRegistry(), AgentFactory({AgentType.focus: FocusAgentExecutor(cache)}), config_store
    )

    result = await manager.run_agent_once(user_id, AgentType.focus, {"scope": "today"})

    assert result.success is True
    assert result.data["urgent_count"] == 0
