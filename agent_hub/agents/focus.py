from typing import Any

from agent_hub.core.config_store import AgentSettings
from agent_hub.core.models.enums import BriefingScope
from agent_hub.focus.cache import BriefingCache


class FocusAgentExecutor:
    """Refreshes the user's briefing for ``input["scope"]`` (default ``today``)."""

    def __init__(self, cache: BriefingCache):
        self.cache = cache

    async def execute(
        self, user_id: str, settings: AgentSettings, input: dict[str, Any]
    ) -> dict[str, Any]:
        scope = BriefingScope(input.get("scope") or settings.options.get("scope") or "today")
        briefing = await self.cache.refresh(user_id, scope)
        return {
            "scope": scope.value,
            "processed_count": briefing.total_items,
            "urgent_count": briefing.urgent_count,
            "generated_at": briefing.generated_at.isoformat(),
            "expires_at": briefing.expires_at.isoformat(),
        }
