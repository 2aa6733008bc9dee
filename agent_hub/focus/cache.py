"""Time-boxed briefing cache per (user, scope).

Reads serve the newest non-expired briefing and regenerate on miss or
expiry. ``refresh`` always regenerates. A failed write is logged and the
fresh briefing is still returned to the caller.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from agent_hub.core.config_store import ConfigStore
from agent_hub.core.exceptions import AgentHubError, PersistenceError
from agent_hub.core.models.enums import BriefingScope
from agent_hub.core.results import OperationResult
from agent_hub.focus.aggregator import DataAggregator
from agent_hub.focus.engine import PrioritizationEngine
from agent_hub.focus.repository import BriefingRepository
from agent_hub.focus.types import FocusBriefing

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BriefingCache:
    def __init__(
        self,
        aggregator: DataAggregator,
        engine: PrioritizationEngine,
        repository: BriefingRepository,
        config_store: ConfigStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.aggregator = aggregator
        self.engine = engine
        self.repository = repository
        self.config_store = config_store
        self.clock = clock

    async def _lookup(self, user_id: str, scope: BriefingScope) -> tuple[FocusBriefing, bool]:
        try:
            cached = await self.repository.latest_valid(user_id, scope, self.clock())
        except Exception:
            logger.exception("Briefing cache read failed for user %s scope=%s", user_id, scope.value)
            cached = None
        if cached is not None:
            return cached, True
        return await self.refresh(user_id, scope), False

    async def get(self, user_id: str, scope: BriefingScope) -> FocusBriefing:
        briefing, _ = await self._lookup(user_id, BriefingScope(scope))
        return briefing

    async def refresh(self, user_id: str, scope: BriefingScope) -> FocusBriefing:
        """Regenerate: aggregate, prioritise, then store."""
        scope = BriefingScope(scope)
        user = await self.config_store.load(user_id)

        now = self.clock()
        try:
            previous = await self.repository.latest(user_id, scope)
        except Exception:
            logger.exception("Could not read previous briefing for user %s", user_id)
            previous = None
        if previous is not None and now <= previous.generated_at:
            now = previous.generated_at + timedelta(milliseconds=1)

        data = await self.aggregator.collect(user_id, scope, now=now, vip_senders=user.vip_senders)
        briefing = await self.engine.analyze(
            data, scope, now=now, user_id=user_id, language=user.language
        )

        try:
            await self.repository.save(user_id, briefing)
        except PersistenceError as e:
            logger.warning("Briefing for user %s not cached: %s", user_id, e)
        return briefing

    async def get_briefing(self, user_id: str, scope: BriefingScope) -> OperationResult:
        try:
            briefing, cached = await self._lookup(user_id, BriefingScope(scope))
        except AgentHubError as e:
            logger.warning("Briefing read failed for user %s: %s", user_id, e)
            return OperationResult.fail(e)
        except Exception as e:
            logger.exception("Briefing read failed for user %s", user_id)
            return OperationResult.fail(e)
        return OperationResult.ok({"cached": cached, "briefing": briefing.model_dump(mode="json")})

    async def refresh_briefing(self, user_id: str, scope: BriefingScope) -> OperationResult:
        try:
            briefing = await self.refresh(user_id, BriefingScope(scope))
        except AgentHubError as e:
            logger.warning("Briefing refresh failed for user %s: %s", user_id, e)
            return OperationResult.fail(e)
        except Exception as e:
            logger.exception("Briefing refresh failed for user %s", user_id)
            return OperationResult.fail(e)
        return OperationResult.ok({"cached": False, "briefing": briefing.model_dump(mode="json")})
