"""Generative prioritisation of collected candidates.

The model is asked for ``{briefingText, keyHighlights[], items[]}``. The reply
is decoded strictly, every item is matched back to its source record by
``(id, type)`` and domain fields are copied from that record. Counts, levels
and ordering are always derived locally. Any failure (backend error,
timeout, malformed reply) yields the deterministic fallback instead.
"""

import asyncio
import logging
import re
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from agent_hub.core.config import settings
from agent_hub.core.exceptions import MalformedResponse, UpstreamUnavailable
from agent_hub.core.llm.clients import GenerativeTextClient
from agent_hub.core.models.enums import BriefingScope, FocusItemType, UrgencyLevel
from agent_hub.core.observability import observe
from agent_hub.focus.fallback import empty_briefing, fallback_briefing, fallback_item, record_fields
from agent_hub.focus.prompts import SYSTEM_PROMPT, build_prompt
from agent_hub.focus.types import CollectedData, FocusBriefing, FocusItem

logger = logging.getLogger(__name__)


class ReplyItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    type: FocusItemType
    title: str
    description: str = ""
    urgency_score: int = Field(alias="urgencyScore")
    urgency_level: UrgencyLevel = Field(alias="urgencyLevel")
    urgency_reason: str = Field(default="", alias="urgencyReason")


class PrioritizationReply(BaseModel):
    model_config = ConfigDict(extra="ignore")

    briefing_text: str = Field(alias="briefingText")
    key_highlights: list[str] = Field(default_factory=list, alias="keyHighlights")
    items: list[ReplyItem]


_OPENING_FENCE = re.compile(r"^```[ \t]*[a-z]*\s*", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\s*```$")


def strip_code_fence(content: str) -> str:
    text = _OPENING_FENCE.sub("", content.strip(), count=1)
    return _CLOSING_FENCE.sub("", text, count=1).strip()


def decode_reply(content: str) -> PrioritizationReply:
    try:
        return PrioritizationReply.model_validate_json(strip_code_fence(content))
    except ValidationError as e:
        raise MalformedResponse(f"Invalid prioritisation reply: {e.error_count()} error(s)") from e


def reconcile(
    reply: PrioritizationReply,
    data: CollectedData,
    scope: BriefingScope,
    now: datetime,
    currency: str = "BRL",
) -> FocusBriefing:
    """Attach source-record fields to the model's items and rebuild the briefing.

    Unknown ``(id, type)`` pairs are rejected. Candidates the model left out
    are appended with their deterministic score.
    """
    index = data.index()
    items: list[FocusItem] = []
    seen: set[tuple[FocusItemType, int]] = set()

    for reply_item in reply.items:
        key = (reply_item.type, reply_item.id)
        record = index.get(key)
        if record is None:
            raise MalformedResponse(
                f"Reply references unknown item {reply_item.type.value}:{reply_item.id}"
            )
        if key in seen:
            continue
        seen.add(key)
        items.append(
            FocusItem(
                id=reply_item.id,
                type=reply_item.type,
                title=reply_item.title,
                description=reply_item.description,
                urgency_score=reply_item.urgency_score,
                urgency_reason=reply_item.urgency_reason,
                **record_fields(reply_item.type, record),
            )
        )

    missing = [(t, r) for t, r in data.records() if (t, r.id) not in seen]
    if missing:
        logger.info("Model omitted %d item(s); scoring them deterministically", len(missing))
        items.extend(fallback_item(t, r, currency) for t, r in missing)

    return FocusBriefing.assemble(
        BriefingScope(scope),
        reply.briefing_text or "Briefing not available.",
        reply.key_highlights,
        items,
        now,
    )


class PrioritizationEngine:
    def __init__(
        self,
        client: GenerativeTextClient | None = None,
        timeout_s: float | None = None,
        currency: str | None = None,
    ):
        self.client = client or GenerativeTextClient()
        self.timeout_s = timeout_s if timeout_s is not None else settings.prioritization_timeout_s
        self.currency = currency or settings.currency

    @observe(name="focus_prioritize")
    async def analyze(
        self,
        data: CollectedData,
        scope: BriefingScope,
        *,
        now: datetime | None = None,
        user_id: str | None = None,
        language: str | None = None,
    ) -> FocusBriefing:
        now = now or datetime.now(UTC)
        scope = BriefingScope(scope)
        if data.total == 0:
            return empty_briefing(scope, now)

        prompt = build_prompt(
            data,
            scope,
            now,
            language=language or settings.default_language,
            currency=self.currency,
            high_value_threshold=settings.high_value_threshold,
            urgent_days_threshold=settings.urgent_days_threshold,
        )
        try:
            content = await asyncio.wait_for(
                self.client.complete(
                    [{"role": "user", "content": prompt}],
                    SYSTEM_PROMPT,
                    user_id=user_id,
                    agent_type="focus",
                    operation=f"briefing_{scope.value}",
                ),
                timeout=self.timeout_s,
            )
            briefing = reconcile(decode_reply(content), data, scope, now, self.currency)
        except TimeoutError:
            logger.warning(
                "Prioritisation timed out after %.0fs for user %s, using fallback",
                self.timeout_s,
                user_id,
            )
        except (UpstreamUnavailable, MalformedResponse) as e:
            logger.warning("Prioritisation failed for user %s, using fallback: %s", user_id, e)
        except Exception:
            logger.exception("Unexpected prioritisation error for user %s, using fallback", user_id)
        else:
            logger.info(
                "Briefing generated for user %s: %d item(s), %d urgent",
                user_id,
                briefing.total_items,
                briefing.urgent_count,
            )
            return briefing

        return fallback_briefing(data, scope, now, self.currency)
