"""Tests for generative prioritisation, reply decoding and fallback."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from agent_hub.core.exceptions import MalformedResponse, UpstreamUnavailable
from agent_hub.core.models.enums import BriefingScope, UrgencyLevel
from agent_hub.focus.engine import PrioritizationEngine, decode_reply, strip_code_fence
from agent_hub.focus.fallback import fallback_briefing
from agent_hub.focus.types import CollectedData


def _reply(items, text="Focus on the rent today.", highlights=None) -> str:
    return json.dumps(
        {
            "briefingText": text,
            "keyHighlights": highlights or ["Pay rent"],
            "items": items,
        }
    )


def _item(id, type, score, level="low", **extra):
    return {
        "id": id,
        "type": type,
        "title": f"{type} {id}",
        "description": "",
        "urgencyScore": score,
        "urgencyLevel": level,
        "urgencyReason": "reason",
        **extra,
    }


ALL_ITEMS = [
    _item(1, "email", 72, "high"),
    _item(2, "email", 20),
    _item(10, "task", 65, "medium"),
    _item(20, "financial", 97, "critical", amount=1),
    _item(30, "legal", 81, "high"),
    _item(40, "commercial", 45, "medium"),
]


def _engine(reply=None, error=None, timeout_s=5.0):
    client = AsyncMock()
    if error is not None:
        client.complete.side_effect = error
    else:
        client.complete.return_value = reply
    return PrioritizationEngine(client=client, timeout_s=timeout_s, currency="BRL"), client


def test_strip_code_fence():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}```') == '{"a": 1}'
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


def test_strip_code_fence_with_tag_variants():
    assert strip_code_fence('```JSON\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('``` json\n{"a": 1}\n```') == '{"a": 1}'
    assert decode_reply('```Json\n{"briefingText": "ok", "items": []}\n```').briefing_text == "ok"


def test_decode_reply_rejects_unknown_type():
    with pytest.raises(MalformedResponse):
        decode_reply(_reply([_item(1, "calendar", 50)]))


def test_decode_reply_rejects_invalid_json():
    with pytest.raises(MalformedResponse):
        decode_reply("Sure! Here is your briefing:")


async def test_valid_reply_is_reconciled(sample_data, now):
    engine, client = _engine(reply="```json\n" + _reply(ALL_ITEMS) + "\n```")

    briefing = await engine.analyze(sample_data, BriefingScope.today, now=now, user_id="u1")

    assert briefing.briefing_text == "Focus on the rent today."
    assert briefing.key_highlights == ["Pay rent"]
    assert [i.urgency_score for i in briefing.prioritized_items] == [97, 81, 72, 65, 45, 20]
    financial = briefing.prioritized_items[0]
    # domain fields come from the source record, not from the model
    assert financial.amount == 750_000
    assert financial.deadline == now
    task = next(i for i in briefing.prioritized_items if i.type == "task")
    assert task.is_vip is True
    assert task.stakeholder == "Bruno"
    legal = next(i for i in briefing.prioritized_items if i.type == "legal")
    assert legal.risk_level == "high"
    assert briefing.urgent_count == 3
    assert briefing.total_items == 6

    args = client.complete.call_args
    prompt = args.args[0][0]["content"]
    assert "[ID:20]" in prompt
    assert "BRL 7,500.00" in prompt


async def test_model_level_is_not_trusted(sample_data, now):
    items = [dict(i) for i in ALL_ITEMS]
    items[0]["urgencyLevel"] = "critical"  # score 72 -> high
    engine, _ = _engine(reply=_reply(items))

    briefing = await engine.analyze(sample_data, BriefingScope.today, now=now)

    email = next(i for i in briefing.prioritized_items if i.type == "email" and i.id == 1)
    assert email.urgency_level == UrgencyLevel.high


async def test_omitted_items_are_appended_with_fallback_scores(sample_data, now):
    engine, _ = _engine(reply=_reply([_item(20, "financial", 95, "critical")]))

    briefing = await engine.analyze(sample_data, BriefingScope.today, now=now)

    assert briefing.total_items == sample_data.total
    legal = next(i for i in briefing.prioritized_items if i.type == "legal")
    assert legal.urgency_score == 80
    assert briefing.briefing_text == "Focus on the rent today."


async def test_duplicate_items_kept_once(sample_data, now):
    engine, _ = _engine(reply=_reply(ALL_ITEMS + [_item(20, "financial", 10)]))

    briefing = await engine.analyze(sample_data, BriefingScope.today, now=now)

    assert briefing.total_items == 6
    financial = next(i for i in briefing.prioritized_items if i.type == "financial")
    assert financial.urgency_score == 97


@pytest.mark.parametrize(
    "reply",
    [
        "not json at all",
        _reply([_item(999, "task", 50)]),  # unknown id
        _reply([_item(1, "task", 50)]),  # id exists only as an email
        json.dumps({"briefingText": "x"}),  # missing items
    ],
)
async def test_bad_reply_falls_back(sample_data, now, reply):
    engine, _ = _engine(reply=reply)

    briefing = await engine.analyze(sample_data, BriefingScope.today, now=now)

    expected = fallback_briefing(sample_data, BriefingScope.today, now)
    assert briefing == expected
    assert briefing.total_items == sample_data.total


async def test_backend_error_falls_back(sample_data, now):
    engine, _ = _engine(error=UpstreamUnavailable("all models failed"))

    briefing = await engine.analyze(sample_data, BriefingScope.week, now=now)

    assert briefing == fallback_briefing(sample_data, BriefingScope.week, now)


async def test_unexpected_error_falls_back(sample_data, now):
    engine, _ = _engine(error=KeyError("content"))

    briefing = await engine.analyze(sample_data, BriefingScope.today, now=now)

    assert briefing == fallback_briefing(sample_data, BriefingScope.today, now)


async def test_timeout_falls_back(sample_data, now):
    async def hang(*args, **kwargs):
        await asyncio.sleep(10)

    engine, client = _engine(timeout_s=0.01)
    client.complete.side_effect = hang

    briefing = await engine.analyze(sample_data, BriefingScope.today, now=now)

    assert briefing == fallback_briefing(sample_data, BriefingScope.today, now)


async def test_empty_data_short_circuits(now):
    engine, client = _engine(reply=_reply([]))

    briefing = await engine.analyze(CollectedData(), BriefingScope.today, now=now)

    client.complete.assert_not_called()
    assert briefing.total_items == 0
    assert briefing.key_highlights == []
