"""Tests for urgency bucketing, expiry and deadline windows."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from agent_hub.core.models.enums import BriefingScope, FocusItemType, UrgencyLevel
from agent_hub.focus.types import FocusBriefing, FocusItem, expiration_for, urgency_level, window_end

SP = ZoneInfo("America/Sao_Paulo")


@pytest.mark.parametrize(
    ("score", "level"),
    [
        (100, UrgencyLevel.critical),
        (90, UrgencyLevel.critical),
        (89, UrgencyLevel.high),
        (70, UrgencyLevel.high),
        (69, UrgencyLevel.medium),
        (40, UrgencyLevel.medium),
        (39, UrgencyLevel.low),
        (0, UrgencyLevel.low),
    ],
)
def test_urgency_level_buckets(score, level):
    assert urgency_level(score) == level


def test_focus_item_clamps_score_and_derives_level():
    item = FocusItem(id=1, type=FocusItemType.task, title="x", urgency_score=140)
    assert item.urgency_score == 100
    assert item.urgency_level == UrgencyLevel.critical
    assert FocusItem(id=2, type="task", title="y", urgency_score=-5).urgency_level == UrgencyLevel.low


def test_today_expires_at_end_of_local_day():
    generated = datetime(2026, 10, 14, 13, 0, tzinfo=UTC)  # 10:00 local
    expires = expiration_for(BriefingScope.today, generated, SP)
    assert expires == datetime(2026, 10, 14, 23, 59, 59, 999000, tzinfo=SP)
    assert expires > generated


def test_today_uses_local_date_not_utc_date():
    generated = datetime(2026, 10, 15, 1, 0, tzinfo=UTC)  # 22:00 on the 14th local
    expires = expiration_for(BriefingScope.today, generated, SP)
    assert expires.date().isoformat() == "2026-10-14"


def test_today_rolls_over_in_last_millisecond():
    generated = datetime(2026, 10, 14, 23, 59, 59, 999500, tzinfo=SP)
    expires = expiration_for(BriefingScope.today, generated, SP)
    assert expires == datetime(2026, 10, 15, 23, 59, 59, 999000, tzinfo=SP)


@pytest.mark.parametrize(
    ("day", "expected_sunday"),
    [
        (12, 18),  # Monday
        (14, 18),  # Wednesday
        (17, 18),  # Saturday
        (18, 25),  # Sunday rolls to the following Sunday
    ],
)
def test_week_expires_next_sunday(day, expected_sunday):
    generated = datetime(2026, 10, day, 9, 0, tzinfo=SP)
    expires = expiration_for(BriefingScope.week, generated, SP)
    assert expires == datetime(2026, 10, expected_sunday, 23, 59, 59, 999000, tzinfo=SP)
    assert expires.isoweekday() == 7


def test_window_end():
    now = datetime(2026, 10, 14, 13, 0, tzinfo=UTC)
    assert window_end(BriefingScope.today, now, SP) == datetime(2026, 10, 14, 23, 59, 59, 999000, tzinfo=SP)
    assert window_end(BriefingScope.week, now, SP) == now + timedelta(days=7)


def test_assemble_sorts_and_counts(now):
    items = [
        FocusItem(id=1, type="email", title="a", urgency_score=45),
        FocusItem(id=2, type="task", title="b", urgency_score=92),
        FocusItem(id=3, type="legal", title="c", urgency_score=71),
    ]
    briefing = FocusBriefing.assemble(BriefingScope.today, "text", [], items, now)

    assert [i.urgency_score for i in briefing.prioritized_items] == [92, 71, 45]
    assert briefing.total_items == 3
    assert briefing.urgent_count == 2
    assert briefing.expires_at > briefing.generated_at


def test_briefing_roundtrips_through_json(now):
    item = FocusItem(id=1, type="financial", title="rent", urgency_score=90, amount=100)
    briefing = FocusBriefing.assemble(BriefingScope.week, "t", ["h"], [item], now)

    restored = FocusBriefing.model_validate(briefing.model_dump(mode="json"))

    assert restored == briefing
    assert restored.prioritized_items[0].urgency_level == UrgencyLevel.critical
