"""Tests for the deterministic briefing."""

from datetime import datetime

from agent_hub.core.models.enums import BriefingScope, UrgencyLevel
from agent_hub.focus.fallback import EMPTY_TEXT, fallback_briefing
from agent_hub.focus.types import CollectedData, FinancialRecord, LegalRecord, TaskRecord


def _by_id(briefing):
    return {(i.type.value, i.id): i for i in briefing.prioritized_items}


def test_single_urgent_financial_item(now):
    data = CollectedData(
        financial_items=[
            FinancialRecord(
                id=7,
                type="boleto",
                creditor="Electric Co",
                amount=12_345,
                due_date=now,
                status="pending",
                priority="urgent",
            )
        ]
    )

    briefing = fallback_briefing(data, BriefingScope.today, now)

    assert len(briefing.prioritized_items) == 1
    item = briefing.prioritized_items[0]
    assert item.urgency_score == 90
    assert item.urgency_level == UrgencyLevel.critical
    assert item.amount == 12_345
    assert item.deadline == now
    assert briefing.urgent_count == 1


def test_empty_data_gives_canned_briefing(now):
    for scope in BriefingScope:
        briefing = fallback_briefing(CollectedData(), scope, now)
        assert briefing.briefing_text == EMPTY_TEXT[scope]
        assert briefing.total_items == 0
        assert briefing.urgent_count == 0
        assert briefing.key_highlights == []
        assert briefing.prioritized_items == []


def test_scoring_table(sample_data, now):
    items = _by_id(fallback_briefing(sample_data, BriefingScope.today, now))

    assert items[("email", 1)].urgency_score == 75  # attention, boosted by VIP sender
    assert items[("email", 1)].is_vip is True
    assert items[("email", 2)].urgency_score == 60
    assert items[("task", 10)].urgency_score == 75  # medium priority, VIP stakeholder
    assert items[("task", 10)].urgency_level == UrgencyLevel.high
    assert items[("task", 10)].stakeholder == "Bruno"
    assert items[("financial", 20)].urgency_score == 90
    assert items[("legal", 30)].urgency_score == 80
    assert items[("legal", 30)].risk_level == "high"
    assert items[("commercial", 40)].urgency_score == 50
    assert items[("commercial", 40)].title == "Quotation: Globex"


def test_counts_match_input_and_items_sorted(sample_data, now):
    briefing = fallback_briefing(sample_data, BriefingScope.week, now)

    scores = [i.urgency_score for i in briefing.prioritized_items]
    assert scores == sorted(scores, reverse=True)
    assert briefing.total_items == sample_data.total == 6
    assert briefing.urgent_count == sum(
        1 for i in briefing.prioritized_items if i.urgency_level in ("critical", "high")
    )
    assert "including" in briefing.briefing_text
    assert briefing.key_highlights == [f"{briefing.urgent_count} item(s) need urgent attention"]


def test_no_urgent_items_highlight(now):
    data = CollectedData(
        tasks=[TaskRecord(id=1, title="Tidy inbox", status="pending", priority="low")],
    )
    briefing = fallback_briefing(data, BriefingScope.today, now)

    assert briefing.urgent_count == 0
    assert briefing.key_highlights == ["No critical items identified"]
    assert "including" not in briefing.briefing_text


def test_legal_critical_and_urgent_flag(now):
    data = CollectedData(
        legal_items=[
            LegalRecord(id=1, document_name="Lease", overall_risk="critical", status="pending"),
            LegalRecord(id=2, document_name="NDA", overall_risk="low", status="pending", is_urgent=True),
        ]
    )
    items = _by_id(fallback_briefing(data, BriefingScope.today, now))

    assert items[("legal", 1)].urgency_score == 95
    assert items[("legal", 2)].urgency_score == 80


def test_original_data_is_attached(sample_data, now):
    briefing = fallback_briefing(sample_data, BriefingScope.today, now)
    financial = _by_id(briefing)[("financial", 20)]
    assert financial.original_data["creditor"] == "Landlord"
    assert isinstance(datetime.fromisoformat(financial.original_data["due_date"]), datetime)
