"""Deterministic briefing used when the generative backend is unavailable.

Scoring table (score -> level via ``urgency_level``):

    email       urgent 80, attention 60, otherwise 40; VIP sender at least 75
    task        critical 90, high 70, otherwise 50; VIP stakeholder at least 75
    financial   urgent 90, high 75, otherwise 50
    legal       critical risk 95, high risk 80, otherwise 50; urgent flag at least 80
    commercial  urgent 90, high 75, otherwise 50
"""

from datetime import datetime
from typing import Any

from agent_hub.core.models.enums import BriefingScope, FocusItemType
from agent_hub.focus.prompts import format_amount, truncate
from agent_hub.focus.types import (
    CollectedData,
    CommercialRecord,
    DomainRecord,
    EmailRecord,
    FinancialRecord,
    FocusBriefing,
    FocusItem,
    LegalRecord,
    TaskRecord,
)

VIP_MIN_SCORE = 75
URGENT_LEGAL_MIN_SCORE = 80

EMPTY_TEXT = {
    BriefingScope.today: "Nothing pending for today. Enjoy your day!",
    BriefingScope.week: "Your week is clear of pending items. Nice work!",
}

COMMERCIAL_LABELS = {
    "quotation_request": "Quotation",
    "sales_inquiry": "Sales inquiry",
    "order_confirmation": "Order confirmation",
    "lead": "Lead",
    "other": "Other",
}


def record_fields(item_type: FocusItemType, record: DomainRecord) -> dict[str, Any]:
    """Domain fields copied from the source record, never taken from the model."""
    fields: dict[str, Any] = {"original_data": record.model_dump(mode="json")}
    if isinstance(record, FinancialRecord):
        fields["amount"] = record.amount
        fields["deadline"] = record.due_date
    elif isinstance(record, TaskRecord):
        fields["deadline"] = record.deadline_date
        fields["stakeholder"] = record.stakeholder_name or None
        fields["is_vip"] = record.stakeholder_importance == "vip"
    elif isinstance(record, LegalRecord):
        fields["risk_level"] = record.overall_risk
    elif isinstance(record, CommercialRecord):
        fields["amount"] = record.requested_amount
        fields["deadline"] = record.deadline
        fields["stakeholder"] = record.company_name or record.contact_name
    elif isinstance(record, EmailRecord):
        fields["is_vip"] = record.is_vip
        fields["stakeholder"] = record.from_name or record.from_email
    return fields


def _tiered(value: str | None, tiers: dict[str, int], default: int) -> int:
    return tiers.get((value or "").lower(), default)


def fallback_item(item_type: FocusItemType, record: DomainRecord, currency: str = "BRL") -> FocusItem:
    if isinstance(record, EmailRecord):
        score = _tiered(record.priority, {"urgent": 80, "attention": 60}, 40)
        reason = "Email requires attention"
        if record.is_vip:
            score = max(score, VIP_MIN_SCORE)
            reason = "Email from a VIP sender"
        title = record.subject or "Email without subject"
        description = f"From: {record.from_name or record.from_email}"
    elif isinstance(record, TaskRecord):
        score = _tiered(record.priority, {"critical": 90, "high": 70}, 50)
        if record.stakeholder_importance == "vip":
            score = max(score, VIP_MIN_SCORE)
        title = record.title
        description = truncate(record.description, 100)
        reason = f"Stakeholder: {record.stakeholder_name}" if record.stakeholder_name else "Pending task"
    elif isinstance(record, FinancialRecord):
        score = _tiered(record.priority, {"urgent": 90, "high": 75}, 50)
        title = f"{record.type}: {record.creditor}"
        description = truncate(record.description, 100)
        reason = f"Amount: {format_amount(record.amount, currency)}"
    elif isinstance(record, LegalRecord):
        score = _tiered(record.overall_risk, {"critical": 95, "high": 80}, 50)
        if record.is_urgent:
            score = max(score, URGENT_LEGAL_MIN_SCORE)
        title = record.document_name
        description = truncate(record.summary, 100) or "Legal document"
        reason = f"Risk: {record.overall_risk}"
    else:
        score = _tiered(record.priority, {"urgent": 90, "high": 75}, 50)
        label = COMMERCIAL_LABELS.get(record.type, record.type)
        title = f"{label}: {record.company_name or record.contact_name or 'Client'}"
        description = (
            truncate(record.product_service, 100)
            or truncate(record.details, 100)
            or "Commercial opportunity"
        )
        reason = record.suggested_action or f"{label} opportunity"

    return FocusItem(
        id=record.id,
        type=item_type,
        title=title,
        description=description,
        urgency_score=score,
        urgency_reason=reason,
        **record_fields(item_type, record),
    )


def empty_briefing(scope: BriefingScope, now: datetime) -> FocusBriefing:
    scope = BriefingScope(scope)
    return FocusBriefing.assemble(scope, EMPTY_TEXT[scope], [], [], now)


def fallback_briefing(
    data: CollectedData, scope: BriefingScope, now: datetime, currency: str = "BRL"
) -> FocusBriefing:
    """Score every collected record with the fixed table above."""
    if data.total == 0:
        return empty_briefing(scope, now)

    items = [fallback_item(t, r, currency) for t, r in data.records()]
    briefing = FocusBriefing.assemble(BriefingScope(scope), "", [], items, now)

    urgent = briefing.urgent_count
    text = f"You have {briefing.total_items} pending item(s)"
    if urgent:
        text += f", including {urgent} urgent"
    text += ". Review the list below to prioritise your actions."
    briefing.briefing_text = text
    briefing.key_highlights = (
        [f"{urgent} item(s) need urgent attention"] if urgent else ["No critical items identified"]
    )
    return briefing
