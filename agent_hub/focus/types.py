"""Briefing data shapes shared by the aggregation, prioritisation and cache stages."""

from collections.abc import Iterator
from datetime import datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field, computed_field, field_validator

from agent_hub.core.config import settings
from agent_hub.core.models.enums import BriefingScope, FocusItemType, UrgencyLevel

END_OF_DAY = time(23, 59, 59, 999000)


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def clamp_score(score: int) -> int:
    return max(0, min(100, int(score)))


def urgency_level(score: int) -> UrgencyLevel:
    """Bucket a 0-100 score: 90+ critical, 70+ high, 40+ medium, else low."""
    score = clamp_score(score)
    if score >= 90:
        return UrgencyLevel.critical
    if score >= 70:
        return UrgencyLevel.high
    if score >= 40:
        return UrgencyLevel.medium
    return UrgencyLevel.low


def _end_of_day(day, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, END_OF_DAY, tzinfo=tz)


def expiration_for(scope: BriefingScope, generated_at: datetime, tz: ZoneInfo | None = None) -> datetime:
    """``today`` ends at 23:59:59.999 local; ``week`` at 23:59:59.999 of the next Sunday.

    A Sunday generation expires on the following Sunday.
    """
    tz = tz or local_tz()
    local = generated_at.astimezone(tz)
    if BriefingScope(scope) == BriefingScope.today:
        expires = _end_of_day(local.date(), tz)
        if expires <= local:
            expires = _end_of_day(local.date() + timedelta(days=1), tz)
        return expires

    # isoweekday: Monday=1 .. Sunday=7
    days_until_sunday = 7 - (local.isoweekday() % 7)
    return _end_of_day(local.date() + timedelta(days=days_until_sunday), tz)


def window_end(scope: BriefingScope, now: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Upper bound for deadline filters: end of today, or now + 7 days."""
    tz = tz or local_tz()
    if BriefingScope(scope) == BriefingScope.today:
        return _end_of_day(now.astimezone(tz).date(), tz)
    return now + timedelta(days=7)


# ---------------------------------------------------------------------------
# Normalised domain projections


class EmailRecord(BaseModel):
    id: int
    subject: str | None = None
    from_email: str
    from_name: str | None = None
    priority: str
    action: str
    requires_action: bool = False
    deadline: str | None = None
    email_date: datetime | None = None
    snippet: str | None = None
    is_vip: bool = False


class TaskRecord(BaseModel):
    id: int
    title: str
    description: str = ""
    status: str
    priority: str
    deadline_date: datetime | None = None
    stakeholder_name: str = ""
    stakeholder_company: str | None = None
    stakeholder_importance: str | None = None
    email_subject: str = ""


class FinancialRecord(BaseModel):
    id: int
    type: str
    description: str = ""
    creditor: str
    amount: int  # cents
    due_date: datetime | None = None
    status: str
    priority: str | None = None
    requires_approval: bool = False


class LegalRecord(BaseModel):
    id: int
    document_name: str
    document_type: str | None = None
    summary: str | None = None
    overall_risk: str
    required_action: str | None = None
    action_deadline: str | None = None
    is_urgent: bool = False
    status: str


class CommercialRecord(BaseModel):
    id: int
    type: str
    status: str
    priority: str | None = None
    company_name: str | None = None
    contact_name: str | None = None
    product_service: str | None = None
    details: str | None = None
    requested_amount: int | None = None  # cents
    currency: str | None = None
    deadline: datetime | None = None
    suggested_action: str | None = None


DomainRecord = EmailRecord | TaskRecord | FinancialRecord | LegalRecord | CommercialRecord


class CollectedData(BaseModel):
    emails: list[EmailRecord] = Field(default_factory=list)
    tasks: list[TaskRecord] = Field(default_factory=list)
    financial_items: list[FinancialRecord] = Field(default_factory=list)
    legal_items: list[LegalRecord] = Field(default_factory=list)
    commercial_items: list[CommercialRecord] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.emails)
            + len(self.tasks)
            + len(self.financial_items)
            + len(self.legal_items)
            + len(self.commercial_items)
        )

    def records(self) -> Iterator[tuple[FocusItemType, DomainRecord]]:
        for record in self.emails:
            yield FocusItemType.email, record
        for record in self.tasks:
            yield FocusItemType.task, record
        for record in self.financial_items:
            yield FocusItemType.financial, record
        for record in self.legal_items:
            yield FocusItemType.legal, record
        for record in self.commercial_items:
            yield FocusItemType.commercial, record

    def index(self) -> dict[tuple[FocusItemType, int], DomainRecord]:
        return {(t, r.id): r for t, r in self.records()}


# ---------------------------------------------------------------------------
# Briefing


class FocusItem(BaseModel):
    id: int
    type: FocusItemType
    title: str
    description: str = ""
    urgency_score: int
    urgency_reason: str = ""
    deadline: datetime | None = None
    amount: int | None = None
    stakeholder: str | None = None
    is_vip: bool = False
    risk_level: str | None = None
    original_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("urgency_score", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> int:
        return clamp_score(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def urgency_level(self) -> UrgencyLevel:
        return urgency_level(self.urgency_score)


class FocusBriefing(BaseModel):
    scope: BriefingScope
    briefing_text: str
    key_highlights: list[str] = Field(default_factory=list)
    prioritized_items: list[FocusItem] = Field(default_factory=list)
    total_items: int = 0
    urgent_count: int = 0
    generated_at: datetime
    expires_at: datetime

    @classmethod
    def assemble(
        cls,
        scope: BriefingScope,
        briefing_text: str,
        key_highlights: list[str],
        items: list[FocusItem],
        generated_at: datetime,
    ) -> "FocusBriefing":
        """Sort items and derive counts and expiry locally."""
        ordered = sorted(items, key=lambda i: i.urgency_score, reverse=True)
        return cls(
            scope=scope,
            briefing_text=briefing_text,
            key_highlights=key_highlights,
            prioritized_items=ordered,
            total_items=len(ordered),
            urgent_count=sum(
                1 for i in ordered if i.urgency_level in (UrgencyLevel.critical, UrgencyLevel.high)
            ),
            generated_at=generated_at,
            expires_at=expiration_for(scope, generated_at),
        )
