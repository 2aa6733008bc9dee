"""Read-only domain stores backing the briefing aggregation.

Each store issues one bounded query per call and projects rows into the
normalised record types from ``agent_hub.focus.types``.
"""

import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from sqlalchemy import desc, or_, select

from agent_hub.core.db import async_session
from agent_hub.core.models.action_item import ActionItem
from agent_hub.core.models.classified_email import ClassifiedEmail
from agent_hub.core.models.commercial_item import CommercialItem
from agent_hub.core.models.financial_item import FinancialItem
from agent_hub.core.models.legal_analysis import LegalAnalysis
from agent_hub.focus.types import (
    CommercialRecord,
    DomainRecord,
    EmailRecord,
    FinancialRecord,
    LegalRecord,
    TaskRecord,
)

EMAIL_PRIORITIES = ("urgent", "attention")
TASK_STATUSES = ("pending", "in_progress", "waiting")
FINANCIAL_STATUSES = ("pending",)
LEGAL_STATUSES = ("pending",)
COMMERCIAL_STATUSES = ("pending", "in_progress")


class DomainStore(Protocol):
    async def query(
        self,
        user_id: str,
        window_end: datetime,
        status_filter: Sequence[str],
        limit: int,
    ) -> list[DomainRecord]: ...


class _SqlStore:
    def __init__(self, session_factory=async_session):
        self._session_factory = session_factory

    async def _scalars(self, stmt) -> list:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())


class EmailStore(_SqlStore):
    """Unarchived, unread or action-required emails. Not time-windowed."""

    async def query(self, user_id, window_end, status_filter=EMAIL_PRIORITIES, limit=20):
        rows = await self._scalars(
            select(ClassifiedEmail)
            .where(
                ClassifiedEmail.user_id == uuid.UUID(user_id),
                ClassifiedEmail.is_archived.is_(False),
                or_(ClassifiedEmail.is_read.is_(False), ClassifiedEmail.requires_action.is_(True)),
                ClassifiedEmail.priority.in_(status_filter),
            )
            .order_by(desc(ClassifiedEmail.email_date))
            .limit(limit)
        )
        return [
            EmailRecord(
                id=r.id,
                subject=r.subject,
                from_email=r.from_email,
                from_name=r.from_name,
                priority=r.priority,
                action=r.action,
                requires_action=r.requires_action,
                deadline=r.deadline,
                email_date=r.email_date,
                snippet=r.snippet,
            )
            for r in rows
        ]


class TaskStore(_SqlStore):
    async def query(self, user_id, window_end, status_filter=TASK_STATUSES, limit=30):
        rows = await self._scalars(
            select(ActionItem)
            .where(
                ActionItem.user_id == uuid.UUID(user_id),
                ActionItem.status.in_(status_filter),
                or_(ActionItem.deadline_date.is_(None), ActionItem.deadline_date <= window_end),
            )
            .order_by(desc(ActionItem.created_at))
            .limit(limit)
        )
        return [
            TaskRecord(
                id=r.id,
                title=r.title,
                description=r.description or "",
                status=r.status,
                priority=r.priority,
                deadline_date=r.deadline_date,
                stakeholder_name=r.stakeholder_name or "",
                stakeholder_company=r.stakeholder_company,
                stakeholder_importance=r.stakeholder_importance,
                email_subject=r.email_subject or "",
            )
            for r in rows
        ]


class FinancialStore(_SqlStore):
    async def query(self, user_id, window_end, status_filter=FINANCIAL_STATUSES, limit=20):
        rows = await self._scalars(
            select(FinancialItem)
            .where(
                FinancialItem.user_id == uuid.UUID(user_id),
                FinancialItem.status.in_(status_filter),
                FinancialItem.due_date <= window_end,
            )
            .order_by(FinancialItem.due_date)
            .limit(limit)
        )
        return [
            FinancialRecord(
                id=r.id,
                type=r.type,
                description=r.description or "",
                creditor=r.creditor,
                amount=r.amount,
                due_date=r.due_date,
                status=r.status,
                priority=r.priority,
                requires_approval=r.requires_approval,
            )
            for r in rows
        ]


class LegalStore(_SqlStore):
    """Pending legal analyses. Not time-windowed."""

    async def query(self, user_id, window_end, status_filter=LEGAL_STATUSES, limit=10):
        rows = await self._scalars(
            select(LegalAnalysis)
            .where(
                LegalAnalysis.user_id == uuid.UUID(user_id),
                LegalAnalysis.status.in_(status_filter),
            )
            .order_by(desc(LegalAnalysis.created_at))
            .limit(limit)
        )
        return [
            LegalRecord(
                id=r.id,
                document_name=r.document_name,
                document_type=r.document_type,
                summary=r.summary,
                overall_risk=r.overall_risk,
                required_action=r.required_action,
                action_deadline=r.action_deadline,
                is_urgent=r.is_urgent,
                status=r.status,
            )
            for r in rows
        ]


class CommercialStore(_SqlStore):
    async def query(self, user_id, window_end, status_filter=COMMERCIAL_STATUSES, limit=20):
        rows = await self._scalars(
            select(CommercialItem)
            .where(
                CommercialItem.user_id == uuid.UUID(user_id),
                CommercialItem.status.in_(status_filter),
                or_(CommercialItem.deadline_date.is_(None), CommercialItem.deadline_date <= window_end),
            )
            .order_by(desc(CommercialItem.created_at))
            .limit(limit)
        )
        return [
            CommercialRecord(
                id=r.id,
                type=r.type,
                status=r.status,
                priority=r.priority,
                company_name=r.client_company,
                contact_name=r.client_name,
                product_service=r.products_services,
                details=r.description,
                requested_amount=r.estimated_value,
                currency=r.currency,
                deadline=r.deadline_date,
                suggested_action=r.suggested_action,
            )
            for r in rows
        ]
