import asyncio
import logging
from datetime import UTC, datetime

from agent_hub.core.exceptions import DataUnavailable
from agent_hub.core.models.enums import BriefingScope, FocusItemType
from agent_hub.focus import stores
from agent_hub.focus.types import CollectedData, window_end

logger = logging.getLogger(__name__)

DOMAIN_LIMITS: dict[FocusItemType, int] = {
    FocusItemType.email: 20,
    FocusItemType.task: 30,
    FocusItemType.financial: 20,
    FocusItemType.legal: 10,
    FocusItemType.commercial: 20,
}

DOMAIN_STATUSES: dict[FocusItemType, tuple[str, ...]] = {
    FocusItemType.email: stores.EMAIL_PRIORITIES,
    FocusItemType.task: stores.TASK_STATUSES,
    FocusItemType.financial: stores.FINANCIAL_STATUSES,
    FocusItemType.legal: stores.LEGAL_STATUSES,
    FocusItemType.commercial: stores.COMMERCIAL_STATUSES,
}


def default_stores() -> dict[FocusItemType, stores.DomainStore]:
    return {
        FocusItemType.email: stores.EmailStore(),
        FocusItemType.task: stores.TaskStore(),
        FocusItemType.financial: stores.FinancialStore(),
        FocusItemType.legal: stores.LegalStore(),
        FocusItemType.commercial: stores.CommercialStore(),
    }


class DataAggregator:
    """Collects bounded, status-filtered candidates from the five domain stores.

    Read-only. A failing store aborts the whole collection with
    ``DataUnavailable`` rather than producing a partial briefing.
    """

    def __init__(
        self,
        domain_stores: dict[FocusItemType, stores.DomainStore] | None = None,
        limits: dict[FocusItemType, int] | None = None,
    ):
        self.stores = domain_stores if domain_stores is not None else default_stores()
        self.limits = {**DOMAIN_LIMITS, **(limits or {})}

    async def collect(
        self,
        user_id: str,
        scope: BriefingScope,
        *,
        now: datetime | None = None,
        vip_senders: list[str] | None = None,
    ) -> CollectedData:
        now = now or datetime.now(UTC)
        end = window_end(scope, now)
        domains = list(FocusItemType)

        results = await asyncio.gather(
            *(
                self.stores[d].query(user_id, end, DOMAIN_STATUSES[d], self.limits[d])
                for d in domains
            ),
            return_exceptions=True,
        )
        by_domain = {}
        for domain, result in zip(domains, results, strict=True):
            if isinstance(result, BaseException):
                logger.error("Store %s failed for user %s: %s", domain.value, user_id, result)
                raise DataUnavailable(f"{domain.value} store unavailable: {result}") from result
            by_domain[domain] = result[: self.limits[domain]]

        data = CollectedData(
            emails=by_domain[FocusItemType.email],
            tasks=by_domain[FocusItemType.task],
            financial_items=by_domain[FocusItemType.financial],
            legal_items=by_domain[FocusItemType.legal],
            commercial_items=by_domain[FocusItemType.commercial],
        )

        vips = {s.lower() for s in vip_senders or []}
        if vips:
            for email in data.emails:
                email.is_vip = email.from_email.lower() in vips

        logger.info(
            "Collected %d item(s) for user %s scope=%s", data.total, user_id, BriefingScope(scope).value
        )
        return data
