"""Tests for cross-domain collection."""

from unittest.mock import AsyncMock

import pytest

from agent_hub.core.exceptions import DataUnavailable
from agent_hub.core.models.enums import BriefingScope, FocusItemType
from agent_hub.focus.aggregator import DOMAIN_LIMITS, DataAggregator
from agent_hub.focus.types import EmailRecord, LegalRecord, window_end


def _stores(**overrides):
    stores = {t: AsyncMock() for t in FocusItemType}
    for store in stores.values():
        store.query.return_value = []
    for name, records in overrides.items():
        stores[FocusItemType(name)].query.return_value = records
    return stores


async def test_collect_queries_every_domain_with_window_and_limit(now, user_id):
    stores = _stores()
    aggregator = DataAggregator(stores)

    data = await aggregator.collect(user_id, BriefingScope.today, now=now)

    assert data.total == 0
    end = window_end(BriefingScope.today, now)
    for item_type, store in stores.items():
        uid, window, statuses, limit = store.query.call_args.args
        assert uid == user_id
        assert window == end
        assert statuses
        assert limit == DOMAIN_LIMITS[item_type]


async def test_week_window_is_seven_days(now, user_id):
    stores = _stores()
    await DataAggregator(stores).collect(user_id, BriefingScope.week, now=now)

    window = stores[FocusItemType.task].query.call_args.args[1]
    assert (window - now).days == 7


async def test_results_are_capped(now, user_id):
    legal = [
        LegalRecord(id=i, document_name=f"doc {i}", overall_risk="low", status="pending")
        for i in range(15)
    ]
    data = await DataAggregator(_stores(legal=legal)).collect(user_id, BriefingScope.today, now=now)

    assert len(data.legal_items) == DOMAIN_LIMITS[FocusItemType.legal] == 10


async def test_vip_senders_are_flagged(now, user_id):
    emails = [
        EmailRecord(id=1, from_email="Boss@Corp.com", priority="urgent", action="reply"),
        EmailRecord(id=2, from_email="other@corp.com", priority="urgent", action="reply"),
    ]
    data = await DataAggregator(_stores(email=emails)).collect(
        user_id, BriefingScope.today, now=now, vip_senders=["boss@corp.com"]
    )

    assert [e.is_vip for e in data.emails] == [True, False]


async def test_store_failure_raises_data_unavailable(now, user_id):
    stores = _stores()
    stores[FocusItemType.financial].query.side_effect = ConnectionError("pg down")

    with pytest.raises(DataUnavailable, match="financial"):
        await DataAggregator(stores).collect(user_id, BriefingScope.today, now=now)
