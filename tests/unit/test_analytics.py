"""Unit tests for analytics aggregation and AnalyticsApplicationService."""

import pytest

from src.pm_analytics.application.service import AnalyticsApplicationService
from src.pm_analytics.domain.aggregation import build_market_analytics, fold_batch
from src.pm_analytics.domain.models import BatchItem, PositionSnapshot
from src.pm_common.errors import BatchLimitExceededError
from src.pm_market.domain.models import Market

TOKEN = 1_000_000


def _market(yes: int = 1_900_000, no: int = 950_000, resolved: bool = False) -> Market:
    return Market(
        id=1,
        creator="alice",
        title="Q",
        description="",
        created_block=0,
        expiry_block=10,
        total_yes_amount=yes,
        total_no_amount=no,
        is_resolved=resolved,
        outcome=True if resolved else None,
        resolution_block=10 if resolved else None,
    )


class TestBuildMarketAnalytics:
    def test_open_market(self) -> None:
        a = build_market_analytics(1, _market(), now=4)
        assert a.exists
        assert a.total_volume == 2_850_000
        assert (a.yes_probability, a.no_probability) == (666, 333)
        assert a.liquidity_ratio == 500
        assert a.is_active and not a.is_resolved
        assert a.blocks_until_expiry == 6

    def test_expired_market_is_inactive(self) -> None:
        a = build_market_analytics(1, _market(), now=10)
        assert not a.is_active
        assert a.blocks_until_expiry == 0

    def test_empty_pools_even_odds(self) -> None:
        a = build_market_analytics(1, _market(0, 0), now=0)
        assert (a.yes_probability, a.no_probability) == (500, 500)
        assert a.liquidity_ratio == 0

    def test_unknown_market_is_zeroed(self) -> None:
        a = build_market_analytics(99, None, now=0)
        assert a.market_id == 99
        assert not a.exists
        assert a.total_volume == 0
        assert (a.yes_probability, a.no_probability) == (0, 0)
        assert not a.is_active and not a.is_resolved

    @pytest.mark.parametrize("yes, no", [(0, 0), (TOKEN, 0), (0, TOKEN), (1_900_000, 950_000)])
    def test_existing_market_never_reports_zero_pair(self, yes: int, no: int) -> None:
        a = build_market_analytics(1, _market(yes, no), now=0)
        assert a.exists
        assert (a.yes_probability, a.no_probability) != (0, 0)
        assert 998 <= a.yes_probability + a.no_probability <= 1000


class TestFoldBatch:
    def test_accumulates(self) -> None:
        open_item = BatchItem(build_market_analytics(1, _market(), 4), PositionSnapshot(5, 3))
        done_item = BatchItem(
            build_market_analytics(2, _market(resolved=True), 20), PositionSnapshot(0, 2, True)
        )
        missing = BatchItem(build_market_analytics(3, None, 4), PositionSnapshot())
        batch = fold_batch("bob", [open_item, done_item, missing, open_item])

        assert batch.total_exposure == 8 + 2 + 0 + 8
        assert batch.active_markets == 2
        assert batch.resolved_markets == 1
        assert len(batch.items) == 4


class TestAnalyticsService:
    @pytest.fixture
    async def seeded(self, market_service, db, fund):
        fund(alice=2 * TOKEN, bob=10 * TOKEN)
        await market_service.create_market(db, "alice", "A", "", 10, 0)
        await market_service.create_market(db, "alice", "B", "", 10, 0)
        await market_service.place_stake(db, 1, True, 2 * TOKEN, "bob", 1)
        await market_service.place_stake(db, 2, False, TOKEN, "bob", 1)

    async def test_market_analytics(self, market_repo, db, seeded) -> None:
        svc = AnalyticsApplicationService(repo=market_repo)
        result = await svc.market_analytics(db, 1, now=5)
        assert result.exists and result.is_active
        assert result.yes_probability == 1000

    async def test_unknown_market_does_not_raise(self, market_repo, db) -> None:
        svc = AnalyticsApplicationService(repo=market_repo)
        result = await svc.market_analytics(db, 404, now=5)
        assert not result.exists

    async def test_user_exposure(self, market_repo, db, seeded) -> None:
        svc = AnalyticsApplicationService(repo=market_repo)
        assert (await svc.user_exposure(db, 1, "bob")).exposure == 1_900_000
        assert (await svc.user_exposure(db, 1, "nobody")).exposure == 0

    async def test_batch(self, market_repo, db, seeded) -> None:
        svc = AnalyticsApplicationService(repo=market_repo)
        result = await svc.analytics_batch(db, [1, 2, 3, 1], "bob", now=5)
        assert result.total_exposure == 1_900_000 + 950_000 + 0 + 1_900_000
        assert result.active_markets == 3
        assert result.resolved_markets == 0
        assert [item.analytics.market_id for item in result.items] == [1, 2, 3, 1]
        assert result.items[2].analytics.exists is False

    async def test_empty_batch(self, market_repo, db) -> None:
        svc = AnalyticsApplicationService(repo=market_repo)
        result = await svc.analytics_batch(db, [], "bob", now=5)
        assert result.items == [] and result.total_exposure == 0

    async def test_batch_limit(self, market_repo, db) -> None:
        svc = AnalyticsApplicationService(repo=market_repo)
        await svc.analytics_batch(db, list(range(1, 11)), "bob", now=5)
        with pytest.raises(BatchLimitExceededError):
            await svc.analytics_batch(db, list(range(1, 12)), "bob", now=5)
