"""Unit tests for AdminService (market stats and invariant audit)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.pm_admin.application import service as admin_module
from src.pm_admin.application.service import AdminService
from src.pm_common.errors import MarketNotFoundError
from src.pm_market.domain.models import Market, Position


def _market(market_id: int = 1, **kwargs) -> Market:
    defaults = dict(
        id=market_id,
        creator="alice",
        title="Q",
        description="",
        created_block=0,
        expiry_block=10,
        total_yes_amount=0,
        total_no_amount=950_000,
        fee_collected=50_000,
        is_resolved=True,
        outcome=True,
        resolution_block=10,
    )
    defaults.update(kwargs)
    return Market(**defaults)


def _result(fetchone=None, fetchall=None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = fetchone
    result.fetchall.return_value = fetchall or []
    return result


class TestMarketStats:
    async def test_reports_residual_for_empty_winning_pool(self) -> None:
        repo = AsyncMock()
        repo.get_market.return_value = _market()
        db = MagicMock()
        db.execute = AsyncMock(return_value=_result(fetchone=MagicMock(stakers=1, claimed=0)))

        with patch.object(
            admin_module, "sum_market_entries", AsyncMock(side_effect=[1_000_000, 0])
        ):
            stats = await AdminService(repo=repo, accounts=AsyncMock()).get_market_stats(1, db)

        assert stats["stakers"] == 1
        assert stats["gross_staked"] == 1_000_000
        assert stats["total_paid_out"] == 0
        assert stats["unclaimable_residual"] == 950_000

    async def test_unknown_market(self) -> None:
        repo = AsyncMock()
        repo.get_market.return_value = None
        with pytest.raises(MarketNotFoundError):
            await AdminService(repo=repo, accounts=AsyncMock()).get_market_stats(9, MagicMock())


class TestVerifyAllInvariants:
    async def test_all_clean(self) -> None:
        repo = AsyncMock()
        repo.get_market.return_value = _market()
        repo.list_positions.return_value = [
            Position(market_id=1, participant="carol", no_amount=950_000)
        ]
        db = MagicMock()
        db.execute = AsyncMock(return_value=_result(fetchall=[MagicMock(id=1)]))

        with (
            patch.object(admin_module, "sum_market_entries", AsyncMock(return_value=1_000_000)),
            patch.object(admin_module, "verify_global_invariants", AsyncMock(return_value=[])),
        ):
            report = await AdminService(repo=repo, accounts=AsyncMock()).verify_all_invariants(db)

        assert report == {"ok": True, "markets_checked": 1, "violations": []}

    async def test_collects_violations(self) -> None:
        repo = AsyncMock()
        repo.get_market.return_value = _market()
        repo.list_positions.return_value = []
        db = MagicMock()
        db.execute = AsyncMock(return_value=_result(fetchall=[MagicMock(id=1)]))

        with (
            patch.object(admin_module, "sum_market_entries", AsyncMock(return_value=1_000_000)),
            patch.object(
                admin_module, "verify_global_invariants", AsyncMock(return_value=["INV-G1 violated"])
            ),
        ):
            report = await AdminService(repo=repo, accounts=AsyncMock()).verify_all_invariants(db)

        assert report["ok"] is False
        assert "INV-G1 violated" in report["violations"]
        assert any(v.startswith("INV-2") for v in report["violations"])
