# src/pm_admin/application/service.py
"""Admin application service: invariant audit and per-market stats. Read-only."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_clearing.domain.global_invariants import verify_global_invariants
from src.pm_clearing.domain.invariants import verify_market_invariants
from src.pm_clearing.domain.payout import unclaimable_residual
from src.pm_clearing.infrastructure.ledger import sum_market_entries
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import MarketNotFoundError
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository

_LIST_MARKET_IDS_SQL = text("SELECT id FROM markets ORDER BY id")
_POSITION_STATS_SQL = text("""
    SELECT
        COUNT(*) AS stakers,
        COUNT(*) FILTER (WHERE has_claimed) AS claimed
    FROM positions
    WHERE market_id = :market_id
""")


class AdminService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()

    async def get_market_stats(self, market_id: int, db: AsyncSession) -> dict[str, Any]:
        market = await self._repo.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        stats = (await db.execute(_POSITION_STATS_SQL, {"market_id": market_id})).fetchone()
        gross = await sum_market_entries(db, market_id, LedgerEntryType.STAKE_ESCROW_IN)
        paid = await sum_market_entries(db, market_id, LedgerEntryType.CLAIM_PAYOUT)
        return {
            "market_id": market_id,
            "is_resolved": market.is_resolved,
            "outcome": market.outcome,
            "stakers": int(stats.stakers) if stats else 0,
            "claimed": int(stats.claimed) if stats else 0,
            "gross_staked": gross,
            "fee_collected": market.fee_collected,
            "total_paid_out": paid,
            "unclaimable_residual": unclaimable_residual(market),
        }

    async def verify_all_invariants(self, db: AsyncSession) -> dict[str, object]:
        """Run per-market (INV-1..4) and global (INV-G) invariant checks."""
        violations: list[str] = []
        rows = (await db.execute(_LIST_MARKET_IDS_SQL)).fetchall()
        for row in rows:
            market = await self._repo.get_market(db, row.id)
            if market is None:
                continue
            positions = await self._repo.list_positions(db, market.id)
            gross = await sum_market_entries(db, market.id, LedgerEntryType.STAKE_ESCROW_IN)
            violations.extend(verify_market_invariants(market, positions, gross))
        violations.extend(await verify_global_invariants(db, self._accounts))
        return {"ok": len(violations) == 0, "markets_checked": len(rows), "violations": violations}
