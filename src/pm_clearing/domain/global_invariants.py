# src/pm_clearing/domain/global_invariants.py
"""Global escrow invariant check (INV-G)."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import ESCROW_ACCOUNT_ID
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_clearing.infrastructure.ledger import sum_entries, sum_market_totals
from src.pm_common.enums import LedgerEntryType

logger = logging.getLogger(__name__)


async def verify_global_invariants(
    db: AsyncSession, accounts: AccountRepositoryProtocol
) -> list[str]:
    """Check INV-G. Returns list of violation strings.

    INV-G1: escrow balance == gross stakes in − claim payouts out
    INV-G2: Σ market (yes + no + fee) == gross stakes in
    """
    violations: list[str] = []
    escrow = await accounts.get_account_by_user_id(db, ESCROW_ACCOUNT_ID)
    escrow_balance = escrow.available_balance if escrow else 0
    staked_in = await sum_entries(db, LedgerEntryType.STAKE_ESCROW_IN)
    claimed_out = await sum_entries(db, LedgerEntryType.CLAIM_ESCROW_OUT)  # negative amounts
    market_totals = await sum_market_totals(db)

    expected_escrow = staked_in + claimed_out
    if escrow_balance != expected_escrow:
        msg = (
            f"INV-G1 violated: escrow_balance({escrow_balance}) != "
            f"staked_in({staked_in}) - claimed_out({-claimed_out}) = {expected_escrow}"
        )
        violations.append(msg)
        logger.error(msg)

    if market_totals != staked_in:
        msg = f"INV-G2 violated: market_totals({market_totals}) != staked_in({staked_in})"
        violations.append(msg)
        logger.error(msg)
    return violations
