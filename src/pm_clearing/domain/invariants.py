"""Per-market conservation invariants."""

import logging

from src.pm_market.domain.models import Market, Position

logger = logging.getLogger(__name__)


def verify_market_invariants(
    market: Market, positions: list[Position], gross_staked: int
) -> list[str]:
    """Check one market against its positions and the gross stakes in the ledger.

    INV-1: Σ position.yes_amount == total_yes_amount
    INV-2: Σ position.no_amount == total_no_amount
    INV-3: total_yes_amount + total_no_amount + fee_collected == gross_staked
    INV-4: is_resolved implies outcome set and resolution_block >= expiry_block

    Returns a list of violation strings (empty when the market is consistent).
    """
    violations: list[str] = []
    mid = market.id

    yes_sum = sum(p.yes_amount for p in positions)
    no_sum = sum(p.no_amount for p in positions)
    if yes_sum != market.total_yes_amount:
        violations.append(
            f"INV-1 violated: market={mid} positions_yes={yes_sum} "
            f"!= total_yes={market.total_yes_amount}"
        )
    if no_sum != market.total_no_amount:
        violations.append(
            f"INV-2 violated: market={mid} positions_no={no_sum} "
            f"!= total_no={market.total_no_amount}"
        )

    booked = market.total_yes_amount + market.total_no_amount + market.fee_collected
    if booked != gross_staked:
        violations.append(
            f"INV-3 violated: market={mid} yes({market.total_yes_amount}) + "
            f"no({market.total_no_amount}) + fee({market.fee_collected}) = {booked} "
            f"!= gross_staked={gross_staked}"
        )

    if market.is_resolved and (
        market.outcome is None
        or market.resolution_block is None
        or market.resolution_block < market.expiry_block
    ):
        violations.append(
            f"INV-4 violated: market={mid} resolved with outcome={market.outcome} "
            f"resolution_block={market.resolution_block} expiry_block={market.expiry_block}"
        )

    if any(p.has_claimed for p in positions) and not market.is_resolved:
        violations.append(f"INV-4 violated: market={mid} has claims before resolution")

    for v in violations:
        logger.error(v)
    if not violations:
        logger.debug("Invariants OK: market=%d, booked=%d", mid, booked)
    return violations
