"""Pari-mutuel pool math: pure integer functions, no side effects.

Probabilities and ratios are parts-per-thousand (1000 = 100.0%).
"""

from src.pm_market.domain.models import Market, Position

PER_MILLE = 1000
EVEN_ODDS = 500


def implied_probability(yes_total: int, no_total: int, for_yes: bool) -> int:
    """Share of the combined pool backing one side; 500 when both pools are empty."""
    total = yes_total + no_total
    if total == 0:
        return EVEN_ODDS
    side = yes_total if for_yes else no_total
    return side * PER_MILLE // total


def liquidity_ratio(yes_total: int, no_total: int) -> int:
    """Balance of the two pools: min/max per mille; 0 if either side is empty."""
    if yes_total == 0 or no_total == 0:
        return 0
    return min(yes_total, no_total) * PER_MILLE // max(yes_total, no_total)


def calc_winnings(position: Position, market: Market, winning_outcome: bool) -> int:
    """Stake on the winning side plus its pro-rata cut of the losing pool.

    Returns 0 when nobody backed the winning side; the losing pool then stays
    in escrow as unclaimable residual.
    """
    if winning_outcome:
        user_stake = position.yes_amount
        winning_pool = market.total_yes_amount
        losing_pool = market.total_no_amount
    else:
        user_stake = position.no_amount
        winning_pool = market.total_no_amount
        losing_pool = market.total_yes_amount

    if winning_pool <= 0:
        return 0
    return user_stake + user_stake * losing_pool // winning_pool


def unclaimable_residual(market: Market) -> int:
    """Net pool value no winner can ever claim (non-zero only for an empty winning pool)."""
    if market.outcome is None:
        return 0
    winning_pool = market.total_yes_amount if market.outcome else market.total_no_amount
    if winning_pool > 0:
        return 0
    return market.total_yes_amount + market.total_no_amount
