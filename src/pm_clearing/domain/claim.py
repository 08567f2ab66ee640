"""One-time settlement of a participant's winnings on a resolved market."""

from src.pm_clearing.domain.payout import calc_winnings
from src.pm_common.errors import (
    AlreadyClaimedError,
    MarketNotResolvedError,
    NoPositionError,
)
from src.pm_market.domain.models import Market, Position


def settle_claim(market: Market, position: Position | None) -> int:
    """Check claim preconditions, flag the position as claimed, return the payout.

    The flag is set before the caller issues the payout transfer; both live in
    the same transaction, so a failed transfer rolls the flag back too.
    """
    if not market.is_resolved or market.outcome is None:
        raise MarketNotResolvedError(market.id)
    if position is None:
        raise NoPositionError(market.id, "no stake placed")
    if position.has_claimed:
        raise AlreadyClaimedError(market.id)

    winnings = calc_winnings(position, market, market.outcome)
    if winnings <= 0:
        raise NoPositionError(market.id)

    position.has_claimed = True
    return winnings
