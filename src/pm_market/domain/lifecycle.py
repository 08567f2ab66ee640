"""Market lifecycle state machine: Open -> Expired -> Resolved.

Transitions are pure functions over domain objects; callers load, check,
apply and persist inside one transaction. A failed check raises before
anything is mutated.
"""

from config.settings import settings
from src.pm_clearing.domain.fee import split_stake
from src.pm_common.enums import MarketState
from src.pm_common.errors import (
    InsufficientFundsError,
    InvalidMarketParamsError,
    InvalidOutcomeError,
    MarketExpiredError,
    MarketNotExpiredError,
    MarketResolvedError,
    NotAuthorizedError,
)
from src.pm_market.domain.models import Market, Position


def validate_market_params(title: str, description: str, duration_blocks: int) -> None:
    if not title.strip():
        raise InvalidMarketParamsError("title must not be empty")
    if len(title) > settings.MAX_TITLE_LENGTH:
        raise InvalidMarketParamsError(
            f"title longer than {settings.MAX_TITLE_LENGTH} characters"
        )
    if len(description) > settings.MAX_DESCRIPTION_LENGTH:
        raise InvalidMarketParamsError(
            f"description longer than {settings.MAX_DESCRIPTION_LENGTH} characters"
        )
    min_duration = max(1, settings.MIN_MARKET_DURATION_BLOCKS)
    if duration_blocks < min_duration:
        raise InvalidMarketParamsError(f"duration must be at least {min_duration} blocks")


def validate_outcome(outcome: object) -> bool:
    """Outcomes are strictly boolean; 1, 0 and "yes" are rejected."""
    if not isinstance(outcome, bool):
        raise InvalidOutcomeError(outcome)
    return outcome


def new_market(
    market_id: int,
    creator: str,
    title: str,
    description: str,
    duration_blocks: int,
    now: int,
) -> Market:
    return Market(
        id=market_id,
        creator=creator,
        title=title,
        description=description,
        created_block=now,
        expiry_block=now + duration_blocks,
    )


def check_can_stake(market: Market, amount: int, now: int) -> None:
    """Market must be Open and the gross amount at least the minimum stake."""
    state = market.state_at(now)
    if state is MarketState.RESOLVED:
        raise MarketResolvedError(market.id)
    if state is MarketState.EXPIRED:
        raise MarketExpiredError(market.id)
    if amount < settings.MINIMUM_STAKE:
        raise InsufficientFundsError(required=settings.MINIMUM_STAKE, available=amount)


def apply_stake(market: Market, position: Position, outcome: bool, amount: int) -> tuple[int, int]:
    """Credit net to the chosen side of both position and market, fee to the market.

    Returns (fee, net).
    """
    fee, net = split_stake(amount)
    if outcome:
        position.yes_amount += net
        market.total_yes_amount += net
    else:
        position.no_amount += net
        market.total_no_amount += net
    market.fee_collected += fee
    return fee, net


def check_can_resolve(market: Market, caller: str, now: int) -> None:
    if caller != market.creator:
        raise NotAuthorizedError(f"only the creator may resolve market {market.id}")
    if now < market.expiry_block:
        raise MarketNotExpiredError(market.id, market.expiry_block)
    if market.is_resolved:
        raise MarketResolvedError(market.id)


def apply_resolution(market: Market, outcome: bool, now: int) -> None:
    market.outcome = outcome
    market.is_resolved = True
    market.resolution_block = now
