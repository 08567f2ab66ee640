"""Analytics built from market/position records and the pool math. No I/O."""

from src.pm_analytics.domain.models import (
    AnalyticsBatch,
    BatchItem,
    MarketAnalytics,
    PositionSnapshot,
)
from src.pm_clearing.domain.payout import implied_probability, liquidity_ratio
from src.pm_common.enums import MarketState
from src.pm_market.domain.models import Market, Position


def build_market_analytics(market_id: int, market: Market | None, now: int) -> MarketAnalytics:
    """Analytics for one market; unknown ids yield a zeroed, inactive record."""
    if market is None:
        return MarketAnalytics(market_id=market_id, exists=False)
    yes, no = market.total_yes_amount, market.total_no_amount
    return MarketAnalytics(
        market_id=market_id,
        exists=True,
        total_volume=market.total_volume,
        yes_probability=implied_probability(yes, no, for_yes=True),
        no_probability=implied_probability(yes, no, for_yes=False),
        liquidity_ratio=liquidity_ratio(yes, no),
        is_active=market.state_at(now) is MarketState.OPEN,
        is_resolved=market.is_resolved,
        blocks_until_expiry=market.blocks_until_expiry(now),
    )


def snapshot_position(position: Position | None) -> PositionSnapshot:
    if position is None:
        return PositionSnapshot()
    return PositionSnapshot(
        yes_amount=position.yes_amount,
        no_amount=position.no_amount,
        has_claimed=position.has_claimed,
    )


def fold_batch(participant: str, items: list[BatchItem]) -> AnalyticsBatch:
    """Accumulate exposure and active/resolved counts; duplicates count each time."""
    batch = AnalyticsBatch(participant=participant, items=items)
    for item in items:
        batch.total_exposure += item.position.exposure
        if item.analytics.is_active:
            batch.active_markets += 1
        if item.analytics.is_resolved:
            batch.resolved_markets += 1
    return batch
