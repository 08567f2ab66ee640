"""Domain models for pm_analytics: read-only views, pure dataclasses."""

from dataclasses import dataclass, field


@dataclass
class MarketAnalytics:
    """Derived view of one market.

    Unknown ids yield `exists=False` with every figure zeroed, so both
    probabilities are 0. An existing market never reports 0/0: empty pools
    give 500/500 and otherwise the two shares sum to 1000 less truncation.
    A 0/0 pair therefore always means "no such market".
    """

    market_id: int
    exists: bool
    total_volume: int = 0
    yes_probability: int = 0      # per mille
    no_probability: int = 0       # per mille
    liquidity_ratio: int = 0      # per mille, 1000 = perfectly balanced
    is_active: bool = False
    is_resolved: bool = False
    blocks_until_expiry: int = 0


@dataclass
class PositionSnapshot:
    yes_amount: int = 0
    no_amount: int = 0
    has_claimed: bool = False

    @property
    def exposure(self) -> int:
        return self.yes_amount + self.no_amount


@dataclass
class BatchItem:
    analytics: MarketAnalytics
    position: PositionSnapshot


@dataclass
class AnalyticsBatch:
    participant: str
    items: list[BatchItem] = field(default_factory=list)
    total_exposure: int = 0
    active_markets: int = 0
    resolved_markets: int = 0
