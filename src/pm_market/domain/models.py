"""Domain models for pm_market: pure dataclasses, no persistence logic."""

from dataclasses import dataclass

from src.pm_common.enums import MarketState


@dataclass
class Market:
    id: int
    creator: str
    title: str
    description: str
    created_block: int
    expiry_block: int
    resolution_block: int | None = None
    outcome: bool | None = None          # None until resolved, then set exactly once
    total_yes_amount: int = 0            # net (post-fee) stakes
    total_no_amount: int = 0             # net (post-fee) stakes
    is_resolved: bool = False
    fee_collected: int = 0

    @property
    def total_volume(self) -> int:
        return self.total_yes_amount + self.total_no_amount

    def state_at(self, now: int) -> MarketState:
        if self.is_resolved:
            return MarketState.RESOLVED
        if now < self.expiry_block:
            return MarketState.OPEN
        return MarketState.EXPIRED

    def blocks_until_expiry(self, now: int) -> int:
        return max(0, self.expiry_block - now)


@dataclass
class Position:
    market_id: int
    participant: str
    yes_amount: int = 0     # net stake on YES
    no_amount: int = 0      # net stake on NO
    has_claimed: bool = False

    @property
    def exposure(self) -> int:
        return self.yes_amount + self.no_amount


@dataclass
class MarketCounters:
    next_market_id: int
    total_markets: int
