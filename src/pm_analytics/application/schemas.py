"""Pydantic schemas for pm_analytics API."""

from pydantic import BaseModel, Field

from src.pm_analytics.domain.models import AnalyticsBatch, MarketAnalytics, PositionSnapshot


class AnalyticsBatchRequest(BaseModel):
    market_ids: list[int]
    participant: str = Field(..., min_length=1)


class MarketAnalyticsOut(BaseModel):
    market_id: int
    exists: bool
    total_volume: int
    # Per mille; both 0 only for unknown ids
    yes_probability: int = Field(..., description="Per mille; 0 when the market does not exist")
    no_probability: int = Field(..., description="Per mille; 0 when the market does not exist")
    liquidity_ratio: int
    is_active: bool
    is_resolved: bool
    blocks_until_expiry: int

    @classmethod
    def from_domain(cls, a: MarketAnalytics) -> "MarketAnalyticsOut":
        return cls(
            market_id=a.market_id,
            exists=a.exists,
            total_volume=a.total_volume,
            yes_probability=a.yes_probability,
            no_probability=a.no_probability,
            liquidity_ratio=a.liquidity_ratio,
            is_active=a.is_active,
            is_resolved=a.is_resolved,
            blocks_until_expiry=a.blocks_until_expiry,
        )


class PositionOut(BaseModel):
    yes_amount: int
    no_amount: int
    has_claimed: bool
    exposure: int

    @classmethod
    def from_domain(cls, p: PositionSnapshot) -> "PositionOut":
        return cls(
            yes_amount=p.yes_amount,
            no_amount=p.no_amount,
            has_claimed=p.has_claimed,
            exposure=p.exposure,
        )


class ExposureResponse(BaseModel):
    market_id: int
    participant: str
    exposure: int


class BatchItemOut(BaseModel):
    analytics: MarketAnalyticsOut
    position: PositionOut


class AnalyticsBatchResponse(BaseModel):
    participant: str
    items: list[BatchItemOut]
    total_exposure: int
    active_markets: int
    resolved_markets: int

    @classmethod
    def from_domain(cls, b: AnalyticsBatch) -> "AnalyticsBatchResponse":
        return cls(
            participant=b.participant,
            items=[
                BatchItemOut(
                    analytics=MarketAnalyticsOut.from_domain(item.analytics),
                    position=PositionOut.from_domain(item.position),
                )
                for item in b.items
            ],
            total_exposure=b.total_exposure,
            active_markets=b.active_markets,
            resolved_markets=b.resolved_markets,
        )
