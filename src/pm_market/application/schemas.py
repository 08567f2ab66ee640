"""Pydantic schemas for pm_market API requests and responses.

Amounts are integer base units; every amount field has a *_display twin.
"""

from typing import Any

from pydantic import BaseModel, Field

from config.settings import settings
from src.pm_common.amounts import amount_to_display
from src.pm_market.domain.models import Market, Position

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    # Length and duration limits are enforced by the domain (InvalidMarketParamsError)
    title: str = Field(..., description=f"At most {settings.MAX_TITLE_LENGTH} characters")
    description: str = Field("", description=f"At most {settings.MAX_DESCRIPTION_LENGTH} characters")
    duration_blocks: int = Field(..., description="Blocks until staking closes")


class PlaceStakeRequest(BaseModel):
    # Outcome is passed through unparsed so "yes" or 1 surface as InvalidOutcomeError;
    # amounts below MINIMUM_STAKE (zero and negative included) surface as InsufficientFundsError
    outcome: Any = Field(..., description="true = YES, false = NO")
    amount: int = Field(..., description="Gross stake in base units (fee included)")


class ResolveMarketRequest(BaseModel):
    outcome: Any = Field(..., description="true = YES won, false = NO won")


# ---------------------------------------------------------------------------
# Market / position views
# ---------------------------------------------------------------------------


class MarketDetail(BaseModel):
    id: int
    creator: str
    title: str
    description: str
    created_block: int
    expiry_block: int
    resolution_block: int | None
    outcome: bool | None
    is_resolved: bool
    total_yes_amount: int
    total_no_amount: int
    total_volume: int
    total_volume_display: str
    fee_collected: int
    fee_collected_display: str

    @classmethod
    def from_domain(cls, m: Market) -> "MarketDetail":
        return cls(
            id=m.id,
            creator=m.creator,
            title=m.title,
            description=m.description,
            created_block=m.created_block,
            expiry_block=m.expiry_block,
            resolution_block=m.resolution_block,
            outcome=m.outcome,
            is_resolved=m.is_resolved,
            total_yes_amount=m.total_yes_amount,
            total_no_amount=m.total_no_amount,
            total_volume=m.total_volume,
            total_volume_display=amount_to_display(m.total_volume),
            fee_collected=m.fee_collected,
            fee_collected_display=amount_to_display(m.fee_collected),
        )


class PositionDetail(BaseModel):
    market_id: int
    participant: str
    yes_amount: int
    no_amount: int
    exposure: int
    exposure_display: str
    has_claimed: bool

    @classmethod
    def from_domain(cls, p: Position) -> "PositionDetail":
        return cls(
            market_id=p.market_id,
            participant=p.participant,
            yes_amount=p.yes_amount,
            no_amount=p.no_amount,
            exposure=p.exposure,
            exposure_display=amount_to_display(p.exposure),
            has_claimed=p.has_claimed,
        )


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------


class CreateMarketResponse(BaseModel):
    market_id: int
    expiry_block: int
    creation_fee: int


class StakeResponse(BaseModel):
    market_id: int
    outcome: bool
    gross_amount: int
    fee: int
    net_amount: int
    net_amount_display: str
    position: PositionDetail
    total_yes_amount: int
    total_no_amount: int


class ContractStatsResponse(BaseModel):
    total_markets: int
    next_market_id: int
    owner: str
    minimum_stake: int
    fee_rate_numerator: int
    fee_rate_denominator: int
    creation_fee: int
