"""AnalyticsApplicationService: read-only queries; no commit/rollback needed.

Analytics must be safe to call speculatively: unknown markets produce zeroed
records, never MarketNotFoundError.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_analytics.application.schemas import (
    AnalyticsBatchResponse,
    ExposureResponse,
    MarketAnalyticsOut,
)
from src.pm_analytics.domain.aggregation import (
    build_market_analytics,
    fold_batch,
    snapshot_position,
)
from src.pm_analytics.domain.models import BatchItem
from src.pm_common.errors import BatchLimitExceededError
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository


class AnalyticsApplicationService:
    def __init__(self, repo: MarketRepositoryProtocol | None = None) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()

    async def market_analytics(
        self, db: AsyncSession, market_id: int, now: int
    ) -> MarketAnalyticsOut:
        market = await self._repo.get_market(db, market_id)
        return MarketAnalyticsOut.from_domain(build_market_analytics(market_id, market, now))

    async def user_exposure(
        self, db: AsyncSession, market_id: int, participant: str
    ) -> ExposureResponse:
        position = await self._repo.get_position(db, market_id, participant)
        return ExposureResponse(
            market_id=market_id,
            participant=participant,
            exposure=position.exposure if position else 0,
        )

    async def analytics_batch(
        self, db: AsyncSession, market_ids: list[int], participant: str, now: int
    ) -> AnalyticsBatchResponse:
        if len(market_ids) > settings.MAX_BATCH_MARKETS:
            raise BatchLimitExceededError(len(market_ids), settings.MAX_BATCH_MARKETS)

        items: list[BatchItem] = []
        for market_id in market_ids:
            market = await self._repo.get_market(db, market_id)
            position = await self._repo.get_position(db, market_id, participant)
            items.append(
                BatchItem(
                    analytics=build_market_analytics(market_id, market, now),
                    position=snapshot_position(position),
                )
            )
        return AnalyticsBatchResponse.from_domain(fold_batch(participant, items))
