"""pm_analytics REST endpoints: public, read-only.

GET  /analytics/markets/{market_id}                         : one market
GET  /analytics/markets/{market_id}/exposure/{participant}  : one position's exposure
POST /analytics/batch                                       : up to MAX_BATCH_MARKETS markets
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_analytics.application.schemas import AnalyticsBatchRequest
from src.pm_analytics.application.service import AnalyticsApplicationService
from src.pm_common.clock import current_block_height
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response

router = APIRouter(prefix="/analytics", tags=["analytics"])

_service = AnalyticsApplicationService()


def get_analytics_service() -> AnalyticsApplicationService:
    return _service


Service = Annotated[AnalyticsApplicationService, Depends(get_analytics_service)]
Db = Annotated[AsyncSession, Depends(get_db_session)]
Now = Annotated[int, Depends(current_block_height)]


@router.get("/markets/{market_id}")
async def market_analytics(
    market_id: int, request: Request, now: Now, db: Db, service: Service
) -> ApiResponse:
    result = await service.market_analytics(db, market_id, now)
    return success_response(result.model_dump(), request)


@router.get("/markets/{market_id}/exposure/{participant}")
async def user_exposure(
    market_id: int, participant: str, request: Request, db: Db, service: Service
) -> ApiResponse:
    result = await service.user_exposure(db, market_id, participant)
    return success_response(result.model_dump(), request)


@router.post("/batch")
async def analytics_batch(
    body: AnalyticsBatchRequest, request: Request, now: Now, db: Db, service: Service
) -> ApiResponse:
    result = await service.analytics_batch(db, body.market_ids, body.participant, now)
    return success_response(result.model_dump(), request)
