"""pm_market REST endpoints.

POST /markets                                   : create (auth)
POST /markets/{market_id}/stakes                : place stake (auth)
POST /markets/{market_id}/resolve               : resolve, creator only (auth)
GET  /markets/stats                             : contract stats
GET  /markets/total                             : total market count
GET  /markets/next-id                           : next market id
GET  /markets/{market_id}                       : market detail (data null if absent)
GET  /markets/{market_id}/positions/{participant} : position (data null if absent)

Fixed paths are registered before /{market_id} so they are not captured by it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.clock import current_block_height
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_principal
from src.pm_market.application.schemas import (
    CreateMarketRequest,
    PlaceStakeRequest,
    ResolveMarketRequest,
)
from src.pm_market.application.service import MarketApplicationService

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketApplicationService()


def get_market_service() -> MarketApplicationService:
    return _service


Service = Annotated[MarketApplicationService, Depends(get_market_service)]
Db = Annotated[AsyncSession, Depends(get_db_session)]
Caller = Annotated[str, Depends(get_current_principal)]
Now = Annotated[int, Depends(current_block_height)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    caller: Caller,
    now: Now,
    db: Db,
    service: Service,
) -> ApiResponse:
    result = await service.create_market(
        db, caller, body.title, body.description, body.duration_blocks, now
    )
    return success_response(result.model_dump(), request)


@router.post("/{market_id}/stakes")
async def place_stake(
    market_id: int,
    body: PlaceStakeRequest,
    request: Request,
    caller: Caller,
    now: Now,
    db: Db,
    service: Service,
) -> ApiResponse:
    result = await service.place_stake(db, market_id, body.outcome, body.amount, caller, now)
    return success_response(result.model_dump(), request)


@router.post("/{market_id}/resolve")
async def resolve_market(
    market_id: int,
    body: ResolveMarketRequest,
    request: Request,
    caller: Caller,
    now: Now,
    db: Db,
    service: Service,
) -> ApiResponse:
    result = await service.resolve_market(db, market_id, body.outcome, caller, now)
    return success_response(result.model_dump(), request)


@router.get("/stats")
async def contract_stats(request: Request, db: Db, service: Service) -> ApiResponse:
    result = await service.get_contract_stats(db)
    return success_response(result.model_dump(), request)


@router.get("/total")
async def total_markets(request: Request, db: Db, service: Service) -> ApiResponse:
    return success_response({"total_markets": await service.get_total_markets(db)}, request)


@router.get("/next-id")
async def next_market_id(request: Request, db: Db, service: Service) -> ApiResponse:
    return success_response({"next_market_id": await service.get_next_market_id(db)}, request)


@router.get("/{market_id}")
async def get_market(market_id: int, request: Request, db: Db, service: Service) -> ApiResponse:
    result = await service.get_market(db, market_id)
    return success_response(result.model_dump() if result else None, request)


@router.get("/{market_id}/positions/{participant}")
async def get_position(
    market_id: int,
    participant: str,
    request: Request,
    db: Db,
    service: Service,
) -> ApiResponse:
    result = await service.get_position(db, market_id, participant)
    return success_response(result.model_dump() if result else None, request)
