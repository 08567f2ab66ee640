# src/pm_clearing/api/router.py
"""Claim REST API.

POST /markets/{market_id}/claim: pay the caller's winnings once (auth)
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_clearing.application.service import ClaimApplicationService
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_principal

router = APIRouter(prefix="/markets", tags=["claims"])
_service = ClaimApplicationService()


def get_claim_service() -> ClaimApplicationService:
    return _service


@router.post("/{market_id}/claim")
async def claim(
    market_id: int,
    request: Request,
    caller: Annotated[str, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[ClaimApplicationService, Depends(get_claim_service)],
) -> ApiResponse:
    result = await service.claim(db, market_id, caller)
    return success_response(result.model_dump(), request)
