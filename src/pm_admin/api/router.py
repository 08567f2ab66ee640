# src/pm_admin/api/router.py
"""Admin REST API: contract owner only."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.application.service import AdminService
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import require_contract_owner

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


def get_admin_service() -> AdminService:
    return _service


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    owner: Annotated[str, Depends(require_contract_owner)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> ApiResponse:
    result = await service.verify_all_invariants(db)
    return success_response(result, request)


@router.get("/markets/{market_id}/stats")
async def market_stats(
    market_id: int,
    request: Request,
    owner: Annotated[str, Depends(require_contract_owner)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> ApiResponse:
    result = await service.get_market_stats(market_id, db)
    return success_response(result, request)
