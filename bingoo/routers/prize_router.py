"""
Prize catalog API

Public:
- GET /prizes: catalog with region / category / availability filters

User:
- GET /prizes/regional: available prizes for the caller's region
- POST /prizes/claim: exchange points for a prize

Admin:
- POST /prizes/admin, PUT /prizes/admin/{prize_id}, DELETE /prizes/admin/{prize_id}
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query

from bingoo.core.auth_middleware import get_current_user, require_admin
from bingoo.core.security import Identity
from bingoo.database.session import SessionFactory, get_session_factory
from bingoo.deps import get_prize_service
from bingoo.models.prize import PrizeCategory
from bingoo.schemas.common import BaseResponse, DeleteResultResponse
from bingoo.schemas.pagination import PaginationLimits
from bingoo.schemas.prizes import (
    AdminPrizeCreateRequest,
    AdminPrizeUpdateRequest,
    PrizeClaimRequest,
    PrizeItem,
    PrizeListResponse,
)
from bingoo.schemas.user import User as UserSchema
from bingoo.services.fraud_service import run_fraud_check
from bingoo.services.prize_service import PrizeService

router = APIRouter(prefix="/prizes", tags=["prizes"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PrizeListResponse)
def list_prizes(
    region: Optional[str] = Query(None, description="Region id, e.g. EUROPE"),
    category: Optional[PrizeCategory] = Query(None),
    available_only: bool = Query(True),
    limit: int = Query(
        PaginationLimits.PRIZES["default"],
        ge=PaginationLimits.PRIZES["min"],
        le=PaginationLimits.PRIZES["max"],
    ),
    offset: int = Query(0, ge=0),
    prize_service: PrizeService = Depends(get_prize_service),
) -> PrizeListResponse:
    return prize_service.list_prizes(
        region=region,
        category=category,
        available_only=available_only,
        limit=limit,
        offset=offset,
    )


@router.get("/regional", response_model=PrizeListResponse)
def list_regional_prizes(
    category: Optional[PrizeCategory] = Query(None),
    limit: int = Query(
        PaginationLimits.PRIZES["default"],
        ge=PaginationLimits.PRIZES["min"],
        le=PaginationLimits.PRIZES["max"],
    ),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_user),
    prize_service: PrizeService = Depends(get_prize_service),
) -> PrizeListResponse:
    return prize_service.list_regional_prizes(
        current_user.id, category=category, limit=limit, offset=offset
    )


@router.post("/claim", response_model=BaseResponse)
def claim_prize(
    request: PrizeClaimRequest,
    background_tasks: BackgroundTasks,
    current_user: UserSchema = Depends(get_current_user),
    prize_service: PrizeService = Depends(get_prize_service),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> Any:
    """
    Claim a prize for its point value.

    Errors:
        404 PRIZE_404: unknown prize
        409 PRIZE_001: prize inactive or out of stock
        400 POINTS_001: balance below the prize value
    """
    entry = prize_service.claim_prize(current_user.id, request.prize_id)
    background_tasks.add_task(run_fraud_check, session_factory, current_user.id)
    return BaseResponse(success=True, data=entry.model_dump())


@router.post("/admin", response_model=PrizeItem, status_code=201)
def create_prize(
    request: AdminPrizeCreateRequest,
    current_admin: Identity = Depends(require_admin),
    prize_service: PrizeService = Depends(get_prize_service),
) -> PrizeItem:
    return prize_service.create_prize(request)


@router.put("/admin/{prize_id}", response_model=PrizeItem)
def update_prize(
    request: AdminPrizeUpdateRequest,
    prize_id: int = Path(..., gt=0),
    current_admin: Identity = Depends(require_admin),
    prize_service: PrizeService = Depends(get_prize_service),
) -> PrizeItem:
    return prize_service.update_prize(prize_id, request)


@router.delete("/admin/{prize_id}", response_model=DeleteResultResponse)
def delete_prize(
    prize_id: int = Path(..., gt=0),
    current_admin: Identity = Depends(require_admin),
    prize_service: PrizeService = Depends(get_prize_service),
) -> DeleteResultResponse:
    return prize_service.delete_prize(prize_id)
