from typing import Any

from fastapi import APIRouter, Depends, Query

from bingoo.core.auth_middleware import get_current_user
from bingoo.deps import get_point_service, get_prize_service, get_region_service
from bingoo.schemas.common import BaseResponse
from bingoo.schemas.pagination import PaginationLimits
from bingoo.schemas.user import User as UserSchema
from bingoo.services.point_service import PointService
from bingoo.services.prize_service import PrizeService
from bingoo.services.region_service import RegionService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=BaseResponse)
def get_current_user_profile(
    current_user: UserSchema = Depends(get_current_user),
) -> Any:
    """Profile of the authenticated user."""
    return BaseResponse(success=True, data=current_user.model_dump())


@router.get("/me/region", response_model=BaseResponse)
def get_my_region(
    current_user: UserSchema = Depends(get_current_user),
    region_service: RegionService = Depends(get_region_service),
) -> Any:
    """Pricing region for the stored country; unknown countries get the default region."""
    region = region_service.get_user_region(current_user.id)
    return BaseResponse(success=True, data=region.model_dump())


@router.get("/me/points", response_model=BaseResponse)
def get_my_points(
    current_user: UserSchema = Depends(get_current_user),
    point_service: PointService = Depends(get_point_service),
) -> Any:
    balance = point_service.get_balance(current_user.id)
    return BaseResponse(success=True, data=balance.model_dump())


@router.get("/me/prizes", response_model=BaseResponse)
def get_my_prizes(
    limit: int = Query(
        PaginationLimits.GAME_HISTORY["default"],
        ge=PaginationLimits.GAME_HISTORY["min"],
        le=PaginationLimits.GAME_HISTORY["max"],
    ),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_user),
    prize_service: PrizeService = Depends(get_prize_service),
) -> Any:
    """Prizes the user has claimed, newest first."""
    history = prize_service.get_user_prizes(current_user.id, limit=limit, offset=offset)
    return BaseResponse(
        success=True,
        data={"prizes": [entry.model_dump() for entry in history.entries]},
        meta={
            "limit": limit,
            "offset": offset,
            "total_count": history.total_count,
            "has_next": history.has_next,
        },
    )
