"""
Points administration API

- GET /points/admin/{user_id}: balance of any user
- POST /points/admin/adjust: set an absolute balance (audited as ADJUSTMENT)
- GET /points/admin/integrity/{user_id}: balance vs. audit trail check

All endpoints require the ADMIN role.
"""

import logging

from fastapi import APIRouter, Depends, Path

from bingoo.core.auth_middleware import require_admin
from bingoo.core.security import Identity
from bingoo.deps import get_point_service
from bingoo.schemas.points import (
    AdminPointsAdjustmentRequest,
    PointsAdjustmentResponse,
    PointsBalanceResponse,
    PointsIntegrityCheckResponse,
)
from bingoo.services.point_service import PointService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/points", tags=["points"])


@router.post("/admin/adjust", response_model=PointsAdjustmentResponse)
def adjust_user_points(
    request: AdminPointsAdjustmentRequest,
    current_admin: Identity = Depends(require_admin),
    point_service: PointService = Depends(get_point_service),
) -> PointsAdjustmentResponse:
    logger.info(
        f"Admin {current_admin.user_id} adjusting points of user {request.user_id} to {request.points}"
    )
    return point_service.admin_adjust(request, admin_id=current_admin.user_id)


@router.get("/admin/integrity/{user_id}", response_model=PointsIntegrityCheckResponse)
def check_user_integrity(
    user_id: int = Path(..., gt=0),
    current_admin: Identity = Depends(require_admin),
    point_service: PointService = Depends(get_point_service),
) -> PointsIntegrityCheckResponse:
    return point_service.verify_integrity(user_id)


@router.get("/admin/{user_id}", response_model=PointsBalanceResponse)
def get_user_balance(
    user_id: int = Path(..., gt=0),
    current_admin: Identity = Depends(require_admin),
    point_service: PointService = Depends(get_point_service),
) -> PointsBalanceResponse:
    return point_service.get_balance(user_id)
