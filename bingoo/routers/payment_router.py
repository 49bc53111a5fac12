from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Path

from bingoo.core.auth_middleware import get_current_user, require_admin
from bingoo.core.security import Identity
from bingoo.database.session import SessionFactory, get_session_factory
from bingoo.deps import get_payment_service
from bingoo.schemas.common import BaseResponse
from bingoo.schemas.payments import CheckoutRequest, SettleRequest, SettleResponse
from bingoo.schemas.user import User as UserSchema
from bingoo.services.fraud_service import run_fraud_check
from bingoo.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/checkout", response_model=BaseResponse, status_code=201)
def checkout(
    request: CheckoutRequest,
    current_user: UserSchema = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
) -> Any:
    """Quote a points purchase in the user's currency and open a pending deposit."""
    result = payment_service.checkout(current_user.id, request.points, request.provider)
    return BaseResponse(success=True, data=result.model_dump())


@router.post("/{transaction_id}/settle", response_model=SettleResponse)
def settle(
    request: SettleRequest,
    background_tasks: BackgroundTasks,
    transaction_id: int = Path(..., gt=0),
    current_admin: Identity = Depends(require_admin),
    payment_service: PaymentService = Depends(get_payment_service),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> SettleResponse:
    """Relay of the provider's outcome. A transaction settles once; repeats get 409."""
    result = payment_service.settle(
        transaction_id, request.success, request.provider_reference
    )
    background_tasks.add_task(run_fraud_check, session_factory, result.user_id)
    return result
