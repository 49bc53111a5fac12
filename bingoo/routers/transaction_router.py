from typing import Optional

from fastapi import APIRouter, Depends, Query

from bingoo.core.auth_middleware import get_current_user
from bingoo.deps import get_transaction_service
from bingoo.models.transaction import TransactionType
from bingoo.schemas.pagination import PaginationLimits
from bingoo.schemas.transactions import TransactionListResponse
from bingoo.schemas.user import User as UserSchema
from bingoo.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def get_my_transactions(
    type: Optional[TransactionType] = Query(None),
    limit: int = Query(
        PaginationLimits.TRANSACTIONS["default"],
        ge=PaginationLimits.TRANSACTIONS["min"],
        le=PaginationLimits.TRANSACTIONS["max"],
    ),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_user),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResponse:
    """The caller's transaction log, newest first."""
    return transaction_service.list_user_transactions(
        current_user.id, type=type, limit=limit, offset=offset
    )
