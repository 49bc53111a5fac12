from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bingoo.models.transaction import PaymentProvider, TransactionStatus


class CheckoutRequest(BaseModel):
    points: int = Field(..., gt=0, le=100_000)
    provider: PaymentProvider


class CheckoutResponse(BaseModel):
    transaction_id: int
    region: str
    currency: str
    points: int
    amount: Decimal
    status: TransactionStatus


class SettleRequest(BaseModel):
    """Outcome reported by the payment provider."""

    success: bool
    provider_reference: Optional[str] = Field(None, max_length=255)


class SettleResponse(BaseModel):
    transaction_id: int
    user_id: int
    status: TransactionStatus
    points_credited: int
    balance_after: Optional[int] = None
