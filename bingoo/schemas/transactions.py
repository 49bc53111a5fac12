from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from bingoo.models.transaction import PaymentProvider, TransactionStatus, TransactionType


class TransactionEntry(BaseModel):
    id: int
    user_id: int
    type: TransactionType
    status: TransactionStatus
    amount: Decimal
    currency: Optional[str] = None
    points: int
    provider: Optional[PaymentProvider] = None
    provider_reference: Optional[str] = None
    reference: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    transactions: List[TransactionEntry]
    total_count: int
    has_next: bool
