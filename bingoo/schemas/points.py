from pydantic import BaseModel, Field
from typing import Optional


class PointsBalanceResponse(BaseModel):
    user_id: int
    points: int = Field(..., ge=0, description="Spendable points")

    class Config:
        from_attributes = True


class AdminPointsAdjustmentRequest(BaseModel):
    """Set a user's balance to an absolute value."""

    user_id: int = Field(..., gt=0)
    points: int = Field(..., ge=0, description="New balance")
    reason: str = Field("Admin adjustment", min_length=1, max_length=255)


class PointsAdjustmentResponse(BaseModel):
    user_id: int
    previous_points: int
    points: int
    delta: int
    transaction_id: Optional[int] = None


class LedgerResult(BaseModel):
    """Outcome of a credit or debit together with its audit row."""

    user_id: int
    delta_points: int
    balance_after: int
    transaction_id: Optional[int] = None


class PointsIntegrityCheckResponse(BaseModel):
    status: str = Field(..., description="OK or MISMATCH")
    user_id: int
    recorded_balance: int
    calculated_balance: int
    transaction_delta: int
    claimed_points: int
