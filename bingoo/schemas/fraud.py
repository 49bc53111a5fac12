from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class FraudAlertItem(BaseModel):
    id: int
    user_id: int
    type: str
    description: str
    reviewed: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FraudAlertListResponse(BaseModel):
    alerts: List[FraudAlertItem]
    total_count: int
    has_next: bool


class FraudEvaluation(BaseModel):
    user_id: int
    recent_transactions: int
    recent_winnings: int
    alerts: List[str]

    @property
    def suspicious(self) -> bool:
        return bool(self.alerts)
