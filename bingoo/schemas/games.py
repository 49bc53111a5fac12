from pydantic import BaseModel, Field
from typing import Optional


class GamePlayRequest(BaseModel):
    prize_id: int = Field(..., gt=0)


class GamePlayResponse(BaseModel):
    game_id: int
    prize_id: int
    won: bool
    cost: int
    points_won: int
    balance_after: int
    transaction_id: Optional[int] = None
