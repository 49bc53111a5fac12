from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from bingoo.models.game import GameKind
from bingoo.models.prize import PrizeCategory


class PrizeItem(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: PrizeCategory
    point_value: int
    stock: int
    is_active: bool
    is_available: bool
    region_id: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PrizeListResponse(BaseModel):
    prizes: List[PrizeItem]
    total_count: int


class PrizeClaimRequest(BaseModel):
    prize_id: int = Field(..., gt=0)


class GameHistoryEntry(BaseModel):
    id: int
    user_id: int
    game_id: int
    prize_id: Optional[int] = None
    kind: GameKind
    won: bool
    points: int
    cost: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GameHistoryResponse(BaseModel):
    entries: List[GameHistoryEntry]
    total_count: int
    has_next: bool


class AdminPrizeCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: PrizeCategory
    point_value: int = Field(..., gt=0)
    stock: int = Field(1, ge=0)
    is_active: bool = True
    region_id: Optional[str] = None
    image_url: Optional[str] = None


class AdminPrizeUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[PrizeCategory] = None
    point_value: Optional[int] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    region_id: Optional[str] = None
    image_url: Optional[str] = None
