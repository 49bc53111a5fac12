from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class DailyStatsEntry(BaseModel):
    date: date
    transactions: int = 0
    revenue: Decimal = Decimal("0")
    new_users: int = 0


class DailyStatsResponse(BaseModel):
    start_date: date
    end_date: date
    days: List[DailyStatsEntry]


class TransactionTypeStats(BaseModel):
    type: str
    count: int
    points: int
    amount: Decimal


class RegionStats(BaseModel):
    region: str
    currency: str
    users: int
    revenue: Decimal


class OverviewStats(BaseModel):
    total_users: int
    total_prizes: int
    total_transactions: int
    total_points: int
    regions: List[RegionStats]


class UserStats(BaseModel):
    total_users: int
    new_users: int
    total_points: int
    average_points_per_user: int


class UserReportEntry(BaseModel):
    user_id: int
    name: Optional[str] = None
    email: str
    country: Optional[str] = None
    region: str
    games_played: int = 0
    games_won: int = 0
    games_lost: int = 0
    win_rate: float = 0.0
    prizes_won: int = 0
    points: int = 0
    registered_on: Optional[date] = None


class UserReportResponse(BaseModel):
    users: List[UserReportEntry]
    total_count: int
    has_next: bool
