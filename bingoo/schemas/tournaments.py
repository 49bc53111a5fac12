from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from bingoo.models.tournament import TournamentStatus


class RankPrize(BaseModel):
    rank: int = Field(..., ge=1)
    points: int = Field(..., gt=0)


class TournamentCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    entry_fee: int = Field(0, ge=0)
    min_players: int = Field(2, ge=1)
    max_players: int = Field(..., ge=1)
    start_time: Optional[datetime] = None
    duration_hours: int = Field(24, ge=1, le=24 * 30)
    prizes: List[RankPrize] = Field(default_factory=list)
    prize_id: Optional[int] = None

    @model_validator(mode="after")
    def check_player_bounds(self):
        if self.min_players > self.max_players:
            raise ValueError("min_players cannot exceed max_players")
        return self


class TournamentItem(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    entry_fee: int
    min_players: int
    max_players: int
    start_time: datetime
    end_time: datetime
    status: TournamentStatus
    prizes: List[RankPrize] = Field(default_factory=list)
    prize_id: Optional[int] = None
    participant_count: int = 0

    class Config:
        from_attributes = True


class TournamentListResponse(BaseModel):
    tournaments: List[TournamentItem]
    total_count: int


class TournamentJoinResponse(BaseModel):
    tournament_id: int
    user_id: int
    participant_id: int
    entry_fee: int
    balance_after: int
    message: str = "Joined tournament"


class ScoreUpdateRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    points: int


class LeaderboardEntry(BaseModel):
    user_id: int
    name: Optional[str] = None
    score: int
    rank: int


class LeaderboardResponse(BaseModel):
    tournament_id: int
    leaderboard: List[LeaderboardEntry]


class TournamentAdvanceResponse(BaseModel):
    started: int
    completed: int
    prizes_distributed: int
