import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from bingoo.models.base import BaseModel, IdType


class TournamentStatus(enum.Enum):
    REGISTERING = "REGISTERING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Tournament(BaseModel):
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    entry_fee: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    min_players: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    max_players: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[TournamentStatus] = mapped_column(
        Enum(TournamentStatus, name="tournament_status"),
        default=TournamentStatus.REGISTERING,
        nullable=False,
    )
    # [{"rank": 1, "points": 100}, ...]
    prizes: Mapped[List[dict]] = mapped_column(JSON, default=list, nullable=False)
    prize_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("prizes.id"), nullable=True
    )
    prizes_distributed: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )


class TournamentParticipant(BaseModel):
    __tablename__ = "tournament_participants"
    __table_args__ = (
        UniqueConstraint("tournament_id", "user_id", name="uq_tournament_participant"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("tournaments.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
