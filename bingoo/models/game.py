import enum
from typing import Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from bingoo.models.base import BaseModel, IdType


class GameKind(enum.Enum):
    PLAY = "PLAY"
    CLAIM = "CLAIM"


class Game(BaseModel):
    __tablename__ = "games"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    prize_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("prizes.id"), nullable=True
    )
    won: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cost: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class GameHistory(BaseModel):
    """Immutable record of a play or a claim."""

    __tablename__ = "game_history"
    __table_args__ = (
        Index("idx_game_history_user_won_created", "user_id", "won", "created_at"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    game_id: Mapped[int] = mapped_column(IdType, ForeignKey("games.id"), nullable=False)
    prize_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("prizes.id"), nullable=True
    )
    kind: Mapped[GameKind] = mapped_column(
        Enum(GameKind, name="game_kind"), default=GameKind.PLAY, nullable=False
    )
    won: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cost: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
