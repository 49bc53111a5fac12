from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from bingoo.models.game import Game as GameModel, GameHistory as GameHistoryModel, GameKind
from bingoo.repositories.base import BaseRepository
from bingoo.schemas.prizes import GameHistoryEntry


class GameRepository(BaseRepository[GameHistoryModel, GameHistoryEntry]):
    """Games and their immutable history rows."""

    def __init__(self, db: Session):
        super().__init__(GameHistoryModel, GameHistoryEntry, db)

    def record(
        self,
        user_id: int,
        prize_id: Optional[int],
        won: bool,
        points: int,
        cost: int,
        kind: GameKind,
    ) -> GameHistoryEntry:
        """Insert a Game and its GameHistory row."""
        game = GameModel(
            user_id=user_id, prize_id=prize_id, won=won, points=points, cost=cost
        )
        self.db.add(game)
        self.db.flush()

        return self.create(
            user_id=user_id,
            game_id=game.id,
            prize_id=prize_id,
            kind=kind,
            won=won,
            points=points,
            cost=cost,
        )

    def history_for_user(
        self,
        user_id: int,
        kind: Optional[GameKind] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[GameHistoryEntry], int]:
        stmt = select(GameHistoryModel).where(GameHistoryModel.user_id == user_id)
        if kind is not None:
            stmt = stmt.where(GameHistoryModel.kind == kind)

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = (
            self.db.execute(
                stmt.order_by(
                    GameHistoryModel.created_at.desc(), GameHistoryModel.id.desc()
                )
                .limit(limit)
                .offset(offset)
            )
            .scalars()
            .all()
        )
        return self._to_schemas(rows), total

    def sum_won_points_since(self, user_id: int, since: datetime) -> int:
        return self.db.execute(
            select(func.coalesce(func.sum(GameHistoryModel.points), 0)).where(
                GameHistoryModel.user_id == user_id,
                GameHistoryModel.won.is_(True),
                GameHistoryModel.created_at >= since,
            )
        ).scalar_one()

    def sum_claimed_points(self, user_id: int) -> int:
        return self.db.execute(
            select(func.coalesce(func.sum(GameHistoryModel.points), 0)).where(
                GameHistoryModel.user_id == user_id,
                GameHistoryModel.kind == GameKind.CLAIM,
            )
        ).scalar_one()

    def totals_by_user(self, user_ids: Iterable[int]) -> Dict[int, Tuple[int, int, int]]:
        """user_id -> (games played, games won, prizes claimed)."""
        ids = list(user_ids)
        if not ids:
            return {}
        is_play = GameHistoryModel.kind == GameKind.PLAY
        stmt = (
            select(
                GameHistoryModel.user_id,
                func.sum(case((is_play, 1), else_=0)),
                func.sum(case((is_play & GameHistoryModel.won.is_(True), 1), else_=0)),
                func.sum(case((GameHistoryModel.kind == GameKind.CLAIM, 1), else_=0)),
            )
            .where(GameHistoryModel.user_id.in_(ids))
            .group_by(GameHistoryModel.user_id)
        )
        return {
            row[0]: (int(row[1] or 0), int(row[2] or 0), int(row[3] or 0))
            for row in self.db.execute(stmt)
        }
