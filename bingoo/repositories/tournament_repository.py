from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from bingoo.models.tournament import (
    Tournament as TournamentModel,
    TournamentParticipant as ParticipantModel,
    TournamentStatus,
)
from bingoo.models.user import User as UserModel
from bingoo.repositories.base import BaseRepository
from bingoo.schemas.tournaments import TournamentItem


class TournamentRepository(BaseRepository[TournamentModel, TournamentItem]):
    def __init__(self, db: Session):
        super().__init__(TournamentModel, TournamentItem, db)

    def _with_count(self, tournament: Optional[TournamentModel]) -> Optional[TournamentItem]:
        item = self._to_schema(tournament)
        if item is not None:
            item.participant_count = self.count_participants(item.id)
        return item

    def get_tournament(self, tournament_id: int) -> Optional[TournamentItem]:
        return self._with_count(self._get_model(tournament_id))

    def lock_tournament(self, tournament_id: int) -> Optional[TournamentItem]:
        """SELECT ... FOR UPDATE; concurrent joins on one tournament serialize here."""
        return self._with_count(self._get_model(tournament_id, for_update=True))

    def list_tournaments(
        self, status: Optional[TournamentStatus] = None
    ) -> List[TournamentItem]:
        stmt = select(TournamentModel)
        if status is not None:
            stmt = stmt.where(TournamentModel.status == status)
        stmt = stmt.order_by(TournamentModel.start_time, TournamentModel.id)
        return [self._with_count(row) for row in self.db.execute(stmt).scalars()]

    def count_participants(self, tournament_id: int) -> int:
        return self.db.execute(
            select(func.count(ParticipantModel.id)).where(
                ParticipantModel.tournament_id == tournament_id
            )
        ).scalar_one()

    def has_participant(self, tournament_id: int, user_id: int) -> bool:
        return (
            self.db.execute(
                select(ParticipantModel.id).where(
                    ParticipantModel.tournament_id == tournament_id,
                    ParticipantModel.user_id == user_id,
                )
            ).first()
            is not None
        )

    def add_participant(self, tournament_id: int, user_id: int) -> int:
        """Insert the participant row. Raises IntegrityError on a duplicate."""
        participant = ParticipantModel(tournament_id=tournament_id, user_id=user_id)
        self.db.add(participant)
        self.db.flush()
        return participant.id

    def add_score(self, tournament_id: int, user_id: int, points: int) -> Optional[int]:
        result = self.db.execute(
            update(ParticipantModel)
            .where(
                ParticipantModel.tournament_id == tournament_id,
                ParticipantModel.user_id == user_id,
            )
            .values(score=ParticipantModel.score + points)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        return self.db.execute(
            select(ParticipantModel.score).where(
                ParticipantModel.tournament_id == tournament_id,
                ParticipantModel.user_id == user_id,
            )
        ).scalar_one()

    def leaderboard(
        self, tournament_id: int, limit: Optional[int] = None
    ) -> List[Tuple[int, Optional[str], int]]:
        """(user_id, name, score) ordered by score, earliest joiner first on ties."""
        stmt = (
            select(ParticipantModel.user_id, UserModel.name, ParticipantModel.score)
            .join(UserModel, UserModel.id == ParticipantModel.user_id)
            .where(ParticipantModel.tournament_id == tournament_id)
            .order_by(ParticipantModel.score.desc(), ParticipantModel.id)
        )
        if limit:
            stmt = stmt.limit(limit)
        return [(row[0], row[1], row[2]) for row in self.db.execute(stmt)]

    def due_to_start(self, now: datetime) -> List[TournamentItem]:
        stmt = select(TournamentModel).where(
            TournamentModel.status == TournamentStatus.REGISTERING,
            TournamentModel.start_time <= now,
        )
        return [self._with_count(row) for row in self.db.execute(stmt).scalars()]

    def due_to_end(self, now: datetime) -> List[TournamentItem]:
        stmt = select(TournamentModel).where(
            TournamentModel.status == TournamentStatus.IN_PROGRESS,
            TournamentModel.end_time <= now,
        )
        return [self._with_count(row) for row in self.db.execute(stmt).scalars()]

    def set_status(
        self,
        tournament_id: int,
        new_status: TournamentStatus,
        expected: TournamentStatus,
    ) -> bool:
        result = self.db.execute(
            update(TournamentModel)
            .where(
                TournamentModel.id == tournament_id,
                TournamentModel.status == expected,
            )
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def mark_prizes_distributed(self, tournament_id: int) -> bool:
        """Flip the flag once; False if another run already distributed."""
        result = self.db.execute(
            update(TournamentModel)
            .where(
                TournamentModel.id == tournament_id,
                TournamentModel.prizes_distributed.is_(False),
            )
            .values(prizes_distributed=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def undistributed_completed(self) -> List[TournamentItem]:
        stmt = select(TournamentModel).where(
            TournamentModel.status == TournamentStatus.COMPLETED,
            TournamentModel.prizes_distributed.is_(False),
        )
        return [self._with_count(row) for row in self.db.execute(stmt).scalars()]
