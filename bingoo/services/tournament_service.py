import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bingoo.core.exceptions import (
    AlreadyJoinedError,
    InsufficientPointsError,
    NotFoundError,
    RegistrationClosedError,
    TournamentFullError,
    TournamentNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from bingoo.database.session import atomic
from bingoo.models.tournament import TournamentStatus
from bingoo.models.transaction import TransactionType
from bingoo.repositories.tournament_repository import TournamentRepository
from bingoo.repositories.user_repository import UserRepository
from bingoo.schemas.tournaments import (
    LeaderboardEntry,
    LeaderboardResponse,
    ScoreUpdateRequest,
    TournamentAdvanceResponse,
    TournamentCreateRequest,
    TournamentItem,
    TournamentJoinResponse,
    TournamentListResponse,
)
from bingoo.services.point_service import PointService
from bingoo.services.prize_service import PrizeService
from bingoo.utils.date_utils import utcnow

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TournamentService:
    """Tournament enrollment, scoring and lifecycle.

    Lifecycle: REGISTERING -> IN_PROGRESS at ``start_time``,
    IN_PROGRESS -> COMPLETED at ``end_time``; rank prizes are credited once
    per tournament, guarded by ``prizes_distributed``.
    """

    def __init__(self, db: Session):
        self.db = db
        self.tournament_repo = TournamentRepository(db)
        self.user_repo = UserRepository(db)
        self.point_service = PointService(db)
        self.prize_service = PrizeService(db)

    def create_tournament(self, request: TournamentCreateRequest) -> TournamentItem:
        start = _as_utc(request.start_time) if request.start_time else utcnow()
        end = start + timedelta(hours=request.duration_hours)

        ranks = [prize.rank for prize in request.prizes]
        if len(ranks) != len(set(ranks)):
            raise ValidationError("Duplicate prize ranks", {"ranks": ranks})
        if request.prize_id is not None:
            self.prize_service.get_prize(request.prize_id)

        with atomic(self.db):
            tournament = self.tournament_repo.create(
                name=request.name,
                description=request.description,
                entry_fee=request.entry_fee,
                min_players=request.min_players,
                max_players=request.max_players,
                start_time=start,
                end_time=end,
                status=TournamentStatus.REGISTERING,
                prizes=[prize.model_dump() for prize in request.prizes],
                prize_id=request.prize_id,
            )

        logger.info(f"Created tournament {tournament.id} ({tournament.name})")
        return tournament

    def get_tournament(self, tournament_id: int) -> TournamentItem:
        tournament = self.tournament_repo.get_tournament(tournament_id)
        if not tournament:
            raise TournamentNotFoundError(tournament_id)
        return tournament

    def list_tournaments(
        self, status: Optional[TournamentStatus] = None
    ) -> TournamentListResponse:
        tournaments = self.tournament_repo.list_tournaments(status)
        return TournamentListResponse(
            tournaments=tournaments, total_count=len(tournaments)
        )

    def join(self, tournament_id: int, user_id: int) -> TournamentJoinResponse:
        """Enroll a user and charge the entry fee.

        The tournament row is locked for the duration of the unit, and the
        UNIQUE(tournament_id, user_id) constraint rejects a concurrent
        duplicate that slips past the membership check.
        """
        with atomic(self.db):
            tournament = self.tournament_repo.lock_tournament(tournament_id)
            if not tournament:
                raise TournamentNotFoundError(tournament_id)
            if tournament.status != TournamentStatus.REGISTERING:
                raise RegistrationClosedError(tournament_id, tournament.status.value)
            if tournament.participant_count >= tournament.max_players:
                raise TournamentFullError(tournament_id, tournament.max_players)

            available = self.user_repo.get_points(user_id)
            if available is None:
                raise UserNotFoundError(user_id)
            if available < tournament.entry_fee:
                raise InsufficientPointsError(
                    required=tournament.entry_fee, available=available
                )
            if self.tournament_repo.has_participant(tournament_id, user_id):
                raise AlreadyJoinedError(tournament_id, user_id)

            try:
                participant_id = self.tournament_repo.add_participant(
                    tournament_id, user_id
                )
            except IntegrityError:
                raise AlreadyJoinedError(tournament_id, user_id)

            balance = available
            if tournament.entry_fee > 0:
                balance = self.point_service.debit(
                    user_id,
                    tournament.entry_fee,
                    TransactionType.ENTRY_FEE,
                    description=f"Entry fee for tournament {tournament_id}",
                    reference=f"tournament_{tournament_id}",
                ).balance_after

        logger.info(
            f"User {user_id} joined tournament {tournament_id} (fee {tournament.entry_fee})"
        )
        return TournamentJoinResponse(
            tournament_id=tournament_id,
            user_id=user_id,
            participant_id=participant_id,
            entry_fee=tournament.entry_fee,
            balance_after=balance,
        )

    def update_score(
        self, tournament_id: int, request: ScoreUpdateRequest
    ) -> LeaderboardEntry:
        tournament = self.get_tournament(tournament_id)
        if tournament.status != TournamentStatus.IN_PROGRESS:
            raise ValidationError(
                "Scores can only change while the tournament is in progress",
                {"tournament_id": tournament_id, "status": tournament.status.value},
            )

        with atomic(self.db):
            score = self.tournament_repo.add_score(
                tournament_id, request.user_id, request.points
            )
            if score is None:
                raise NotFoundError(
                    f"User {request.user_id} is not in tournament {tournament_id}",
                    {"tournament_id": tournament_id, "user_id": request.user_id},
                )

        board = self.get_leaderboard(tournament_id)
        return next(
            entry for entry in board.leaderboard if entry.user_id == request.user_id
        )

    def get_leaderboard(
        self, tournament_id: int, limit: Optional[int] = None
    ) -> LeaderboardResponse:
        self.get_tournament(tournament_id)
        rows = self.tournament_repo.leaderboard(tournament_id, limit)
        return LeaderboardResponse(
            tournament_id=tournament_id,
            leaderboard=[
                LeaderboardEntry(user_id=user_id, name=name, score=score, rank=rank)
                for rank, (user_id, name, score) in enumerate(rows, start=1)
            ],
        )

    def advance_lifecycle(self, now: Optional[datetime] = None) -> TournamentAdvanceResponse:
        """Move due tournaments forward and pay out finished ones."""
        now = now or utcnow()
        started = completed = distributed = 0

        for tournament in self.tournament_repo.due_to_start(now):
            with atomic(self.db):
                if self.tournament_repo.set_status(
                    tournament.id,
                    TournamentStatus.IN_PROGRESS,
                    expected=TournamentStatus.REGISTERING,
                ):
                    started += 1
                    logger.info(f"Tournament {tournament.id} started")

        for tournament in self.tournament_repo.due_to_end(now):
            with atomic(self.db):
                if self.tournament_repo.set_status(
                    tournament.id,
                    TournamentStatus.COMPLETED,
                    expected=TournamentStatus.IN_PROGRESS,
                ):
                    completed += 1
                    logger.info(f"Tournament {tournament.id} completed")

        for tournament in self.tournament_repo.undistributed_completed():
            distributed += self._distribute_prizes(tournament)

        return TournamentAdvanceResponse(
            started=started, completed=completed, prizes_distributed=distributed
        )

    def _distribute_prizes(self, tournament: TournamentItem) -> int:
        """Credit rank prizes; returns the number of payouts."""
        payouts = 0
        with atomic(self.db):
            if not self.tournament_repo.mark_prizes_distributed(tournament.id):
                return 0
            ranking = self.tournament_repo.leaderboard(tournament.id)
            for prize in sorted(tournament.prizes, key=lambda p: p.rank):
                if prize.rank > len(ranking):
                    continue
                user_id = ranking[prize.rank - 1][0]
                self.point_service.credit(
                    user_id,
                    prize.points,
                    TransactionType.TOURNAMENT_PRIZE,
                    description=f"Rank {prize.rank} in tournament {tournament.id}",
                    reference=f"tournament_{tournament.id}",
                )
                payouts += 1

        logger.info(f"Tournament {tournament.id}: {payouts} prizes distributed")
        return payouts

