import logging
import random
from typing import Optional

from sqlalchemy.orm import Session

from bingoo.config import settings
from bingoo.database.session import atomic
from bingoo.models.game import GameKind
from bingoo.models.transaction import TransactionType
from bingoo.repositories.game_repository import GameRepository
from bingoo.repositories.prize_repository import PrizeRepository
from bingoo.schemas.games import GamePlayResponse
from bingoo.schemas.prizes import GameHistoryResponse
from bingoo.services.point_service import PointService
from bingoo.services.prize_service import PrizeService
from bingoo.services.region_service import RegionService

logger = logging.getLogger(__name__)


class GameService:
    """Paid plays for a prize.

    A play costs the regional points-per-play and wins with probability
    ``win_rate``. A win takes one unit of the prize's stock.
    """

    def __init__(
        self,
        db: Session,
        win_rate: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        self.db = db
        self.win_rate = settings.GAME_WIN_RATE if win_rate is None else win_rate
        self.rng = rng or random.Random()
        self.game_repo = GameRepository(db)
        self.prize_repo = PrizeRepository(db)
        self.point_service = PointService(db)
        self.prize_service = PrizeService(db)
        self.region_service = RegionService(db)

    def play(self, user_id: int, prize_id: int) -> GamePlayResponse:
        prize = self.prize_service.get_available_prize(prize_id)
        region = self.region_service.region_for_user(user_id)
        cost = region.points_per_play
        self.point_service.ensure_affordable(user_id, cost)

        with atomic(self.db):
            charge = self.point_service.debit(
                user_id,
                cost,
                TransactionType.GAME_COST,
                description=f"Play for prize {prize_id}",
                reference=f"prize_{prize_id}",
            )
            won = self.rng.random() < self.win_rate
            if won and not self.prize_repo.consume_stock(prize_id):
                # Last unit went to a concurrent winner.
                won = False
            entry = self.game_repo.record(
                user_id=user_id,
                prize_id=prize_id,
                won=won,
                points=prize.point_value if won else 0,
                cost=cost,
                kind=GameKind.PLAY,
            )

        logger.info(
            f"User {user_id} played prize {prize_id} ({region.region_id}, cost {cost}): {'won' if won else 'lost'}"
        )
        return GamePlayResponse(
            game_id=entry.game_id,
            prize_id=prize_id,
            won=won,
            cost=cost,
            points_won=entry.points,
            balance_after=charge.balance_after,
            transaction_id=charge.transaction_id,
        )

    def get_history(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> GameHistoryResponse:
        entries, total = self.game_repo.history_for_user(
            user_id, limit=limit, offset=offset
        )
        return GameHistoryResponse(
            entries=entries, total_count=total, has_next=offset + len(entries) < total
        )
