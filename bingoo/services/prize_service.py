import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bingoo.core.exceptions import (
    PrizeNotFoundError,
    PrizeUnavailableError,
    ValidationError,
)
from bingoo.core.regions import REGION_CONFIG
from bingoo.database.session import atomic
from bingoo.models.game import Game, GameKind
from bingoo.models.prize import PrizeCategory
from bingoo.repositories.game_repository import GameRepository
from bingoo.repositories.prize_repository import PrizeRepository
from bingoo.schemas.common import DeleteResultResponse
from bingoo.schemas.prizes import (
    AdminPrizeCreateRequest,
    AdminPrizeUpdateRequest,
    GameHistoryEntry,
    GameHistoryResponse,
    PrizeItem,
    PrizeListResponse,
)
from bingoo.services.point_service import PointService
from bingoo.services.region_service import RegionService

logger = logging.getLogger(__name__)


class PrizeService:
    """Prize catalog and the claim flow."""

    def __init__(self, db: Session):
        self.db = db
        self.prize_repo = PrizeRepository(db)
        self.game_repo = GameRepository(db)
        self.point_service = PointService(db)
        self.region_service = RegionService(db)

    def get_prize(self, prize_id: int) -> PrizeItem:
        prize = self.prize_repo.get_by_id(prize_id)
        if not prize:
            raise PrizeNotFoundError(prize_id)
        return prize

    def get_available_prize(self, prize_id: int) -> PrizeItem:
        prize = self.get_prize(prize_id)
        if not prize.is_available:
            raise PrizeUnavailableError(prize_id)
        return prize

    def list_prizes(
        self,
        region: Optional[str] = None,
        category: Optional[PrizeCategory] = None,
        available_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> PrizeListResponse:
        prizes, total = self.prize_repo.list_prizes(
            region_id=region.upper() if region else None,
            category=category,
            available_only=available_only,
            limit=limit,
            offset=offset,
        )
        return PrizeListResponse(prizes=prizes, total_count=total)

    def list_regional_prizes(
        self,
        user_id: int,
        category: Optional[PrizeCategory] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> PrizeListResponse:
        """Available prizes of the caller's region plus global ones."""
        region = self.region_service.region_for_user(user_id)
        return self.list_prizes(
            region=region.region_id,
            category=category,
            available_only=True,
            limit=limit,
            offset=offset,
        )

    def claim_prize(self, user_id: int, prize_id: int) -> GameHistoryEntry:
        """Exchange points for a prize.

        Stock decrement, point debit and the CLAIM history row are one atomic
        unit. The prize deactivates when its last unit is claimed.
        """
        prize = self.get_available_prize(prize_id)
        self.point_service.ensure_affordable(user_id, prize.point_value)

        with atomic(self.db):
            if not self.prize_repo.consume_stock(prize_id):
                raise PrizeUnavailableError(prize_id)
            balance = self.point_service.debit_balance(user_id, prize.point_value)
            entry = self.game_repo.record(
                user_id=user_id,
                prize_id=prize_id,
                won=True,
                points=prize.point_value,
                cost=0,
                kind=GameKind.CLAIM,
            )

        logger.info(
            f"User {user_id} claimed prize {prize_id} for {prize.point_value} points, balance {balance}"
        )
        return entry

    def get_user_prizes(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> GameHistoryResponse:
        entries, total = self.game_repo.history_for_user(
            user_id, kind=GameKind.CLAIM, limit=limit, offset=offset
        )
        return GameHistoryResponse(
            entries=entries, total_count=total, has_next=offset + len(entries) < total
        )

    # Admin

    def _check_region(self, region_id: Optional[str]) -> Optional[str]:
        if region_id is None:
            return None
        region_id = region_id.upper()
        if region_id not in REGION_CONFIG:
            raise ValidationError(
                f"Unknown region: {region_id}", {"allowed": list(REGION_CONFIG)}
            )
        return region_id

    def create_prize(self, request: AdminPrizeCreateRequest) -> PrizeItem:
        data = request.model_dump()
        data["region_id"] = self._check_region(request.region_id)
        if data["stock"] == 0:
            data["is_active"] = False

        with atomic(self.db):
            prize = self.prize_repo.create(**data)

        logger.info(f"Created prize {prize.id} ({prize.name})")
        return prize

    def update_prize(self, prize_id: int, request: AdminPrizeUpdateRequest) -> PrizeItem:
        changes = request.model_dump(exclude_unset=True)
        if "region_id" in changes:
            changes["region_id"] = self._check_region(changes["region_id"])
        if not changes:
            return self.get_prize(prize_id)

        with atomic(self.db):
            prize = self.prize_repo.update(prize_id, **changes)
            if not prize:
                raise PrizeNotFoundError(prize_id)

        logger.info(f"Updated prize {prize_id}: {sorted(changes)}")
        return prize

    def delete_prize(self, prize_id: int) -> DeleteResultResponse:
        """Hard delete; prizes that already have games must be deactivated instead."""
        self.get_prize(prize_id)
        played = self.db.execute(
            select(func.count(Game.id)).where(Game.prize_id == prize_id)
        ).scalar_one()
        if played:
            raise ValidationError(
                "Prize has game history; deactivate it instead",
                {"prize_id": prize_id, "games": played},
            )

        with atomic(self.db):
            deleted = self.prize_repo.delete(prize_id)

        logger.info(f"Deleted prize {prize_id}")
        return DeleteResultResponse(deleted=deleted, id=prize_id)
