from typing import List, Optional, Tuple

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.orm import Session

from bingoo.models.prize import Prize as PrizeModel, PrizeCategory
from bingoo.repositories.base import BaseRepository
from bingoo.schemas.prizes import PrizeItem


class PrizeRepository(BaseRepository[PrizeModel, PrizeItem]):
    def __init__(self, db: Session):
        super().__init__(PrizeModel, PrizeItem, db)

    def list_prizes(
        self,
        region_id: Optional[str] = None,
        category: Optional[PrizeCategory] = None,
        available_only: bool = False,
        include_global: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[PrizeItem], int]:
        """Catalog listing. Prizes without a region are global."""
        stmt = select(PrizeModel)

        if region_id:
            if include_global:
                stmt = stmt.where(
                    or_(PrizeModel.region_id == region_id, PrizeModel.region_id.is_(None))
                )
            else:
                stmt = stmt.where(PrizeModel.region_id == region_id)
        if category:
            stmt = stmt.where(PrizeModel.category == category)
        if available_only:
            stmt = stmt.where(PrizeModel.is_active.is_(True), PrizeModel.stock > 0)

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = (
            self.db.execute(
                stmt.order_by(PrizeModel.point_value, PrizeModel.id)
                .limit(limit)
                .offset(offset)
            )
            .scalars()
            .all()
        )
        return self._to_schemas(rows), total

    def consume_stock(self, prize_id: int) -> bool:
        """Take one unit of stock; the prize deactivates with its last unit.

        A single conditional UPDATE: of two concurrent claims on the last
        unit, only one matches ``stock > 0``.
        """
        result = self.db.execute(
            update(PrizeModel)
            .where(
                PrizeModel.id == prize_id,
                PrizeModel.is_active.is_(True),
                PrizeModel.stock > 0,
            )
            .values(
                stock=PrizeModel.stock - 1,
                is_active=case((PrizeModel.stock > 1, True), else_=False),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
