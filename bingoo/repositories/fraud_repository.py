from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bingoo.models.fraud import FraudAlert as FraudAlertModel
from bingoo.repositories.base import BaseRepository
from bingoo.schemas.fraud import FraudAlertItem


class FraudAlertRepository(BaseRepository[FraudAlertModel, FraudAlertItem]):
    def __init__(self, db: Session):
        super().__init__(FraudAlertModel, FraudAlertItem, db)

    def list_alerts(
        self,
        user_id: Optional[int] = None,
        reviewed: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[FraudAlertItem], int]:
        stmt = select(FraudAlertModel)
        if user_id is not None:
            stmt = stmt.where(FraudAlertModel.user_id == user_id)
        if reviewed is not None:
            stmt = stmt.where(FraudAlertModel.reviewed.is_(reviewed))

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = (
            self.db.execute(
                stmt.order_by(FraudAlertModel.created_at.desc(), FraudAlertModel.id.desc())
                .limit(limit)
                .offset(offset)
            )
            .scalars()
            .all()
        )
        return self._to_schemas(rows), total
