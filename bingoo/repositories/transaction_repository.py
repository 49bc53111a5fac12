from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from bingoo.models.transaction import (
    Transaction as TransactionModel,
    TransactionStatus,
    TransactionType,
)
from bingoo.models.user import User as UserModel
from bingoo.repositories.base import BaseRepository
from bingoo.schemas.transactions import TransactionEntry
from bingoo.utils.date_utils import to_date


def _day_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    """[start 00:00, end+1 00:00) in UTC."""
    lower = datetime.combine(start, time.min, tzinfo=timezone.utc)
    upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return lower, upper


class TransactionRepository(BaseRepository[TransactionModel, TransactionEntry]):
    """Append-only transaction log.

    Rows are inserted once; the only later write is the single
    PENDING -> COMPLETED|FAILED status transition.
    """

    def __init__(self, db: Session):
        super().__init__(TransactionModel, TransactionEntry, db)

    def append(
        self,
        user_id: int,
        type: TransactionType,
        points: int = 0,
        amount: Decimal = Decimal("0"),
        status: TransactionStatus = TransactionStatus.COMPLETED,
        **extra,
    ) -> TransactionEntry:
        return self.create(
            user_id=user_id,
            type=type,
            points=points,
            amount=amount,
            status=status,
            **extra,
        )

    def transition_status(
        self,
        transaction_id: int,
        new_status: TransactionStatus,
        provider_reference: Optional[str] = None,
    ) -> bool:
        """Move a PENDING row to its final status. False if it already left PENDING."""
        values = {"status": new_status}
        if provider_reference is not None:
            values["provider_reference"] = provider_reference
        result = self.db.execute(
            update(TransactionModel)
            .where(
                TransactionModel.id == transaction_id,
                TransactionModel.status == TransactionStatus.PENDING,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_transactions(
        self,
        user_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[TransactionEntry], int]:
        stmt = select(TransactionModel)
        if user_id is not None:
            stmt = stmt.where(TransactionModel.user_id == user_id)
        if type is not None:
            stmt = stmt.where(TransactionModel.type == type)
        if status is not None:
            stmt = stmt.where(TransactionModel.status == status)

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = (
            self.db.execute(
                stmt.order_by(
                    TransactionModel.created_at.desc(), TransactionModel.id.desc()
                )
                .limit(limit)
                .offset(offset)
            )
            .scalars()
            .all()
        )
        return self._to_schemas(rows), total

    def count_since(self, user_id: int, since: datetime) -> int:
        return self.db.execute(
            select(func.count(TransactionModel.id)).where(
                TransactionModel.user_id == user_id,
                TransactionModel.created_at >= since,
            )
        ).scalar_one()

    def sum_completed_points(self, user_id: int) -> int:
        return self.db.execute(
            select(func.coalesce(func.sum(TransactionModel.points), 0)).where(
                TransactionModel.user_id == user_id,
                TransactionModel.status == TransactionStatus.COMPLETED,
            )
        ).scalar_one()

    def daily_aggregates(self, start: date, end: date) -> Dict[date, Tuple[int, Decimal]]:
        """Per-day (transaction count, completed deposit revenue).

        Days without activity are absent; callers zero-fill.
        """
        lower, upper = _day_bounds(start, end)
        day = func.date(TransactionModel.created_at)
        stmt = (
            select(day.label("day"), func.count(TransactionModel.id))
            .where(TransactionModel.created_at >= lower, TransactionModel.created_at < upper)
            .group_by(day)
        )
        counts = {to_date(row[0]): row[1] for row in self.db.execute(stmt)}

        revenue_stmt = (
            select(day.label("day"), func.coalesce(func.sum(TransactionModel.amount), 0))
            .where(
                TransactionModel.created_at >= lower,
                TransactionModel.created_at < upper,
                TransactionModel.type == TransactionType.DEPOSIT,
                TransactionModel.status == TransactionStatus.COMPLETED,
            )
            .group_by(day)
        )
        revenues = {
            to_date(row[0]): Decimal(str(row[1])) for row in self.db.execute(revenue_stmt)
        }

        return {
            key: (counts.get(key, 0), revenues.get(key, Decimal("0")))
            for key in set(counts) | set(revenues)
        }

    def type_totals(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[Tuple[TransactionType, int, int, Decimal]]:
        stmt = select(
            TransactionModel.type,
            func.count(TransactionModel.id),
            func.coalesce(func.sum(TransactionModel.points), 0),
            func.coalesce(func.sum(TransactionModel.amount), 0),
        ).where(TransactionModel.status == TransactionStatus.COMPLETED)
        if start and end:
            lower, upper = _day_bounds(start, end)
            stmt = stmt.where(
                TransactionModel.created_at >= lower, TransactionModel.created_at < upper
            )
        stmt = stmt.group_by(TransactionModel.type).order_by(TransactionModel.type)
        return [
            (row[0], row[1], int(row[2]), Decimal(str(row[3])))
            for row in self.db.execute(stmt)
        ]

    def revenue_by_location(self) -> List[Tuple[Optional[str], Optional[str], Decimal]]:
        """Completed deposit revenue per (region_id, country) of the paying user."""
        stmt = (
            select(
                UserModel.region_id,
                UserModel.country,
                func.coalesce(func.sum(TransactionModel.amount), 0),
            )
            .join(UserModel, UserModel.id == TransactionModel.user_id)
            .where(
                TransactionModel.type == TransactionType.DEPOSIT,
                TransactionModel.status == TransactionStatus.COMPLETED,
            )
            .group_by(UserModel.region_id, UserModel.country)
        )
        return [
            (row[0], row[1], Decimal(str(row[2]))) for row in self.db.execute(stmt)
        ]
