from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from bingoo.models.user import User as UserModel
from bingoo.repositories.base import BaseRepository
from bingoo.schemas.user import User as UserSchema
from bingoo.utils.date_utils import to_date


class UserRepository(BaseRepository[UserModel, UserSchema]):
    """Users and their point balances.

    Balance changes are single conditional UPDATE statements so two
    concurrent debits can never both pass the balance check.
    """

    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def get_by_email(self, email: str) -> Optional[UserSchema]:
        return self.get_by_field("email", email)

    def get_points(self, user_id: int) -> Optional[int]:
        return self.db.execute(
            select(UserModel.points).where(UserModel.id == user_id)
        ).scalar_one_or_none()

    def decrement_points_if_sufficient(self, user_id: int, points: int) -> Optional[int]:
        """Debit ``points`` if the balance covers it.

        Returns the new balance, or None when the user is missing or the
        balance is too low (nothing is written in that case).
        """
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.points >= points)
            .values(points=UserModel.points - points)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        return self.get_points(user_id)

    def increment_points(self, user_id: int, points: int) -> Optional[int]:
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(points=UserModel.points + points)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        return self.get_points(user_id)

    def set_points(self, user_id: int, points: int) -> Optional[Tuple[int, int]]:
        """Lock the row and overwrite the balance. Returns (previous, new)."""
        user = self._get_model(user_id, for_update=True)
        if user is None:
            return None
        previous = user.points
        user.points = points
        self.db.flush()
        return previous, points

    def search(
        self,
        query: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[UserSchema], int]:
        stmt = select(UserModel)
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(UserModel.email.ilike(pattern), UserModel.name.ilike(pattern))
            )

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = (
            self.db.execute(
                stmt.order_by(UserModel.created_at.desc(), UserModel.id.desc())
                .limit(limit)
                .offset(offset)
            )
            .scalars()
            .all()
        )
        return self._to_schemas(rows), total

    def daily_signups(self, lower: datetime, upper: datetime) -> Dict[date, int]:
        day = func.date(UserModel.created_at)
        stmt = (
            select(day, func.count(UserModel.id))
            .where(UserModel.created_at >= lower, UserModel.created_at < upper)
            .group_by(day)
        )
        return {to_date(row[0]): row[1] for row in self.db.execute(stmt)}

    def count_by_location(self) -> List[Tuple[Optional[str], Optional[str], int]]:
        """(region_id, country, users) groups."""
        stmt = select(
            UserModel.region_id, UserModel.country, func.count(UserModel.id)
        ).group_by(UserModel.region_id, UserModel.country)
        return [(row[0], row[1], row[2]) for row in self.db.execute(stmt)]

    def total_points(self) -> int:
        return self.db.execute(
            select(func.coalesce(func.sum(UserModel.points), 0))
        ).scalar_one()

    def count_created_since(self, since: datetime) -> int:
        return self.db.execute(
            select(func.count(UserModel.id)).where(UserModel.created_at >= since)
        ).scalar_one()
