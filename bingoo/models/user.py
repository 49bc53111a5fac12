from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from bingoo.models.base import BaseModel, IdType


class UserRole(str, Enum):
    """Roles carried in the identity token."""

    USER = "USER"
    ADMIN = "ADMIN"

    @classmethod
    def is_admin(cls, role: Union[str, "UserRole"]) -> bool:
        if isinstance(role, cls):
            role = role.value
        return str(role).upper() == cls.ADMIN.value


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_users_points_nonneg"),
        Index("idx_users_country", "country"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    region_id: Mapped[Optional[str]] = mapped_column(
        String(32), ForeignKey("regions.id"), nullable=True
    )
    # Spendable balance; the ledger is the only writer.
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Monetary balance in the region currency.
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    role: Mapped[str] = mapped_column(
        String(20), default=UserRole.USER.value, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, points={self.points})>"

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(self.role)
