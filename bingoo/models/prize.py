import enum
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bingoo.models.base import BaseModel, IdType


class PrizeCategory(enum.Enum):
    FOOD = "FOOD"
    CLOTHING = "CLOTHING"
    SUPER = "SUPER"


class Prize(BaseModel):
    __tablename__ = "prizes"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_prizes_stock_nonneg"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[PrizeCategory] = mapped_column(
        Enum(PrizeCategory, name="prize_category"), nullable=False
    )
    point_value: Mapped[int] = mapped_column(Integer, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # NULL means the prize is offered in every region.
    region_id: Mapped[Optional[str]] = mapped_column(
        String(32), ForeignKey("regions.id"), nullable=True, index=True
    )
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def is_available(self) -> bool:
        return bool(self.is_active) and self.stock > 0
