from decimal import Decimal

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from bingoo.models.base import BaseModel


class Region(BaseModel):
    """Reference data: one row per pricing region (seeded by scripts/init_regions.py)."""

    __tablename__ = "regions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    points_per_play: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_per_point: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
