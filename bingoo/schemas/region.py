from decimal import Decimal

from pydantic import BaseModel, Field


class RegionResponse(BaseModel):
    """Pricing region resolved for a country."""

    region: str = Field(..., description="Region identifier, e.g. EUROPE")
    name: str
    currency: str
    points_per_play: int
    cost_per_point: Decimal


class RegionRecord(BaseModel):
    """Stored row of the regions table."""

    id: str
    name: str
    currency: str
    points_per_play: int
    cost_per_point: Decimal

    class Config:
        from_attributes = True
