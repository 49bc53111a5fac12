from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bingoo.core.regions import RegionConfig
from bingoo.models.region import Region as RegionModel
from bingoo.schemas.region import RegionRecord


class RegionRepository:
    """Reference table of pricing regions."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, region_id: str) -> Optional[RegionRecord]:
        region = self.db.get(RegionModel, region_id)
        return RegionRecord.model_validate(region) if region else None

    def list_regions(self) -> List[RegionRecord]:
        rows = self.db.execute(select(RegionModel).order_by(RegionModel.id)).scalars()
        return [RegionRecord.model_validate(row) for row in rows]

    def upsert(self, config: RegionConfig) -> RegionRecord:
        region = self.db.get(RegionModel, config.region_id)
        if region is None:
            region = RegionModel(id=config.region_id)
            self.db.add(region)
        region.name = config.name
        region.currency = config.currency
        region.points_per_play = config.points_per_play
        region.cost_per_point = config.cost_per_point
        self.db.flush()
        return RegionRecord.model_validate(region)
