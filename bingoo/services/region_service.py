import logging
from typing import List

from sqlalchemy.orm import Session

from bingoo.config import settings
from bingoo.core.exceptions import UserNotFoundError
from bingoo.core.regions import REGION_CONFIG, RegionConfig, region_for, resolve_region
from bingoo.repositories.region_repository import RegionRepository
from bingoo.repositories.user_repository import UserRepository
from bingoo.schemas.region import RegionRecord, RegionResponse

logger = logging.getLogger(__name__)


def to_response(config: RegionConfig) -> RegionResponse:
    return RegionResponse(
        region=config.region_id,
        name=config.name,
        currency=config.currency,
        points_per_play=config.points_per_play,
        cost_per_point=config.cost_per_point,
    )


class RegionService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.region_repo = RegionRepository(db)

    def list_regions(self) -> List[RegionResponse]:
        return [to_response(config) for config in REGION_CONFIG.values()]

    def resolve(self, country_code: str) -> RegionResponse:
        return to_response(resolve_region(country_code, settings.DEFAULT_REGION))

    def region_for_user(self, user_id: int) -> RegionConfig:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return region_for(user.region_id, user.country, settings.DEFAULT_REGION)

    def get_user_region(self, user_id: int) -> RegionResponse:
        return to_response(self.region_for_user(user_id))

    def seed_regions(self) -> List[RegionRecord]:
        """Upsert the static table into ``regions``. Caller commits."""
        records = [self.region_repo.upsert(config) for config in REGION_CONFIG.values()]
        logger.info(f"Seeded {len(records)} regions")
        return records
