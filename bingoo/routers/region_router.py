from typing import List

from fastapi import APIRouter, Depends, Path

from bingoo.deps import get_region_service
from bingoo.schemas.region import RegionResponse
from bingoo.services.region_service import RegionService

router = APIRouter(prefix="/regions", tags=["regions"])


@router.get("", response_model=List[RegionResponse])
def list_regions(
    region_service: RegionService = Depends(get_region_service),
) -> List[RegionResponse]:
    return region_service.list_regions()


@router.get("/{country_code}", response_model=RegionResponse)
def resolve_country(
    country_code: str = Path(..., min_length=2, max_length=2, description="ISO 3166-1 alpha-2"),
    region_service: RegionService = Depends(get_region_service),
) -> RegionResponse:
    """Region for a country code. Unlisted countries resolve to the default region."""
    return region_service.resolve(country_code)
