"""
Regional pricing table

Five fixed regions group countries that share a currency and a point price.
Resolution is a pure lookup; country codes that belong to no region fall back
to EUROPE instead of raising.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class RegionConfig:
    region_id: str
    name: str
    currency: str
    points_per_play: int
    cost_per_point: Decimal
    countries: Tuple[str, ...]


REGION_CONFIG: Dict[str, RegionConfig] = {
    "AFRIQUE_NOIRE": RegionConfig(
        region_id="AFRIQUE_NOIRE",
        name="Afrique Noire",
        currency="XOF",
        points_per_play=2,
        cost_per_point=Decimal("150"),  # 300 XOF per play
        countries=("CI", "SN", "CM", "BF", "ML", "GN", "BJ", "TG", "NE", "CG", "GA", "CD"),
    ),
    "AFRIQUE_BLANCHE": RegionConfig(
        region_id="AFRIQUE_BLANCHE",
        name="Afrique Blanche",
        currency="EUR",
        points_per_play=2,
        cost_per_point=Decimal("0.5"),
        countries=("MA", "DZ", "TN"),
    ),
    "EUROPE": RegionConfig(
        region_id="EUROPE",
        name="Europe",
        currency="EUR",
        points_per_play=2,
        cost_per_point=Decimal("1"),
        countries=("FR", "BE", "CH", "IT", "DE", "ES", "PT", "GB"),
    ),
    "ASIE": RegionConfig(
        region_id="ASIE",
        name="Asie",
        currency="USD",
        points_per_play=2,
        cost_per_point=Decimal("1"),
        countries=("CN", "JP", "KR", "VN", "TH", "ID", "MY", "SG"),
    ),
    "AMERIQUE": RegionConfig(
        region_id="AMERIQUE",
        name="Amérique",
        currency="USD",
        points_per_play=2,
        cost_per_point=Decimal("1"),
        countries=("US", "CA", "BR", "MX"),
    ),
}

DEFAULT_REGION = "EUROPE"

_COUNTRY_INDEX: Dict[str, str] = {
    country: region_id
    for region_id, config in REGION_CONFIG.items()
    for country in config.countries
}


def resolve_region(
    country_code: Optional[str], default: str = DEFAULT_REGION
) -> RegionConfig:
    """Map an ISO country code to its region; unknown or empty codes get the default."""
    if country_code:
        region_id = _COUNTRY_INDEX.get(country_code.strip().upper())
        if region_id:
            return REGION_CONFIG[region_id]
    return REGION_CONFIG.get(default, REGION_CONFIG[DEFAULT_REGION])


def get_region(region_id: str) -> Optional[RegionConfig]:
    return REGION_CONFIG.get(region_id.upper())


def quote_price(region: RegionConfig, points: int) -> Decimal:
    """Monetary price of ``points`` in the region currency."""
    return (region.cost_per_point * points).quantize(Decimal("0.01"))


def region_for(
    region_id: Optional[str],
    country_code: Optional[str],
    default: str = DEFAULT_REGION,
) -> RegionConfig:
    """Effective region of a user: an explicit region wins over the country."""
    if region_id:
        config = get_region(region_id)
        if config:
            return config
    return resolve_region(country_code, default)
