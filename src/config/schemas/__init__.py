"""Configuration schema definitions."""

from src.config.schemas.base import Origin, RunMode
from src.config.schemas.search import (
    DistanceToArrivalConfig,
    EconomyFilterConfig,
    FilterConfig,
    FreshnessConfig,
    PadSizeConfig,
    PlanetaryConfig,
    SearchConfig,
)


__all__ = [
    "DistanceToArrivalConfig",
    "EconomyFilterConfig",
    "FilterConfig",
    "FreshnessConfig",
    "Origin",
    "PadSizeConfig",
    "PlanetaryConfig",
    "RunMode",
    "SearchConfig",
]
