"""Search configuration schema."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.config.schemas.base import Origin, RunMode
from src.fetch.config import FetchConfig
from src.freshness.constants import ALWAYS_CANDIDATE, DEFAULT_THRESHOLD_DAYS
from src.freshness.evaluator import ThresholdPolicy
from src.stations.models import Category, Economy


DayThreshold = Annotated[int, Field(ge=ALWAYS_CANDIDATE)]


class FreshnessConfig(BaseModel):
    """Which categories are tracked and how old they may get.

    Attributes:
        threshold_days: Global day threshold; -1 flags any timestamp.
        information: Evaluate the information category.
        market: Evaluate the market category.
        shipyard: Evaluate the shipyard category.
        outfitting: Evaluate the outfitting category.
        overrides: Per-category thresholds replacing the global one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    threshold_days: DayThreshold = DEFAULT_THRESHOLD_DAYS
    information: bool = True
    market: bool = True
    shipyard: bool = False
    outfitting: bool = False
    overrides: dict[Category, DayThreshold] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_enabled(self) -> "FreshnessConfig":
        """Ensure at least one category is evaluated."""
        if not self.enabled_categories():
            msg = "At least one freshness category must be enabled"
            raise ValueError(msg)
        return self

    def is_enabled(self, category: Category) -> bool:
        """Whether a category is evaluated."""
        enabled: bool = getattr(self, category.value)
        return enabled

    def enabled_categories(self) -> list[Category]:
        """Enabled categories in their canonical order."""
        return [category for category in Category if self.is_enabled(category)]

    def threshold_for(self, category: Category) -> int:
        """Day threshold that applies to a category."""
        return self.overrides.get(category, self.threshold_days)

    def policy(self) -> ThresholdPolicy:
        """Threshold policy for the freshness evaluator."""
        return ThresholdPolicy(
            threshold_days=self.threshold_days,
            categories=frozenset(self.enabled_categories()),
        )


class DistanceToArrivalConfig(BaseModel):
    """Arrival distance limit in light seconds."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max: Annotated[float, Field(ge=0.0)]


class EconomyFilterConfig(BaseModel):
    """Allowed economies.

    Attributes:
        economies: Allowed economies (``list`` in configuration files).
        include_secondary: Also accept a matching secondary economy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    economies: list[Economy] = Field(alias="list", min_length=1)
    include_secondary: bool = False


class PadSizeConfig(BaseModel):
    """Landing pad requirement."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    l_pad_only: bool = False


class PlanetaryConfig(BaseModel):
    """Planetary facility handling."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    include: bool = True


class FilterConfig(BaseModel):
    """Record filters applied after the freshness stages.

    Attributes:
        exclude_names: Patterns; a matching station name is excluded.
        exclude_systems: Patterns; a matching system name is excluded.
        distance_to_arrival: Optional arrival distance limit.
        economy: Optional economy allow-list.
        pad_size: Optional landing pad requirement.
        planetary: Optional planetary facility handling.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    exclude_names: list[str] = Field(default_factory=list)
    exclude_systems: list[str] = Field(default_factory=list)
    distance_to_arrival: DistanceToArrivalConfig | None = None
    economy: EconomyFilterConfig | None = None
    pad_size: PadSizeConfig | None = None
    planetary: PlanetaryConfig | None = None


class SearchConfig(BaseModel):
    """Root configuration for config.yaml.

    Attributes:
        version: Schema version.
        max_entries: Maximum rows to show; 0 shows every match.
        max_dist: Maximum distance from the observer in light years.
        mode: Run mode.
        pos_origin: Where distances are measured from.
        freshness: Category thresholds.
        filter: Record filters.
        fetch: Download settings.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    max_entries: Annotated[int, Field(ge=0)] = 20
    max_dist: Annotated[float, Field(gt=0.0)] = 50.0
    mode: RunMode = RunMode.ONESHOT
    pos_origin: Origin = Origin.CURRENT
    freshness: FreshnessConfig = Field(default_factory=FreshnessConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)

    @field_validator("pos_origin", mode="before")
    @classmethod
    def normalize_origin(cls, v: object) -> object:
        """Accept the origin name in any letter case."""
        return v.lower() if isinstance(v, str) else v

    @property
    def limit(self) -> int | None:
        """Row cap for the ranker; None when unlimited."""
        return self.max_entries or None

    def with_overrides(self, **overrides: object) -> "SearchConfig":
        """Return a copy with command line overrides applied.

        Values that are None are ignored. The result is validated again.

        Args:
            **overrides: Top-level field values.

        Returns:
            New configuration.
        """
        update = {key: value for key, value in overrides.items() if value is not None}
        if not update:
            return self
        return SearchConfig.model_validate(self.model_dump() | update)
