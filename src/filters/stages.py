"""Filter stages.

Every stage exposes the same two operations:

- ``evaluate(context) -> StageResult``: pure judgement plus the flags the
  stage wants applied.
- ``accept(context) -> bool``: evaluate, apply the patch when accepted,
  and return the verdict.

Stages never raise during evaluation. Anything that can fail (pattern
compilation) fails when the stage is constructed.
"""

import re
from dataclasses import dataclass, field

from src.filters.errors import ConfigurationError
from src.filters.models import (
    ACCEPT,
    REJECT,
    ContextPatch,
    EvaluationContext,
    StageResult,
)
from src.freshness.evaluator import is_candidate
from src.stations.models import Category, Economy


def _verdict(accepted: bool) -> StageResult:
    return ACCEPT if accepted else REJECT


def _accept(stage: "Stage", context: EvaluationContext) -> bool:
    result = stage.evaluate(context)
    if result.accepted:
        context.apply(result.patch)
    return result.accepted


def compile_patterns(patterns: tuple[str, ...], stage: str) -> re.Pattern[str] | None:
    """Compile exclusion patterns into one alternation.

    Args:
        patterns: Regular expressions; any match excludes a record.
        stage: Stage name for error reporting.

    Returns:
        Compiled alternation, or None when there are no patterns.

    Raises:
        ConfigurationError: If any pattern is not a valid expression.
    """
    if not patterns:
        return None
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            msg = f"Invalid pattern {pattern!r} for {stage}: {e}"
            raise ConfigurationError(msg, stage=stage, pattern=pattern, cause=e) from e
    return re.compile("|".join(f"(?:{p})" for p in patterns))


@dataclass(frozen=True)
class DistanceStage:
    """Reject records farther than ``max_distance`` from the observer."""

    max_distance: float

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "distance"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept when the observer distance is within the limit."""
        return _verdict(context.distance <= self.max_distance)

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class CategoryThresholdStage:
    """Flag one category as stale when its age exceeds ``threshold``.

    Never rejects; it only tags the context for later stages.
    """

    category: Category
    threshold: int

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return f"days_{self.category.value}"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Flag the category when its age passes the threshold; always accepts."""
        freshness = context.freshness.get(self.category)
        if freshness is None or freshness.days_since_update is None:
            return ACCEPT
        days = freshness.days_since_update
        if not is_candidate(days, self.threshold):
            return ACCEPT
        return StageResult(accepted=True, patch=ContextPatch.flag(self.category, days))

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class OutdatedStage:
    """Reject records with no flagged category among ``categories``.

    Must come after the threshold stages it depends on.
    """

    categories: frozenset[Category] = field(default_factory=lambda: frozenset(Category))

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "outdated"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept when at least one enabled category is flagged."""
        return _verdict(context.is_outdated(self.categories))

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class NameExcludeStage:
    """Reject records whose display name matches any pattern."""

    patterns: tuple[str, ...] = ()
    _regex: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", compile_patterns(self.patterns, self.name))

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "exclude_names"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept when no pattern matches the station name."""
        if self._regex is None:
            return ACCEPT
        return _verdict(self._regex.search(context.station.name) is None)

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class GroupExcludeStage:
    """Reject records whose system name matches any pattern."""

    patterns: tuple[str, ...] = ()
    _regex: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", compile_patterns(self.patterns, self.name))

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "exclude_systems"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept when no pattern matches the system name."""
        if self._regex is None:
            return ACCEPT
        return _verdict(self._regex.search(context.station.system_name) is None)

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class ArrivalDistanceStage:
    """Reject records whose arrival distance is unknown or above ``max_arrival``."""

    max_arrival: float

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "distance_to_arrival"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept when the arrival distance is known and within the limit."""
        arrival = context.station.distance_to_arrival
        return _verdict(arrival is not None and arrival <= self.max_arrival)

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class ClassificationStage:
    """Keep records whose economy is in ``allowed``.

    With ``include_secondary`` the secondary economy also qualifies.
    """

    allowed: frozenset[Economy]
    include_secondary: bool = False

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "economy"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept when the primary, or optionally secondary, economy is allowed."""
        station = context.station
        if station.economy in self.allowed:
            return ACCEPT
        return _verdict(self.include_secondary and station.second_economy in self.allowed)

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class LargePadStage:
    """Reject facility types without a large landing pad."""

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "large_pad"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept facility types with a large pad."""
        return _verdict(context.station.station_type.has_large_pad)

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


@dataclass(frozen=True)
class PlanetaryExclusionStage:
    """Reject planetary facility types."""

    @property
    def name(self) -> str:
        """Stage name used in metrics and logs."""
        return "planetary"

    def evaluate(self, context: EvaluationContext) -> StageResult:
        """Accept non-planetary facility types."""
        return _verdict(not context.station.station_type.is_planetary)

    def accept(self, context: EvaluationContext) -> bool:
        """Evaluate and apply the patch when accepted."""
        return _accept(self, context)


Stage = (
    DistanceStage
    | CategoryThresholdStage
    | OutdatedStage
    | NameExcludeStage
    | GroupExcludeStage
    | ArrivalDistanceStage
    | ClassificationStage
    | LargePadStage
    | PlanetaryExclusionStage
)
