"""Ordered filter pipeline and its construction from configuration."""

from collections.abc import Sequence

import structlog

from src.config.schemas.search import SearchConfig
from src.filters.metrics import FilterMetrics
from src.filters.models import EvaluationContext
from src.filters.stages import (
    ArrivalDistanceStage,
    CategoryThresholdStage,
    ClassificationStage,
    DistanceStage,
    GroupExcludeStage,
    LargePadStage,
    NameExcludeStage,
    OutdatedStage,
    PlanetaryExclusionStage,
    Stage,
)


logger = structlog.get_logger()


class FilterPipeline:
    """Runs stages in order against one context at a time.

    A record survives only if every stage accepts it. Evaluation stops at
    the first rejection, so later stages (and their flags) never touch a
    rejected context. The pipeline holds no per-record state.
    """

    def __init__(
        self,
        stages: Sequence[Stage],
        metrics: FilterMetrics | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            stages: Stages in evaluation order.
            metrics: Optional metrics instance.
        """
        self._stages = tuple(stages)
        self._metrics = metrics or FilterMetrics.get_instance()

    @property
    def stages(self) -> tuple[Stage, ...]:
        """Stages in evaluation order."""
        return self._stages

    @property
    def stage_names(self) -> list[str]:
        """Stage names in evaluation order."""
        return [stage.name for stage in self._stages]

    def rejected_by(self, context: EvaluationContext) -> str | None:
        """Run the pipeline and report which stage rejected the record.

        Args:
            context: Context for one record; flags are applied in place.

        Returns:
            Name of the rejecting stage, or None if every stage accepted.
        """
        for stage in self._stages:
            result = stage.evaluate(context)
            if not result.accepted:
                self._metrics.record_rejection(stage.name)
                return stage.name
            context.apply(result.patch)
        self._metrics.record_accepted()
        return None

    def run(self, context: EvaluationContext) -> bool:
        """Run the pipeline.

        Args:
            context: Context for one record; flags are applied in place.

        Returns:
            True if the record survives every stage.
        """
        return self.rejected_by(context) is None


def build_pipeline(config: SearchConfig) -> FilterPipeline:
    """Assemble the standard pipeline from search configuration.

    Order: distance, per-category thresholds, outdated aggregate, name and
    system exclusion, then the optional arrival distance, economy, pad
    size and planetary stages.

    Args:
        config: Validated search configuration.

    Returns:
        Ready-to-run pipeline.

    Raises:
        ConfigurationError: If an exclusion pattern does not compile.
    """
    freshness = config.freshness
    filters = config.filter
    enabled = freshness.enabled_categories()

    stages: list[Stage] = [DistanceStage(max_distance=config.max_dist)]
    stages.extend(
        CategoryThresholdStage(category=category, threshold=freshness.threshold_for(category))
        for category in enabled
    )
    stages.append(OutdatedStage(categories=frozenset(enabled)))
    stages.append(NameExcludeStage(patterns=tuple(filters.exclude_names)))
    stages.append(GroupExcludeStage(patterns=tuple(filters.exclude_systems)))

    if filters.distance_to_arrival is not None:
        stages.append(ArrivalDistanceStage(max_arrival=filters.distance_to_arrival.max))
    if filters.economy is not None:
        stages.append(
            ClassificationStage(
                allowed=frozenset(filters.economy.economies),
                include_secondary=filters.economy.include_secondary,
            )
        )
    if filters.pad_size is not None and filters.pad_size.l_pad_only:
        stages.append(LargePadStage())
    if filters.planetary is not None and not filters.planetary.include:
        stages.append(PlanetaryExclusionStage())

    pipeline = FilterPipeline(stages)
    logger.info("pipeline_built", component="filters", stages=pipeline.stage_names)
    return pipeline
