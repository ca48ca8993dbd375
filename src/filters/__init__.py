"""Composable filter pipeline for station evaluation contexts.

Stages judge one record at a time and may tag per-category staleness
flags that later stages (the outdated aggregate) depend on.
"""

from src.filters.errors import ConfigurationError
from src.filters.models import ContextPatch, EvaluationContext, StageResult
from src.filters.pipeline import FilterPipeline, build_pipeline
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


__all__ = [
    "ArrivalDistanceStage",
    "CategoryThresholdStage",
    "ClassificationStage",
    "ConfigurationError",
    "ContextPatch",
    "DistanceStage",
    "EvaluationContext",
    "FilterPipeline",
    "GroupExcludeStage",
    "LargePadStage",
    "NameExcludeStage",
    "OutdatedStage",
    "PlanetaryExclusionStage",
    "Stage",
    "StageResult",
    "build_pipeline",
]
