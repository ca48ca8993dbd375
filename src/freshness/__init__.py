"""Per-category freshness evaluation for station records."""

from src.freshness.evaluator import (
    Freshness,
    FreshnessEvaluator,
    ThresholdPolicy,
    is_candidate,
    whole_days,
)


__all__ = [
    "Freshness",
    "FreshnessEvaluator",
    "ThresholdPolicy",
    "is_candidate",
    "whole_days",
]
