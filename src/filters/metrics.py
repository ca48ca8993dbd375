"""Metrics collection for the filter pipeline."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class FilterMetrics:
    """Metrics for filter pipeline runs.

    Attributes:
        records_evaluated: Records passed through the pipeline.
        records_accepted: Records accepted by every stage.
        rejected_by_stage: Rejection count per stage name.
    """

    records_evaluated: int = 0
    records_accepted: int = 0
    rejected_by_stage: dict[str, int] = field(default_factory=dict)

    _instance: ClassVar["FilterMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FilterMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_accepted(self) -> None:
        """Record a record that survived every stage."""
        self.records_evaluated += 1
        self.records_accepted += 1

    def record_rejection(self, stage: str) -> None:
        """Record a rejection.

        Args:
            stage: Name of the rejecting stage.
        """
        self.records_evaluated += 1
        self.rejected_by_stage[stage] = self.rejected_by_stage.get(stage, 0) + 1

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "records_evaluated": self.records_evaluated,
            "records_accepted": self.records_accepted,
            "rejected_by_stage": dict(self.rejected_by_stage),
        }
