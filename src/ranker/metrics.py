"""Metrics collection for the ranker module."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class RankerMetrics:
    """Metrics for ranker operations.

    Attributes:
        records_in: Number of records in the last ranking pass.
        records_out: Number of rows kept after truncation.
        truncated_total: Rows cut by the limit.
        urgency_values: Finite urgencies for percentile calculation.
        at_location_count: Records within the distance epsilon.
        ranking_duration_ms: Time spent scoring and sorting.
    """

    records_in: int = 0
    records_out: int = 0
    truncated_total: int = 0
    urgency_values: list[float] = field(default_factory=list)
    at_location_count: int = 0
    ranking_duration_ms: float = 0.0

    _instance: ClassVar["RankerMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RankerMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_counts(self, records_in: int, records_out: int) -> None:
        """Record input and output counts of a pass.

        Args:
            records_in: Number of ranked records.
            records_out: Number of rows kept.
        """
        self.records_in = records_in
        self.records_out = records_out
        self.truncated_total += records_in - records_out

    def record_urgency(self, urgency: float, *, at_location: bool) -> None:
        """Record one urgency value.

        Args:
            urgency: Urgency of a record.
            at_location: Whether the sentinel maximum was used.
        """
        if at_location:
            self.at_location_count += 1
        else:
            self.urgency_values.append(urgency)

    def record_ranking_duration(self, duration_ms: float) -> None:
        """Record ranking duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.ranking_duration_ms = duration_ms

    def get_urgency_percentiles(self) -> dict[str, float]:
        """Calculate urgency percentiles (p50/p90/p99).

        Returns:
            Dictionary with p50, p90, p99 values.
        """
        if not self.urgency_values:
            return {"p50": 0.0, "p90": 0.0, "p99": 0.0}

        sorted_values = sorted(self.urgency_values)
        n = len(sorted_values)

        def percentile(p: float) -> float:
            idx = int(p * n / 100)
            return sorted_values[min(idx, n - 1)]

        return {
            "p50": percentile(50),
            "p90": percentile(90),
            "p99": percentile(99),
        }

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "records_in": self.records_in,
            "records_out": self.records_out,
            "truncated_total": self.truncated_total,
            "at_location_count": self.at_location_count,
            "ranking_duration_ms": self.ranking_duration_ms,
            "urgency_percentiles": self.get_urgency_percentiles(),
        }
