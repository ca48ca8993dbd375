"""Data models for the station ranker."""

from dataclasses import dataclass, field

from src.filters.models import EvaluationContext
from src.ranker.constants import DISTANCE_EPSILON, MAX_URGENCY
from src.stations.models import Station


@dataclass(frozen=True)
class Score:
    """Composite ordering key of one ranked record.

    Attributes:
        stale_days: Largest flagged day count of the record.
        urgency: Stale days per light year; MAX_URGENCY when the observer
            is effectively at the station.
        arrival_distance: Distance to arrival in light seconds, if known.
    """

    stale_days: int
    urgency: float
    arrival_distance: float | None = None

    @classmethod
    def compute(
        cls,
        stale_days: int,
        distance: float,
        arrival_distance: float | None = None,
    ) -> "Score":
        """Build a score from its inputs.

        Args:
            stale_days: Largest flagged day count.
            distance: Distance from the observer in light years.
            arrival_distance: Distance to arrival in light seconds.

        Returns:
            Score for the record.
        """
        if distance < DISTANCE_EPSILON:
            urgency = MAX_URGENCY
        else:
            urgency = stale_days / distance
        return cls(stale_days=stale_days, urgency=urgency, arrival_distance=arrival_distance)

    @property
    def sort_key(self) -> tuple[float, bool, float]:
        """Ascending sort key: highest urgency first, then nearest arrival.

        Unknown arrival distances sort after every known one.
        """
        unknown = self.arrival_distance is None
        arrival = 0.0 if self.arrival_distance is None else self.arrival_distance
        return (-self.urgency, unknown, arrival)

    def to_dict(self) -> dict[str, float | int | None]:
        """Convert to dictionary for serialization."""
        return {
            "stale_days": self.stale_days,
            "urgency": self.urgency,
            "arrival_distance": self.arrival_distance,
        }


@dataclass(frozen=True)
class RankedRecord:
    """One row of the ranked output.

    Attributes:
        rank: 1-based position in the output.
        context: Evaluation context with distance, visited flag and
            per-category freshness.
        score: Composite score.
    """

    rank: int
    context: EvaluationContext
    score: Score

    @property
    def station(self) -> Station:
        """Station of this row."""
        return self.context.station


@dataclass(frozen=True)
class RankerResult:
    """Result of one ranking pass.

    Attributes:
        records: Ranked rows, best first, at most ``limit`` long.
        total: Number of records ranked before truncation.
        truncated: Whether rows were cut by the limit.
    """

    records: tuple[RankedRecord, ...] = field(default_factory=tuple)
    total: int = 0
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.records)

    def station_ids(self) -> list[int]:
        """Station ids in output order."""
        return [record.context.station.id for record in self.records]
