"""Per-record evaluation glue between the dumps, the pipeline and the ranker."""

from collections.abc import Iterator
from datetime import datetime

import structlog

from src.filters.models import EvaluationContext
from src.filters.pipeline import FilterPipeline
from src.freshness.evaluator import FreshnessEvaluator, ThresholdPolicy
from src.journal.models import ObserverState
from src.ranker.models import RankerResult
from src.ranker.ranker import StationRanker
from src.stations.positional import StationSet


logger = structlog.get_logger()


class StationSearcher:
    """Finds the most urgent stale stations around an observer.

    Holds only read-only inputs, so one searcher serves every poll of an
    update run.
    """

    def __init__(
        self,
        stations: StationSet,
        pipeline: FilterPipeline,
        policy: ThresholdPolicy,
        ranker: StationRanker | None = None,
    ) -> None:
        """Initialize the searcher.

        Args:
            stations: Stations with joined coordinates.
            pipeline: Filter pipeline built from configuration.
            policy: Categories the freshness evaluator measures.
            ranker: Optional ranker; a default one is created otherwise.
        """
        self._stations = stations
        self._pipeline = pipeline
        self._policy = policy
        self._ranker = ranker or StationRanker()
        self._log = logger.bind(component="searcher")

    @property
    def stations(self) -> StationSet:
        """Stations being searched."""
        return self._stations

    def contexts(self, observer: ObserverState, now: datetime) -> Iterator[EvaluationContext]:
        """Evaluate every station and yield those the pipeline accepts.

        Args:
            observer: Observer position and visited markets.
            now: Reference time for day counts.

        Yields:
            Accepted contexts in dump order.
        """
        evaluator = FreshnessEvaluator(now, self._policy)
        for station in self._stations:
            context = EvaluationContext(
                station=station,
                distance=observer.position.distance_to(station.coords),
                visited=observer.has_visited(station.market_id),
                freshness=evaluator.evaluate(station.update_time),
            )
            if self._pipeline.run(context):
                yield context

    def search(
        self,
        observer: ObserverState,
        now: datetime,
        limit: int | None = None,
    ) -> RankerResult:
        """Run one search pass.

        Args:
            observer: Observer position and visited markets.
            now: Reference time for day counts.
            limit: Maximum rows; None keeps all.

        Returns:
            Ranked result.

        Raises:
            UnrankableRecord: If the pipeline lets an unflagged record through.
        """
        result = self._ranker.rank(self.contexts(observer, now), limit)
        self._log.info(
            "search_complete",
            system=observer.system_name,
            stations=len(self._stations),
            matches=result.total,
            shown=len(result),
        )
        return result
