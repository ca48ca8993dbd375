"""Urgency ranking of stations that survived the filter pipeline."""

import time
from collections.abc import Iterable

import structlog

from src.filters.models import EvaluationContext
from src.ranker.constants import DISTANCE_EPSILON
from src.ranker.errors import UnrankableRecord
from src.ranker.metrics import RankerMetrics
from src.ranker.models import RankedRecord, RankerResult, Score


logger = structlog.get_logger()


def score_context(context: EvaluationContext, position: int = 0) -> Score:
    """Score one evaluation context.

    Args:
        context: Context that passed the pipeline.
        position: Index in the ranker input, for error reporting.

    Returns:
        Score of the record.

    Raises:
        UnrankableRecord: If no category of the context is flagged stale.
    """
    stale_days = context.max_flagged()
    if stale_days is None:
        raise UnrankableRecord(context.station, position)
    return Score.compute(
        stale_days=stale_days,
        distance=context.distance,
        arrival_distance=context.station.distance_to_arrival,
    )


class StationRanker:
    """Orders records by descending urgency.

    Ties on the composite key keep their input order, so output is
    deterministic for a given decode order.
    """

    def __init__(self, metrics: RankerMetrics | None = None, run_id: str | None = None) -> None:
        """Initialize the ranker.

        Args:
            metrics: Optional metrics instance.
            run_id: Optional run identifier for logging.
        """
        self._metrics = metrics or RankerMetrics.get_instance()
        self._log = logger.bind(component="ranker")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def rank(
        self,
        contexts: Iterable[EvaluationContext],
        limit: int | None = None,
    ) -> RankerResult:
        """Score, sort and truncate records.

        Every input is scored before anything is returned, so one bad
        record fails the whole pass.

        Args:
            contexts: Contexts that passed the pipeline, in decode order.
            limit: Maximum rows to return; None keeps all.

        Returns:
            RankerResult with rows best first.

        Raises:
            UnrankableRecord: If any input has no flagged category.
            ValueError: If ``limit`` is negative.
        """
        if limit is not None and limit < 0:
            msg = f"limit must be non-negative, got {limit}"
            raise ValueError(msg)

        start = time.perf_counter()
        scored: list[tuple[Score, EvaluationContext]] = []
        for position, context in enumerate(contexts):
            score = score_context(context, position)
            self._metrics.record_urgency(
                score.urgency, at_location=context.distance < DISTANCE_EPSILON
            )
            scored.append((score, context))

        # list.sort is stable; equal keys keep decode order
        scored.sort(key=lambda item: item[0].sort_key)

        total = len(scored)
        kept = scored if limit is None else scored[:limit]
        records = tuple(
            RankedRecord(rank=rank, context=context, score=score)
            for rank, (score, context) in enumerate(kept, start=1)
        )

        duration_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_counts(total, len(records))
        self._metrics.record_ranking_duration(duration_ms)
        self._log.info(
            "ranker_complete",
            records_in=total,
            records_out=len(records),
            duration_ms=round(duration_ms, 2),
        )

        return RankerResult(records=records, total=total, truncated=len(records) < total)


def rank_records_pure(
    contexts: Iterable[EvaluationContext],
    limit: int | None = None,
) -> RankerResult:
    """Pure function API for ranking.

    Args:
        contexts: Contexts that passed the pipeline.
        limit: Maximum rows to return.

    Returns:
        RankerResult with rows best first.
    """
    return StationRanker(metrics=RankerMetrics()).rank(contexts, limit)
