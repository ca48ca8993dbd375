"""Urgency ranker for stale stations.

Orders records that passed the filter pipeline by stale days per light
year, nearest arrival first on ties, and caps the output.
"""

from src.ranker.constants import DISTANCE_EPSILON, MAX_URGENCY
from src.ranker.errors import UnrankableRecord
from src.ranker.metrics import RankerMetrics
from src.ranker.models import RankedRecord, RankerResult, Score
from src.ranker.ranker import StationRanker, rank_records_pure, score_context


__all__ = [
    "DISTANCE_EPSILON",
    "MAX_URGENCY",
    "RankedRecord",
    "RankerMetrics",
    "RankerResult",
    "Score",
    "StationRanker",
    "UnrankableRecord",
    "rank_records_pure",
    "score_context",
]
