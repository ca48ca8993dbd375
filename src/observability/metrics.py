"""Run-level snapshot of the component metrics singletons."""

from src.fetch.metrics import FetchMetrics
from src.filters.metrics import FilterMetrics
from src.ranker.metrics import RankerMetrics
from src.stations.metrics import DecoderMetrics


def collect_metrics() -> dict[str, dict[str, object]]:
    """Snapshot every component's metrics.

    Returns:
        Mapping of component name to its metrics dictionary.
    """
    return {
        "fetch": dict(FetchMetrics.get_instance().to_dict()),
        "decoder": dict(DecoderMetrics.get_instance().to_dict()),
        "filters": dict(FilterMetrics.get_instance().to_dict()),
        "ranker": RankerMetrics.get_instance().to_dict(),
    }


def reset_metrics() -> None:
    """Reset every component's metrics (primarily for testing)."""
    FetchMetrics.reset()
    DecoderMetrics.reset()
    FilterMetrics.reset()
    RankerMetrics.reset()
