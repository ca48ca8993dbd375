"""Day-count histograms of the stations dump."""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import structlog

from src.filters.models import EvaluationContext
from src.filters.stages import GroupExcludeStage, NameExcludeStage
from src.freshness.evaluator import FreshnessEvaluator, ThresholdPolicy
from src.renderer.io import AtomicWriter, GeneratedFile
from src.stations.models import Category, Station


logger = structlog.get_logger()

HISTOGRAM_HEADER = "Day\tCount\tAcc"


def histogram_file_name(category: Category) -> str:
    """File name of a category histogram, e.g. ``days_market.txt``."""
    return f"days_{category.value}.txt"


class DayHistogram:
    """Number of stations per days-since-update, for every category.

    Uses a threshold of -1 so every timestamped category counts.
    """

    def __init__(self) -> None:
        self._counts: dict[Category, Counter[int]] = {c: Counter() for c in Category}

    @classmethod
    def from_stations(
        cls,
        stations: Iterable[Station],
        now: datetime,
        exclude_names: Iterable[str] = (),
        exclude_systems: Iterable[str] = (),
    ) -> "DayHistogram":
        """Build histograms for stations that pass the exclusion patterns.

        Args:
            stations: Stations, coordinates not needed.
            now: Reference time for day counts.
            exclude_names: Station name exclusion patterns.
            exclude_systems: System name exclusion patterns.

        Returns:
            Populated histogram.

        Raises:
            ConfigurationError: If a pattern does not compile.
        """
        stages = (
            NameExcludeStage(patterns=tuple(exclude_names)),
            GroupExcludeStage(patterns=tuple(exclude_systems)),
        )
        evaluator = FreshnessEvaluator(now, ThresholdPolicy.all_categories())
        histogram = cls()
        for station in stations:
            context = EvaluationContext(station=station, distance=0.0)
            if not all(stage.accept(context) for stage in stages):
                continue
            for category, days in evaluator.candidates(station.update_time).items():
                histogram.add(category, days)
        return histogram

    def add(self, category: Category, days: int) -> None:
        """Count one station for a category."""
        self._counts[category][days] += 1

    def counts(self, category: Category) -> list[tuple[int, int]]:
        """``(days, count)`` pairs sorted by days."""
        return sorted(self._counts[category].items())

    def total(self, category: Category) -> int:
        """Number of stations counted for a category."""
        return sum(self._counts[category].values())

    def render(self, category: Category) -> str:
        """Tab-separated table with a running total column."""
        lines = [HISTOGRAM_HEADER]
        accumulated = 0
        for days, count in self.counts(category):
            accumulated += count
            lines.append(f"{days}\t{count}\t{accumulated}")
        return "\n".join(lines) + "\n"

    def write(self, out_dir: Path, run_id: str | None = None) -> list[GeneratedFile]:
        """Write one ``days_<category>.txt`` file per category.

        Args:
            out_dir: Target directory, created if missing.
            run_id: Optional run ID for logging.

        Returns:
            Written files in category order.
        """
        writer = AtomicWriter(out_dir, run_id)
        files = [
            writer.write(out_dir / histogram_file_name(category), self.render(category))
            for category in Category
        ]
        logger.info(
            "histograms_written",
            component="stats",
            out_dir=str(out_dir),
            totals={c.value: self.total(c) for c in Category},
        )
        return files
