"""Per-category staleness evaluation.

The evaluator only measures. Deciding that a category is stale (flagging
it) is left to the filter pipeline, so several stages can apply
different thresholds to the same record within one pass.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from pydantic import Field

from src.data_model import StrictBaseModel
from src.freshness.constants import ALWAYS_CANDIDATE, DEFAULT_THRESHOLD_DAYS
from src.stations.models import Category, UpdateTime


_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Freshness:
    """Staleness state of one category for one record in one pass.

    Attributes:
        days_since_update: Whole days since the last update, or None when
            the category has no timestamp (not tracked).
        flagged_stale: Day count recorded by a threshold stage once it
            judged the category outdated; None while not flagged.
    """

    days_since_update: int | None
    flagged_stale: int | None = None

    @property
    def is_tracked(self) -> bool:
        """Whether the category has a timestamp at all."""
        return self.days_since_update is not None

    @property
    def is_flagged(self) -> bool:
        """Whether a stage has flagged this category as stale."""
        return self.flagged_stale is not None

    def flag(self, days: int) -> "Freshness":
        """Return a copy flagged stale by the given day count."""
        return replace(self, flagged_stale=days)


def whole_days(now: datetime, then: datetime) -> int:
    """Whole days elapsed from ``then`` to ``now``, truncated toward zero.

    Args:
        now: Reference time.
        then: Earlier (usually) time.

    Returns:
        Integer day difference; never rounded up.
    """
    delta = now - then
    days = abs(delta) // _ONE_DAY
    return days if delta >= timedelta(0) else -days


def is_candidate(days: int | None, threshold: int) -> bool:
    """Check whether a day count exceeds a threshold.

    The comparison is strict: a category updated exactly ``threshold``
    days ago is not stale. A threshold of -1 accepts every non-negative
    count.

    Args:
        days: Days since update, or None when not tracked.
        threshold: Day threshold.

    Returns:
        True if the category is a staleness candidate.
    """
    return days is not None and days > threshold


class ThresholdPolicy(StrictBaseModel):
    """Global day threshold plus the set of enabled categories.

    Attributes:
        threshold_days: Day threshold; -1 means any timestamp qualifies.
        categories: Categories that are evaluated at all.
    """

    threshold_days: int = Field(default=DEFAULT_THRESHOLD_DAYS, ge=ALWAYS_CANDIDATE)
    categories: frozenset[Category] = Field(default_factory=lambda: frozenset(Category))

    @classmethod
    def all_categories(cls, threshold_days: int = ALWAYS_CANDIDATE) -> "ThresholdPolicy":
        """Policy enabling every category."""
        return cls(threshold_days=threshold_days, categories=frozenset(Category))


class FreshnessEvaluator:
    """Converts raw timestamps into per-category Freshness values.

    Pure given a fixed ``now``; holds no per-record state and may be
    shared between threads.
    """

    def __init__(self, now: datetime, policy: ThresholdPolicy) -> None:
        """Initialize the evaluator.

        Args:
            now: Reference time for day differences.
            policy: Threshold policy.
        """
        self._now = now
        self._policy = policy
        # Keep evaluation order stable regardless of set iteration order
        self._categories = tuple(c for c in Category if c in policy.categories)

    @property
    def now(self) -> datetime:
        """Reference time."""
        return self._now

    @property
    def policy(self) -> ThresholdPolicy:
        """Threshold policy."""
        return self._policy

    def days_since(self, timestamp: datetime | None) -> int | None:
        """Whole days since a timestamp, or None when absent."""
        if timestamp is None:
            return None
        return whole_days(self._now, timestamp)

    def evaluate(self, update_time: UpdateTime) -> dict[Category, Freshness]:
        """Compute unflagged Freshness for each enabled category.

        Args:
            update_time: Record's per-category timestamps.

        Returns:
            Mapping of enabled category to Freshness.
        """
        return {
            category: Freshness(self.days_since(update_time.get(category)))
            for category in self._categories
        }

    def candidates(self, update_time: UpdateTime) -> dict[Category, int]:
        """Enabled categories whose age exceeds the global threshold.

        Args:
            update_time: Record's per-category timestamps.

        Returns:
            Mapping of candidate category to days since update.
        """
        result: dict[Category, int] = {}
        for category, freshness in self.evaluate(update_time).items():
            days = freshness.days_since_update
            if days is not None and is_candidate(days, self._policy.threshold_days):
                result[category] = days
        return result
