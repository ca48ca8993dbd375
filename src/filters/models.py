"""Data models for the filter pipeline."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from src.freshness.evaluator import Freshness
from src.stations.models import Category, Station


@dataclass(frozen=True)
class ContextPatch:
    """Stale flags a stage wants to set on a context.

    Attributes:
        flags: Category to flagged day count.
    """

    flags: Mapping[Category, int] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def flag(cls, category: Category, days: int) -> "ContextPatch":
        """Patch flagging a single category."""
        return cls(MappingProxyType({category: days}))


EMPTY_PATCH = ContextPatch()


@dataclass(frozen=True)
class StageResult:
    """Outcome of one stage against one context.

    Attributes:
        accepted: Whether the record may continue through the pipeline.
        patch: Flags to apply to the context when accepted.
    """

    accepted: bool
    patch: ContextPatch = EMPTY_PATCH


ACCEPT = StageResult(accepted=True)
REJECT = StageResult(accepted=False)


@dataclass
class EvaluationContext:
    """Per-record state carried through one pipeline pass.

    Owned exclusively by the pass that created it. Flags accumulate as
    threshold stages run and are never cleared within the pass.

    Attributes:
        station: Record being evaluated (read-only).
        distance: Straight-line distance from the observer.
        visited: Whether the observer has docked at this station.
        freshness: Freshness per evaluated category.
    """

    station: Station
    distance: float
    visited: bool = False
    freshness: dict[Category, Freshness] = field(default_factory=dict)

    def apply(self, patch: ContextPatch) -> None:
        """Apply stale flags from a stage.

        Categories that are not evaluated, or already flagged, are left as
        they are.

        Args:
            patch: Patch produced by an accepting stage.
        """
        for category, days in patch.flags.items():
            current = self.freshness.get(category)
            if current is None or current.is_flagged:
                continue
            self.freshness[category] = current.flag(days)

    def flagged(self) -> dict[Category, int]:
        """Flagged day counts per category."""
        return {
            category: freshness.flagged_stale
            for category, freshness in self.freshness.items()
            if freshness.flagged_stale is not None
        }

    def max_flagged(self) -> int | None:
        """Largest flagged day count, or None when nothing is flagged."""
        flagged = self.flagged()
        return max(flagged.values()) if flagged else None

    def is_outdated(self, categories: Iterable[Category] | None = None) -> bool:
        """Whether any (of the given) categories is flagged stale."""
        if categories is None:
            return any(f.is_flagged for f in self.freshness.values())
        return any(
            self.freshness[c].is_flagged for c in categories if c in self.freshness
        )

    def flag_letters(self) -> str:
        """Fixed-width flag column, e.g. ``"I M "``."""
        letters = []
        for category in Category:
            freshness = self.freshness.get(category)
            flagged = freshness is not None and freshness.is_flagged
            letters.append(category.flag if flagged else " ")
        return "".join(letters)
