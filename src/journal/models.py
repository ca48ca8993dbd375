"""Journal event and observer state models."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from pydantic import Field

from src.data_model import JournalModel
from src.stations.models import Coords


class PositionEvent(JournalModel):
    """``Location`` or ``FSDJump`` event."""

    star_system: str
    star_pos: Coords


class DockedEvent(JournalModel):
    """``Docked`` event."""

    market_id: int = Field(alias="MarketID")
    station_name: str | None = None


@dataclass(frozen=True, order=True)
class JournalFile:
    """A journal file ordered by the session timestamp in its name.

    Attributes:
        started_at: Session start parsed from the file name.
        part: Part number within the session.
        path: File location.
    """

    started_at: datetime
    part: int
    path: Path = field(compare=False)


@dataclass(frozen=True)
class ObserverState:
    """Where the commander is and which markets they have docked at.

    Attributes:
        system_name: Current star system.
        position: Current system position.
        visited: Market ids of recently visited stations.
    """

    system_name: str
    position: Coords
    visited: frozenset[int] = frozenset()

    def has_visited(self, market_id: int | None) -> bool:
        """Whether a market id is in the visited set."""
        return market_id is not None and market_id in self.visited
