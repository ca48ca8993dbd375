"""System coordinates index used to place stations in space."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

import structlog

from src.stations.metrics import DecoderMetrics
from src.stations.models import Coords, Station, SystemCoords


logger = structlog.get_logger()


@dataclass(frozen=True)
class StationSet:
    """Stations ready for searching.

    Attributes:
        stations: Stations with joined coordinates, in dump order.
        missing_coords: Stations whose system has no known position.
            They are excluded from every search.
        last_modified: Last-Modified time of the stations dump, if known.
    """

    stations: tuple[Station, ...] = ()
    missing_coords: tuple[Station, ...] = ()
    last_modified: datetime | None = None

    def __len__(self) -> int:
        return len(self.stations)

    def __iter__(self) -> Iterator[Station]:
        return iter(self.stations)


@dataclass(frozen=True)
class PositionalIndex:
    """Read-only mapping from system id to coordinates.

    Built once per run before any station is evaluated. Safe to share
    between threads since it is never mutated after construction.
    """

    _table: Mapping[int, Coords] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_records(cls, records: Iterable[SystemCoords]) -> "PositionalIndex":
        """Build an index from positional records.

        Later records win when a system id repeats.

        Args:
            records: Positional records, typically a decoder stream.

        Returns:
            Immutable index.
        """
        table = {record.id: record.coords for record in records}
        logger.debug("positional_index_built", component="positional", systems=len(table))
        return cls(MappingProxyType(table))

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, system_id: object) -> bool:
        return system_id in self._table

    def get(self, system_id: int) -> Coords | None:
        """Look up the coordinates of a system."""
        return self._table.get(system_id)

    def records(self) -> Iterator[SystemCoords]:
        """Iterate the index as positional records."""
        for system_id, coords in self._table.items():
            yield SystemCoords(id=system_id, coords=coords)

    def join(
        self,
        stations: Iterable[Station],
        last_modified: datetime | None = None,
    ) -> StationSet:
        """Patch station coordinates from the index.

        Args:
            stations: Decoded stations in dump order.
            last_modified: Last-Modified time of the stations dump.

        Returns:
            StationSet with joined and missing stations, order preserved.
        """
        joined: list[Station] = []
        missing: list[Station] = []
        for station in stations:
            coords = self._table.get(station.system_id)
            if coords is None:
                missing.append(station)
            else:
                joined.append(station.with_coords(coords))

        DecoderMetrics.get_instance().record_join(len(joined), len(missing))
        logger.info(
            "stations_joined",
            component="positional",
            joined=len(joined),
            missing_coords=len(missing),
        )
        return StationSet(
            stations=tuple(joined),
            missing_coords=tuple(missing),
            last_modified=last_modified,
        )
