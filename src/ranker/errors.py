"""Ranker errors."""

from src.stations.models import Station


class UnrankableRecord(Exception):
    """Raised when a record without any stale category reaches the ranker.

    This is a pipeline assembly problem: the outdated stage must run
    before ranking.
    """

    def __init__(self, station: Station, position: int) -> None:
        """Initialize the error.

        Args:
            station: The offending station.
            position: Index of the record in the ranker input.
        """
        self.station = station
        self.position = position
        super().__init__(
            f"Station {station.name!r} ({station.system_name}) at input position "
            f"{position} has no flagged category"
        )

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for logging."""
        return {
            "station_id": self.station.id,
            "station_name": self.station.name,
            "system_name": self.station.system_name,
            "position": self.position,
        }
