"""Metrics collection for dump decoding and coordinate joins."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class DecoderMetrics:
    """Metrics for dump decoding.

    Attributes:
        streams_completed: Streams decoded through the closing line.
        lines_read: Lines consumed across completed streams.
        records_decoded: Records produced across completed streams.
        decode_errors: Streams that failed with a decode error.
        stations_joined: Stations matched with system coordinates.
        stations_missing_coords: Stations without a coordinates entry.
    """

    streams_completed: int = 0
    lines_read: int = 0
    records_decoded: int = 0
    decode_errors: int = 0
    stations_joined: int = 0
    stations_missing_coords: int = 0

    _instance: ClassVar["DecoderMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "DecoderMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_stream(self, lines: int, records: int) -> None:
        """Record a fully decoded stream.

        Args:
            lines: Lines read from the stream.
            records: Records decoded from the stream.
        """
        self.streams_completed += 1
        self.lines_read += lines
        self.records_decoded += records

    def record_error(self) -> None:
        """Record a failed stream."""
        self.decode_errors += 1

    def record_join(self, joined: int, missing: int) -> None:
        """Record the outcome of a coordinates join.

        Args:
            joined: Stations that received coordinates.
            missing: Stations left without coordinates.
        """
        self.stations_joined += joined
        self.stations_missing_coords += missing

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "streams_completed": self.streams_completed,
            "lines_read": self.lines_read,
            "records_decoded": self.records_decoded,
            "decode_errors": self.decode_errors,
            "stations_joined": self.stations_joined,
            "stations_missing_coords": self.stations_missing_coords,
        }
