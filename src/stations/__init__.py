"""Station dump model, streaming decoder and coordinate join."""

from src.stations.decoder import RecordDecoder, decode_records, open_dump, write_records
from src.stations.errors import DecodeError
from src.stations.metrics import DecoderMetrics
from src.stations.models import (
    Category,
    Coords,
    Economy,
    Station,
    StationType,
    SystemCoords,
    UpdateTime,
)
from src.stations.positional import PositionalIndex, StationSet


__all__ = [
    "Category",
    "Coords",
    "DecodeError",
    "DecoderMetrics",
    "Economy",
    "PositionalIndex",
    "RecordDecoder",
    "Station",
    "StationSet",
    "StationType",
    "SystemCoords",
    "UpdateTime",
    "decode_records",
    "open_dump",
    "write_records",
]
