"""Builders for station records and dump payloads used across tests."""

import gzip
import io
import json
from datetime import datetime, timedelta
from typing import Any

from src.stations.constants import TIMESTAMP_FORMAT
from src.stations.models import Coords, Station
from tests.helpers.time import FIXED_NOW


def days_ago(days: int, now: datetime = FIXED_NOW) -> str:
    """Dump-format timestamp ``days`` whole days before ``now``."""
    return (now - timedelta(days=days)).strftime(TIMESTAMP_FORMAT)


def station_payload(
    station_id: int,
    name: str,
    system_name: str = "Lave",
    system_id: int = 100,
    information_days: int = 1,
    market_days: int | None = None,
    station_type: str = "Coriolis Starport",
    distance_to_arrival: float | None = 500.0,
    market_id: int | None = None,
    economy: str | None = "Industrial",
    second_economy: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Raw dump record in the upstream camelCase layout."""
    update_time: dict[str, str | None] = {"information": days_ago(information_days)}
    if market_days is not None:
        update_time["market"] = days_ago(market_days)
    payload: dict[str, Any] = {
        "id": station_id,
        "marketId": market_id if market_id is not None else 1000 + station_id,
        "name": name,
        "type": station_type,
        "distanceToArrival": distance_to_arrival,
        "systemId": system_id,
        "systemName": system_name,
        "economy": economy,
        "secondEconomy": second_economy,
        "updateTime": update_time,
    }
    payload.update(extra)
    return payload


def make_station(
    station_id: int,
    name: str,
    coords: Coords | None = None,
    **kwargs: Any,
) -> Station:
    """Validated Station, optionally placed at ``coords``."""
    station = Station.model_validate(station_payload(station_id, name, **kwargs))
    return station.with_coords(coords) if coords is not None else station


def dump_lines(records: list[dict[str, Any]]) -> bytes:
    """Serialize records in the one-value-per-line array layout."""
    lines = ["["]
    for index, record in enumerate(records):
        suffix = "," if index < len(records) - 1 else ""
        lines.append(json.dumps(record) + suffix)
    lines.append("]")
    return ("\n".join(lines) + "\n").encode("utf-8")


def gzip_dump(records: list[dict[str, Any]]) -> bytes:
    """Gzip-compressed dump payload."""
    return gzip.compress(dump_lines(records))


def stream(data: bytes) -> io.BufferedReader:
    """Buffered byte stream over ``data``."""
    return io.BufferedReader(io.BytesIO(data))
