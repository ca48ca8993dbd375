"""JSON output for ranked stations."""

import json
from datetime import UTC, datetime
from typing import TextIO

import click

from src.ranker.models import RankedRecord, RankerResult


def record_to_dict(record: RankedRecord) -> dict[str, object]:
    """Serialize one ranked row.

    Args:
        record: Ranked row.

    Returns:
        JSON-ready dictionary with station fields, distance, visited flag,
        per-category freshness and the score.
    """
    context = record.context
    station = context.station
    return {
        "rank": record.rank,
        "station_id": station.id,
        "market_id": station.market_id,
        "name": station.name,
        "system_name": station.system_name,
        "type": station.station_type.value,
        "distance": round(context.distance, 2),
        "distance_to_arrival": station.distance_to_arrival,
        "visited": context.visited,
        "freshness": {
            category.value: {
                "days_since_update": freshness.days_since_update,
                "flagged_stale": freshness.flagged_stale,
            }
            for category, freshness in context.freshness.items()
        },
        "score": record.score.to_dict(),
    }


class JsonRenderer:
    """Renders ranked results as one deterministic JSON document."""

    def __init__(self, output: TextIO | None = None) -> None:
        """Initialize the renderer.

        Args:
            output: Stream to write to; stdout when None.
        """
        self._output = output

    def render(self, result: RankerResult, last_modified: datetime) -> str:
        """Render a result as JSON.

        Args:
            result: Ranked result.
            last_modified: Last-Modified time of the stations dump.

        Returns:
            JSON text with sorted keys.
        """
        data = {
            "last_modified": last_modified.astimezone(UTC).isoformat(),
            "total": result.total,
            "truncated": result.truncated,
            "stations": [record_to_dict(record) for record in result.records],
        }
        return json.dumps(data, sort_keys=True, indent=2)

    def print(self, result: RankerResult, last_modified: datetime) -> None:
        """Render and write a result."""
        click.echo(self.render(result, last_modified), file=self._output)

    def clear(self) -> None:
        """JSON documents are appended as is; nothing to clear."""
