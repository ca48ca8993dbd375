"""Fixed-width table output for ranked stations."""

from datetime import datetime, tzinfo
from typing import TextIO

import click

from src.ranker.models import RankedRecord, RankerResult


# Blank lines written by clear() so a refreshed table starts on a clean screen
CLEAR_LINES = 48

# Timestamp layout of the header line
HEADER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def si_format(value: float | None) -> str:
    """Format an arrival distance in light seconds compactly.

    The result has a unit suffix position: a space for plain values and
    ``k`` for thousands, so columns line up.

    Args:
        value: Distance in light seconds, or None when unknown.

    Returns:
        Formatted distance such as ``"12.34 "`` or ``"1.23k"``.
    """
    if value is None:
        return "unknown"
    if value < 100:  # noqa: PLR2004
        return f"{value:.2f} "
    if value < 1_000:  # noqa: PLR2004
        return f"{value:.1f} "
    if value < 10_000:  # noqa: PLR2004
        return f"{value / 1000:.2f}k"
    if value < 100_000:  # noqa: PLR2004
        return f"{value / 1000:.1f}k"
    return f"{value / 1000:.0f}k"


class TextRenderer:
    """Renders ranked results as the classic terminal table.

    Example row::

          1*  12.34 Ly +   523.1  Ls  412d [IM  ]  Jameson Memorial          Shinrarta Dezhra (Orbis)
    """

    def __init__(self, output: TextIO | None = None, tz: tzinfo | None = None) -> None:
        """Initialize the renderer.

        Args:
            output: Stream to write to; stdout when None.
            tz: Timezone of the header time; the local zone when None.
        """
        self._output = output
        self._tz = tz

    def header(self, total: int, last_modified: datetime) -> str:
        """Summary line above the table."""
        local = last_modified.astimezone(self._tz)
        return f"Total {total} stations. Last update is {local.strftime(HEADER_TIME_FORMAT)}."

    def row(self, record: RankedRecord) -> str:
        """One table row."""
        context = record.context
        station = context.station
        visited = "*" if context.visited else " "
        return (
            f"{record.rank:>3}{visited:<2}{context.distance:>6.2f} Ly + "
            f"{si_format(station.distance_to_arrival):>8} Ls  "
            f"{record.score.stale_days}d [{context.flag_letters()}]  "
            f"{station.name:<25} {station.system_name:<12} ({station.station_type.label})"
        )

    def render(self, result: RankerResult, last_modified: datetime) -> str:
        """Render a result as text.

        Args:
            result: Ranked result.
            last_modified: Last-Modified time of the stations dump.

        Returns:
            Header and rows separated by newlines, without a trailing newline.
        """
        lines = [self.header(result.total, last_modified)]
        lines.extend(self.row(record) for record in result.records)
        return "\n".join(lines)

    def print(self, result: RankerResult, last_modified: datetime) -> None:
        """Render and write a result."""
        click.echo(self.render(result, last_modified), file=self._output)

    def clear(self) -> None:
        """Push the previous table off screen."""
        click.echo("\n" * CLEAR_LINES, file=self._output, nl=False)
