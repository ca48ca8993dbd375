"""Reads the observer position and docking history from game journals."""

import json
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import structlog
from pydantic import ValidationError

from src.journal.constants import (
    EVENT_DOCKED,
    ISO_TIMESTAMP_FORMAT,
    JOURNAL_FILE_PATTERN,
    POSITION_EVENTS,
    SHORT_TIMESTAMP_FORMAT,
    SOL_SYSTEM_NAME,
    VISITED_WINDOW_FILES,
)
from src.journal.errors import JournalError
from src.journal.models import DockedEvent, JournalFile, ObserverState, PositionEvent
from src.stations.models import Coords


logger = structlog.get_logger()


def parse_journal_name(name: str, path: Path) -> JournalFile | None:
    """Parse a journal file name.

    Args:
        name: File name.
        path: Full path of the file.

    Returns:
        JournalFile, or None if the name is not a journal file name.
    """
    match = JOURNAL_FILE_PATTERN.match(name)
    if match is None:
        return None
    if match["short"]:
        started_at = datetime.strptime(match["short"], SHORT_TIMESTAMP_FORMAT)
    else:
        started_at = datetime.strptime(match["iso"], ISO_TIMESTAMP_FORMAT)
    return JournalFile(
        started_at=started_at.replace(tzinfo=UTC),
        part=int(match["part"]),
        path=path,
    )


class JournalReader:
    """Derives ObserverState from the journal directory.

    Files are read newest first. The newest file holding a position event
    decides the position; docking events are collected from it, from any
    newer files, and from a window of older files.
    """

    def __init__(
        self,
        journal_dir: Path,
        visited_window: int = VISITED_WINDOW_FILES,
    ) -> None:
        """Initialize the reader.

        Args:
            journal_dir: Directory holding Journal.*.log files.
            visited_window: Older files scanned for docking events once
                the position is known.
        """
        self._journal_dir = journal_dir
        self._visited_window = visited_window
        self._log = logger.bind(component="journal", journal_dir=str(journal_dir))

    def journal_files(self) -> list[JournalFile]:
        """Journal files, newest first.

        Raises:
            JournalError: If the directory does not exist.
        """
        if not self._journal_dir.is_dir():
            msg = f"'{self._journal_dir}' is not a directory"
            raise JournalError(msg, path=self._journal_dir)

        files = [
            parsed
            for entry in self._journal_dir.iterdir()
            if entry.is_file()
            and (parsed := parse_journal_name(entry.name, entry)) is not None
        ]
        return sorted(files, reverse=True)

    def load_current(self) -> ObserverState:
        """Read the current position and recently visited markets.

        Returns:
            ObserverState at the last recorded position.

        Raises:
            JournalError: If no position event exists or a line is malformed.
        """
        files = iter(self.journal_files())
        position: PositionEvent | None = None
        visited: set[int] = set()
        files_read = 0

        for journal in files:
            files_read += 1
            for event in self._read_events(journal.path):
                if isinstance(event, PositionEvent):
                    position = event
                else:
                    visited.add(event.market_id)
            if position is not None:
                break

        if position is None:
            msg = f"No location entry in {self._journal_dir}"
            raise JournalError(msg, path=self._journal_dir)

        for _, journal in zip(range(self._visited_window), files, strict=False):
            files_read += 1
            for event in self._read_events(journal.path, position_events=False):
                if isinstance(event, DockedEvent):
                    visited.add(event.market_id)

        self._log.debug(
            "observer_loaded",
            system=position.star_system,
            visited=len(visited),
            files_read=files_read,
        )
        return ObserverState(
            system_name=position.star_system,
            position=position.star_pos,
            visited=frozenset(visited),
        )

    def sol_origin(self) -> ObserverState:
        """Observer at Sol with the real docking history.

        Raises:
            JournalError: Under the same conditions as ``load_current``.
        """
        current = self.load_current()
        return ObserverState(
            system_name=SOL_SYSTEM_NAME,
            position=Coords(),
            visited=current.visited,
        )

    def _read_events(
        self,
        path: Path,
        position_events: bool = True,
    ) -> Iterator[PositionEvent | DockedEvent]:
        """Yield the events of interest from one journal file.

        Args:
            path: Journal file.
            position_events: Also yield Location and FSDJump events.

        Yields:
            Position and docking events in file order.

        Raises:
            JournalError: If a line is not a valid event.
        """
        try:
            with path.open(encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    event = self._parse_line(line, path, line_number, position_events)
                    if event is not None:
                        yield event
        except OSError as e:
            msg = f"Cannot read journal {path}: {e}"
            raise JournalError(msg, path=path, cause=e) from e

    def _parse_line(
        self,
        line: str,
        path: Path,
        line_number: int,
        position_events: bool,
    ) -> PositionEvent | DockedEvent | None:
        try:
            data = json.loads(line)
            if not isinstance(data, dict):
                msg = "event is not an object"
                raise ValueError(msg)
            kind = data.get("event")
            if kind == EVENT_DOCKED:
                return DockedEvent.model_validate(data)
            if position_events and kind in POSITION_EVENTS:
                return PositionEvent.model_validate(data)
        except (ValueError, ValidationError) as e:
            msg = f"Malformed journal event at {path.name}:{line_number}: {e}"
            raise JournalError(msg, path=path, line_number=line_number, cause=e) from e
        return None
