"""Oneshot and polling run modes."""

import time
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from src.config.schemas.base import RunMode
from src.journal.models import ObserverState
from src.renderer.protocols import ResultRenderer
from src.searcher.errors import SearchError
from src.searcher.searcher import StationSearcher


logger = structlog.get_logger()

# Seconds between journal polls in update mode
POLL_INTERVAL_SECONDS = 5.0

# Seconds after which update mode re-renders even if nothing changed
FORCE_REFRESH_SECONDS = 60.0


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ModeRunner:
    """Drives searches and rendering for a run mode.

    In update mode the observer is re-read every poll interval. A new
    table is rendered when the position or docking history changed, or
    when the last table is older than the forced refresh interval.
    """

    def __init__(
        self,
        searcher: StationSearcher,
        renderer: ResultRenderer,
        observer_source: Callable[[], ObserverState],
        limit: int | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _utc_now,
        max_polls: int | None = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        force_refresh: float = FORCE_REFRESH_SECONDS,
    ) -> None:
        """Initialize the runner.

        Args:
            searcher: Searcher over the loaded stations.
            renderer: Output renderer.
            observer_source: Returns the current observer state.
            limit: Maximum rows per table.
            sleep: Sleep function between polls.
            clock: Monotonic clock in seconds.
            now: Wall clock used for day counts.
            max_polls: Stop update mode after this many polls; None runs
                until interrupted.
            poll_interval: Seconds between polls.
            force_refresh: Seconds after which a table is re-rendered
                regardless of changes.
        """
        self._searcher = searcher
        self._renderer = renderer
        self._observer_source = observer_source
        self._limit = limit
        self._sleep = sleep
        self._clock = clock
        self._now = now
        self._max_polls = max_polls
        self._poll_interval = poll_interval
        self._force_refresh = force_refresh
        self._log = logger.bind(component="modes")

    def run(self, mode: RunMode) -> int:
        """Run a mode until it finishes.

        Args:
            mode: Run mode.

        Returns:
            Number of tables rendered.

        Raises:
            SearchError: If the stations carry no update date.
            JournalError: If the observer state cannot be read.
        """
        last_modified = self._searcher.stations.last_modified
        if last_modified is None:
            msg = "no stations update date"
            raise SearchError(msg, mode=mode.value)

        self._log.info("mode_started", mode=mode.value)
        observer = self._observer_source()
        self._render(observer, last_modified)
        if mode == RunMode.ONESHOT:
            return 1
        return 1 + self._poll(observer, last_modified)

    def _render(self, observer: ObserverState, last_modified: datetime) -> None:
        result = self._searcher.search(observer, self._now(), self._limit)
        self._renderer.print(result, last_modified)

    def _poll(self, observer: ObserverState, last_modified: datetime) -> int:
        previous = observer
        last_render = self._clock()
        polls = 0
        rendered = 0

        while self._max_polls is None or polls < self._max_polls:
            self._sleep(self._poll_interval)
            polls += 1

            current = self._observer_source()
            stale = self._clock() - last_render >= self._force_refresh
            if current == previous and not stale:
                continue

            self._log.debug(
                "observer_refresh",
                system=current.system_name,
                moved=current.position != previous.position,
                forced=stale,
            )
            self._renderer.clear()
            self._render(current, last_modified)
            rendered += 1
            previous = current
            last_render = self._clock()

        return rendered
