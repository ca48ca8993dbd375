"""Download and decode the dumps into a searchable StationSet."""

import gzip
from pathlib import Path

import structlog

from src.fetch.client import DumpFetcher
from src.fetch.models import FetchResult
from src.stations.constants import (
    COORDINATES_FILE,
    STATIONS_DUMP_FILE,
    STATIONS_DUMP_URL,
    SYSTEMS_DUMP_FILE,
    SYSTEMS_DUMP_URL,
)
from src.stations.decoder import decode_records, open_dump, write_records
from src.stations.models import Station, SystemCoords
from src.stations.positional import PositionalIndex, StationSet


logger = structlog.get_logger()


class StationLoader:
    """Keeps the local dumps current and turns them into a StationSet.

    Files live in ``data_dir``:

    - the stations dump, refreshed on every load (conditionally)
    - the populated systems dump, fetched only to rebuild coordinates
    - a compact coordinates cache derived from the systems dump
    """

    def __init__(
        self,
        fetcher: DumpFetcher,
        data_dir: Path,
        run_id: str,
        stations_url: str = STATIONS_DUMP_URL,
        systems_url: str = SYSTEMS_DUMP_URL,
    ) -> None:
        """Initialize the loader.

        Args:
            fetcher: Dump downloader.
            data_dir: Directory holding the dumps and caches.
            run_id: Unique run identifier for logging.
            stations_url: Stations dump URL.
            systems_url: Populated systems dump URL.
        """
        self._fetcher = fetcher
        self._data_dir = data_dir
        self._stations_url = stations_url
        self._systems_url = systems_url
        self._log = logger.bind(component="loader", run_id=run_id)

    @property
    def stations_path(self) -> Path:
        """Local stations dump."""
        return self._data_dir / STATIONS_DUMP_FILE

    @property
    def systems_path(self) -> Path:
        """Local populated systems dump."""
        return self._data_dir / SYSTEMS_DUMP_FILE

    @property
    def coordinates_path(self) -> Path:
        """Local coordinates cache."""
        return self._data_dir / COORDINATES_FILE

    def load(self, refresh_coordinates: bool = False) -> StationSet:
        """Refresh the stations dump and join it with system coordinates.

        Args:
            refresh_coordinates: Rebuild the coordinates cache even when
                it exists.

        Returns:
            StationSet carrying the dump's Last-Modified time.

        Raises:
            FetchError: If a download fails.
            DecodeError: If a dump or the cache is malformed.
        """
        fetched = self.download_stations()
        index = self.load_index(refresh=refresh_coordinates)
        stations = self.read_stations()
        return index.join(stations, last_modified=fetched.last_modified)

    def download_stations(self) -> FetchResult:
        """Bring the local stations dump up to date."""
        return self._fetcher.download(self._stations_url, self.stations_path)

    def read_stations(self) -> list[Station]:
        """Decode the local stations dump.

        Returns:
            Stations in dump order, coordinates not yet joined.
        """
        with open_dump(self.stations_path) as source:
            stations = list(decode_records(source, Station, name="stations"))
        self._log.info("stations_loaded", count=len(stations))
        return stations

    def load_index(self, refresh: bool = False) -> PositionalIndex:
        """Build the positional index from the coordinates cache.

        Args:
            refresh: Rebuild the cache from a fresh systems dump first.

        Returns:
            Immutable positional index.
        """
        if refresh or not self.coordinates_path.exists():
            self.rebuild_coordinates()
        with open_dump(self.coordinates_path) as source:
            return PositionalIndex.from_records(
                decode_records(source, SystemCoords, name="coordinates")
            )

    def rebuild_coordinates(self) -> int:
        """Download the systems dump and write the compact coordinates cache.

        Returns:
            Number of systems written.
        """
        self._fetcher.download(self._systems_url, self.systems_path)

        temp_path = self.coordinates_path.with_name(self.coordinates_path.name + ".part")
        try:
            with open_dump(self.systems_path) as source, gzip.open(temp_path, "wb") as sink:
                count = write_records(
                    sink, decode_records(source, SystemCoords, name="systems")
                )
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        temp_path.replace(self.coordinates_path)

        self._log.info(
            "coordinates_rebuilt",
            systems=count,
            path=str(self.coordinates_path),
        )
        return count
