"""ETag persistence for conditional dump downloads.

The store is a small JSON file keyed by URL. It is injected into the
fetcher; nothing else reads or writes it.
"""

import json
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import ValidationError

from src.fetch.models import CacheEntry, FetchError, FetchErrorClass


logger = structlog.get_logger()


class CacheStore(Protocol):
    """Protocol for conditional request metadata storage.

    Abstracts the storage layer to enable testing and alternative implementations.
    """

    def get(self, url: str) -> CacheEntry | None:
        """Retrieve cached metadata for a URL.

        Args:
            url: Resource URL.

        Returns:
            Cached entry if exists, None otherwise.
        """
        ...

    def save(self, url: str, entry: CacheEntry) -> None:
        """Store or replace cached metadata for a URL.

        Args:
            url: Resource URL.
            entry: Cache entry to store.
        """
        ...

    def remove(self, url: str) -> None:
        """Forget cached metadata for a URL.

        Args:
            url: Resource URL.
        """
        ...


class EtagStore:
    """JSON file implementation of CacheStore.

    A missing file is treated as an empty store. Every write rewrites the
    whole file through a temporary file and a rename, so a crash never
    leaves a half-written store behind.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON file.
        """
        self._path = path
        self._log = logger.bind(component="etag_store", path=str(path))

    @property
    def path(self) -> Path:
        """Location of the JSON file."""
        return self._path

    def _read(self) -> dict[str, CacheEntry]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                msg = "top-level value is not an object"
                raise ValueError(msg)
            return {url: CacheEntry.model_validate(value) for url, value in raw.items()}
        except (OSError, ValueError, ValidationError) as e:
            raise FetchError(
                FetchErrorClass.CACHE_ERROR,
                f"Unreadable ETag store {self._path}: {e}",
            ) from e

    def _write(self, entries: dict[str, CacheEntry]) -> None:
        data = {
            url: entry.model_dump(exclude_none=True)
            for url, entry in sorted(entries.items())
        }
        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            temp_path.replace(self._path)
        except OSError as e:
            raise FetchError(
                FetchErrorClass.CACHE_ERROR,
                f"Cannot write ETag store {self._path}: {e}",
            ) from e

    def get(self, url: str) -> CacheEntry | None:
        """Retrieve cached metadata for a URL."""
        return self._read().get(url)

    def save(self, url: str, entry: CacheEntry) -> None:
        """Store or replace cached metadata for a URL."""
        entries = self._read()
        entries[url] = entry
        self._write(entries)
        self._log.debug("etag_saved", url=url, has_etag=entry.etag is not None)

    def remove(self, url: str) -> None:
        """Forget cached metadata for a URL; unknown URLs are ignored."""
        entries = self._read()
        if entries.pop(url, None) is not None:
            self._write(entries)
            self._log.debug("etag_removed", url=url)


class CacheManager:
    """Manages conditional request state for the fetcher.

    Encapsulates the logic for:
    - Building conditional request headers (If-None-Match, If-Modified-Since)
    - Recording or dropping validators after a full download
    """

    def __init__(self, store: CacheStore, run_id: str) -> None:
        """Initialize the cache manager.

        Args:
            store: Storage backend for cache entries.
            run_id: Unique run identifier for logging.
        """
        self._store = store
        self._log = logger.bind(component="cache", run_id=run_id)

    def get_entry(self, url: str) -> CacheEntry | None:
        """Cached entry for a URL, if any."""
        return self._store.get(url)

    def get_conditional_headers(self, url: str) -> dict[str, str]:
        """Get conditional request headers from cached data.

        Args:
            url: Resource URL.

        Returns:
            Dictionary with If-None-Match and/or If-Modified-Since headers.
        """
        entry = self._store.get(url)
        headers: dict[str, str] = {}

        if entry:
            if entry.etag:
                headers["If-None-Match"] = entry.etag
            if entry.last_modified:
                headers["If-Modified-Since"] = entry.last_modified
            self._log.debug(
                "cache_lookup",
                url=url,
                has_etag=entry.etag is not None,
                has_last_modified=entry.last_modified is not None,
            )

        return headers

    def update_after_download(
        self,
        url: str,
        etag: str | None,
        last_modified: str | None,
    ) -> None:
        """Record the validators of a fresh download.

        A response without an ETag drops the cached entry so the next run
        downloads unconditionally.

        Args:
            url: Resource URL.
            etag: ETag response header.
            last_modified: Last-Modified response header.
        """
        if etag is None:
            self._store.remove(url)
        else:
            self._store.save(url, CacheEntry(etag=etag, last_modified=last_modified))

        self._log.debug(
            "cache_update",
            url=url,
            etag=etag is not None,
            last_modified=last_modified is not None,
        )
