"""Unit tests for the ETag store and cache manager."""

import json
from pathlib import Path

import pytest

from src.fetch.cache import CacheManager, EtagStore
from src.fetch.models import CacheEntry, FetchError, FetchErrorClass


URL = "https://dumps.example.com/stations.json"


class TestEtagStore:
    """Tests for EtagStore."""

    @pytest.mark.unit
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        """Test that no file means no entries."""
        assert EtagStore(tmp_path / "cache.json").get(URL) is None

    @pytest.mark.unit
    def test_save_and_get(self, tmp_path: Path) -> None:
        """Test persisting an entry across instances."""
        path = tmp_path / "sub" / "cache.json"
        EtagStore(path).save(URL, CacheEntry(etag='"abc"'))

        assert EtagStore(path).get(URL) == CacheEntry(etag='"abc"')
        assert json.loads(path.read_text()) == {URL: {"etag": '"abc"'}}

    @pytest.mark.unit
    def test_remove(self, tmp_path: Path) -> None:
        """Test forgetting an entry and ignoring unknown URLs."""
        store = EtagStore(tmp_path / "cache.json")
        store.save(URL, CacheEntry(etag='"abc"'))

        store.remove(URL)
        store.remove("https://other.example.com/")

        assert store.get(URL) is None

    @pytest.mark.unit
    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        """Test that an unreadable store is reported."""
        path = tmp_path / "cache.json"
        path.write_text("{not json")

        with pytest.raises(FetchError) as exc_info:
            EtagStore(path).get(URL)

        assert exc_info.value.error_class == FetchErrorClass.CACHE_ERROR


class TestCacheManager:
    """Tests for CacheManager."""

    @pytest.mark.unit
    def test_conditional_headers(self, tmp_path: Path) -> None:
        """Test header construction from a stored entry."""
        store = EtagStore(tmp_path / "cache.json")
        store.save(URL, CacheEntry(etag='"abc"', last_modified="Tue, 13 Jun 2023 06:00:00 GMT"))

        headers = CacheManager(store, run_id="r").get_conditional_headers(URL)

        assert headers == {
            "If-None-Match": '"abc"',
            "If-Modified-Since": "Tue, 13 Jun 2023 06:00:00 GMT",
        }

    @pytest.mark.unit
    def test_no_entry_no_headers(self, tmp_path: Path) -> None:
        """Test that an unknown URL yields no headers."""
        manager = CacheManager(EtagStore(tmp_path / "cache.json"), run_id="r")

        assert manager.get_conditional_headers(URL) == {}
