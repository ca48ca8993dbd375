"""Dump fetch layer with conditional requests and retries.

This module provides:
- ETag persistence for conditional requests
- Streaming, gzip-compressed dump downloads with atomic replacement
- Configurable retry policy with exponential backoff
- Metrics collection for observability
"""

from src.fetch.cache import CacheManager, CacheStore, EtagStore
from src.fetch.client import DumpFetcher, parse_http_date
from src.fetch.config import FetchConfig
from src.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_ETAG_CACHE_FILE,
    HTTP_STATUS_NOT_MODIFIED,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    MAX_RETRY_AFTER_SECONDS,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import (
    CacheEntry,
    FetchError,
    FetchErrorClass,
    FetchResult,
    RetryPolicy,
)


__all__ = [
    # Client
    "DumpFetcher",
    "parse_http_date",
    # Cache
    "CacheEntry",
    "CacheManager",
    "CacheStore",
    "EtagStore",
    # Config
    "FetchConfig",
    # Models
    "FetchError",
    "FetchErrorClass",
    "FetchResult",
    "RetryPolicy",
    # Constants
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_ETAG_CACHE_FILE",
    "HTTP_STATUS_NOT_MODIFIED",
    "HTTP_STATUS_TOO_MANY_REQUESTS",
    "MAX_RETRY_AFTER_SECONDS",
    # Metrics
    "FetchMetrics",
]
