"""Data models for the dump fetch layer."""

import random
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class FetchErrorClass(str, Enum):
    """Classification of fetch errors for metrics and retry decisions.

    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection or the stream broke
    - HTTP_4XX: Non-retryable 4xx client error (except 429)
    - HTTP_5XX: Retryable 5xx server error
    - RATE_LIMITED: 429 Too Many Requests
    - CACHE_ERROR: ETag store could not be read or written
    - UNKNOWN: Unclassified error
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    RATE_LIMITED = "RATE_LIMITED"
    CACHE_ERROR = "CACHE_ERROR"
    UNKNOWN = "UNKNOWN"


class FetchError(Exception):
    """Raised when a dump cannot be downloaded.

    Carries enough structure for retry decisions and error reporting.
    """

    def __init__(
        self,
        error_class: FetchErrorClass,
        message: str,
        status_code: int | None = None,
        retry_after: int | None = None,
        url: str | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            error_class: Classification of the error.
            message: Human-readable message.
            status_code: HTTP status code if available.
            retry_after: Retry-After seconds (for 429).
            url: URL being fetched, if known.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.status_code = status_code
        self.retry_after = retry_after
        self.url = url

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for logging."""
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "status_code": self.status_code,
            "retry_after": self.retry_after,
            "url": self.url,
        }


class CacheEntry(BaseModel):
    """Conditional request metadata stored per URL.

    Attributes:
        etag: ETag of the last full download.
        last_modified: Raw Last-Modified header of the last full download.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    etag: str | None = None
    last_modified: str | None = None


class FetchResult(BaseModel):
    """Result of a dump download.

    Attributes:
        url: Requested URL.
        path: Local file holding the (gzip-compressed) dump.
        status_code: Final HTTP status code.
        not_modified: True when the server answered 304 and the local
            file was kept as is.
        last_modified: Parsed Last-Modified time, if the server sent one.
        etag: ETag of the dump now on disk.
        bytes_received: Uncompressed body bytes read from the network.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: Annotated[str, Field(min_length=1)]
    path: Path
    status_code: int = Field(ge=100, le=599)
    not_modified: bool = False
    last_modified: datetime | None = None
    etag: str | None = None
    bytes_received: int = Field(default=0, ge=0)


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    Controls how many times to retry and the backoff strategy.
    Uses exponential backoff: delay = base_delay_ms * (exponential_base ^ attempt)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = 1000
    max_delay_ms: Annotated[int, Field(ge=0, le=300000)] = 30000
    exponential_base: Annotated[float, Field(ge=1.0, le=5.0)] = 2.0
    jitter_factor: Annotated[float, Field(ge=0.0, le=1.0)] = 0.1

    def should_retry(self, error: FetchError, attempt: int) -> bool:
        """Determine if a request should be retried.

        Args:
            error: The error that occurred.
            attempt: Current attempt number (0-indexed).

        Returns:
            True if the request should be retried.
        """
        if attempt >= self.max_retries:
            return False

        retryable_classes = {
            FetchErrorClass.NETWORK_TIMEOUT,
            FetchErrorClass.CONNECTION_ERROR,
            FetchErrorClass.HTTP_5XX,
            FetchErrorClass.RATE_LIMITED,
        }

        return error.error_class in retryable_classes

    def get_delay_ms(self, attempt: int) -> int:
        """Calculate delay before the next retry attempt.

        Args:
            attempt: Current attempt number (0-indexed).

        Returns:
            Delay in milliseconds.
        """
        delay = self.base_delay_ms * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay_ms)

        jitter = delay * self.jitter_factor * random.random()  # noqa: S311
        return int(delay + jitter)
