"""Dump downloader with conditional requests and retries."""

import gzip
import time
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from pathlib import Path

import httpx
import structlog

from src.fetch.cache import CacheManager, CacheStore
from src.fetch.config import FetchConfig
from src.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_NOT_MODIFIED,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    MAX_RETRY_AFTER_SECONDS,
    TEMP_SUFFIX,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import FetchError, FetchErrorClass, FetchResult


logger = structlog.get_logger()


def parse_http_date(value: str | None) -> datetime | None:
    """Parse an HTTP date header into an aware UTC datetime.

    Args:
        value: Header value such as ``Wed, 21 Oct 2015 07:28:00 GMT``.

    Returns:
        Parsed datetime, or None when absent or unparseable.
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


class DumpFetcher:
    """Downloads dump files to disk, compressed, only when they changed.

    Provides:
    - If-None-Match conditional requests backed by an ETag store
    - Streaming download gzip-compressed into place via an atomic replace
    - Configurable retry policy with exponential backoff
    - Metrics collection
    """

    def __init__(
        self,
        config: FetchConfig,
        etags: CacheStore,
        run_id: str,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the fetcher.

        Args:
            config: Fetch configuration.
            etags: ETag store for conditional requests.
            run_id: Unique run identifier for logging.
            transport: Optional httpx transport (tests use MockTransport).
            sleep: Sleep function used between retries.
        """
        self._config = config
        self._transport = transport
        self._sleep = sleep
        self._metrics = FetchMetrics.get_instance()
        self._cache = CacheManager(etags, run_id)
        self._log = logger.bind(component="fetch", run_id=run_id)

    def download(self, url: str, dest: Path) -> FetchResult:
        """Download a dump unless the local copy is current.

        Args:
            url: Dump URL.
            dest: Target path; the body is stored gzip-compressed.

        Returns:
            FetchResult describing what happened.

        Raises:
            FetchError: On a 4xx response or once retries are exhausted.
        """
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(url=url, dest=str(dest))

        headers = self._build_headers()
        # Validators are useless without the file they describe
        if dest.exists():
            headers.update(self._cache.get_conditional_headers(url))

        try:
            result = self._execute_with_retry(url, dest, headers, log)
        except FetchError as e:
            self._metrics.record_failure(e.error_class)
            log.error("fetch_failed", **e.to_dict())
            raise
        finally:
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._metrics.record_download(duration_ms)

        if result.not_modified:
            log.info("fetch_not_modified", status_code=result.status_code)
        else:
            log.info(
                "fetch_complete",
                status_code=result.status_code,
                bytes=result.bytes_received,
                duration_ms=round(duration_ms, 2),
            )
        return result

    def _build_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._config.user_agent,
            "Accept": "application/json, */*",
            "Accept-Encoding": "gzip, deflate",
        }

    def _execute_with_retry(
        self,
        url: str,
        dest: Path,
        headers: dict[str, str],
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute the download with retry logic.

        Args:
            url: URL to fetch.
            dest: Target path.
            headers: Request headers.
            log: Bound logger.

        Returns:
            FetchResult from the first attempt that did not fail.

        Raises:
            FetchError: When the error is not retryable or retries ran out.
        """
        policy = self._config.retry_policy
        attempt = 0

        while True:
            if attempt > 0:
                delay_ms = policy.get_delay_ms(attempt - 1)
                self._metrics.record_retry()
                log.debug(
                    "retry_attempt",
                    attempt=attempt,
                    delay_ms=delay_ms,
                    max_retries=policy.max_retries,
                )
                self._sleep(delay_ms / 1000.0)

            try:
                return self._execute_single(url, dest, headers, log.bind(attempt=attempt))
            except FetchError as e:
                if not policy.should_retry(e, attempt):
                    raise
                if e.error_class == FetchErrorClass.RATE_LIMITED and e.retry_after:
                    log.info("rate_limited", retry_after=e.retry_after, attempt=attempt)
                    self._sleep(min(e.retry_after, MAX_RETRY_AFTER_SECONDS))
            attempt += 1

    def _execute_single(
        self,
        url: str,
        dest: Path,
        headers: dict[str, str],
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute a single HTTP request.

        Args:
            url: URL to fetch.
            dest: Target path.
            headers: Request headers.
            log: Bound logger.

        Returns:
            FetchResult for a 2xx or 304 response.

        Raises:
            FetchError: For error statuses and transport failures.
        """
        try:
            with httpx.Client(
                timeout=self._config.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client, client.stream("GET", url, headers=headers) as response:
                raw_last_modified = response.headers.get("last-modified")
                etag = response.headers.get("etag")

                if response.status_code == HTTP_STATUS_NOT_MODIFIED:
                    self._metrics.record_request(response.status_code, 0)
                    self._metrics.record_not_modified()
                    cached = self._cache.get_entry(url)
                    if raw_last_modified is None and cached is not None:
                        raw_last_modified = cached.last_modified
                    return FetchResult(
                        url=url,
                        path=dest,
                        status_code=response.status_code,
                        not_modified=True,
                        last_modified=parse_http_date(raw_last_modified),
                        etag=etag or (cached.etag if cached else None),
                    )

                http_error = self._classify_http_error(url, response.status_code, response.headers)
                if http_error is not None:
                    self._metrics.record_request(response.status_code, 0)
                    raise http_error

                received = self._write_compressed(response, dest, log)
                self._metrics.record_request(response.status_code, received)
                status_code = response.status_code

        except httpx.TimeoutException as e:
            raise FetchError(
                FetchErrorClass.NETWORK_TIMEOUT,
                f"Request timed out: {e}",
                url=url,
            ) from e
        except httpx.TransportError as e:
            raise FetchError(
                FetchErrorClass.CONNECTION_ERROR,
                f"Connection failed: {e}",
                url=url,
            ) from e

        self._cache.update_after_download(url, etag, raw_last_modified)
        return FetchResult(
            url=url,
            path=dest,
            status_code=status_code,
            last_modified=parse_http_date(raw_last_modified),
            etag=etag,
            bytes_received=received,
        )

    def _write_compressed(
        self,
        response: httpx.Response,
        dest: Path,
        log: structlog.stdlib.BoundLogger,
    ) -> int:
        """Stream the response body into ``dest`` as gzip.

        The body goes to a sibling temporary file first and replaces
        ``dest`` only once complete, so an interrupted download leaves the
        previous dump intact.

        Args:
            response: Open streaming response.
            dest: Target path.
            log: Bound logger.

        Returns:
            Number of uncompressed bytes written.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        temp_path = dest.with_name(dest.name + TEMP_SUFFIX)
        total = 0
        try:
            with gzip.open(temp_path, "wb") as sink:
                for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
                    sink.write(chunk)
                    total += len(chunk)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        temp_path.replace(dest)
        log.debug("dump_written", bytes=total)
        return total

    def _classify_http_error(
        self,
        url: str,
        status_code: int,
        headers: httpx.Headers,
    ) -> FetchError | None:
        """Classify HTTP status code as error.

        Args:
            url: Requested URL.
            status_code: HTTP status code.
            headers: Response headers.

        Returns:
            FetchError if status indicates error, None otherwise.
        """
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            return FetchError(
                FetchErrorClass.RATE_LIMITED,
                "Rate limited (429 Too Many Requests)",
                status_code=status_code,
                retry_after=self._parse_retry_after(headers.get("retry-after")),
                url=url,
            )

        if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            return FetchError(
                FetchErrorClass.HTTP_4XX,
                f"Client error ({status_code})",
                status_code=status_code,
                url=url,
            )

        if HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
            return FetchError(
                FetchErrorClass.HTTP_5XX,
                f"Server error ({status_code})",
                status_code=status_code,
                url=url,
            )

        return FetchError(
            FetchErrorClass.UNKNOWN,
            f"Unexpected status ({status_code})",
            status_code=status_code,
            url=url,
        )

    def _parse_retry_after(self, value: str | None) -> int | None:
        """Parse Retry-After header value.

        Args:
            value: Header value (seconds or HTTP date).

        Returns:
            Seconds to wait, or None if not parseable.
        """
        if not value:
            return None

        try:
            return int(value)
        except ValueError:
            pass

        parsed = parse_http_date(value)
        if parsed is None:
            return None
        return max(0, int((parsed - datetime.now(UTC)).total_seconds()))
