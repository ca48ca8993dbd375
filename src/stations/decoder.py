"""Streaming decoder for one-value-per-line JSON array dumps.

The upstream dumps are pretty-printed JSON arrays where every element sits
on its own line::

    [
    {"id": 1, ...},
    {"id": 2, ...}
    ]

Decoding line by line keeps memory bounded by a single record instead of
the whole multi-megabyte document. This is a format contract with the dump
producer, not a general JSON parser.
"""

import gzip
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO, Generic, NoReturn, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from src.stations.constants import ARRAY_CLOSE, ARRAY_OPEN, ERROR_LINE_PREVIEW_CHARS
from src.stations.errors import DecodeError
from src.stations.metrics import DecoderMetrics


logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

_OPEN = ARRAY_OPEN.encode("ascii")
_CLOSE = ARRAY_CLOSE.encode("ascii")


def _preview(line: str) -> str:
    if len(line) <= ERROR_LINE_PREVIEW_CHARS:
        return line
    return line[:ERROR_LINE_PREVIEW_CHARS] + "..."


class RecordDecoder(Generic[ModelT]):
    """Lazy, single-pass iterator of typed records from a dump stream.

    Each ``next()`` performs exactly one line read and at most one parse.
    The iterator is finite: it stops at the closing ``]`` line. It cannot
    be restarted; reopen the source to decode again.
    """

    def __init__(
        self,
        source: IO[bytes],
        model: type[ModelT],
        name: str = "stream",
        metrics: DecoderMetrics | None = None,
    ) -> None:
        """Initialize the decoder.

        Args:
            source: Buffered, already-decompressed byte source.
            model: Pydantic model each element is validated into.
            name: Stream name for logging.
            metrics: Optional metrics instance.
        """
        self._source = source
        self._model = model
        self._finished = False
        self._lines_read = 0
        self._records_decoded = 0
        self._metrics = metrics or DecoderMetrics.get_instance()
        self._log = logger.bind(component="decoder", stream=name)

    @property
    def lines_read(self) -> int:
        """Number of lines consumed so far."""
        return self._lines_read

    @property
    def records_decoded(self) -> int:
        """Number of records produced so far."""
        return self._records_decoded

    @property
    def finished(self) -> bool:
        """Whether the stream ended or failed."""
        return self._finished

    def __iter__(self) -> Iterator[ModelT]:
        return self

    def __next__(self) -> ModelT:
        if self._finished:
            raise StopIteration

        while True:
            try:
                raw = self._source.readline()
            except (EOFError, OSError) as e:
                # gzip raises these for a cut-off or corrupt compressed stream
                self._fail(
                    DecodeError(
                        "Truncated or corrupt compressed stream",
                        line_number=self._lines_read,
                        cause=e,
                    )
                )
            if not raw:
                self._fail(
                    DecodeError(
                        "Unexpected end of stream before closing ']' "
                        "(truncated document)",
                        line_number=self._lines_read,
                    )
                )
            self._lines_read += 1

            trimmed = raw.strip()
            if trimmed.endswith(b","):
                trimmed = trimmed[:-1]

            if trimmed == _OPEN:
                continue
            if trimmed == _CLOSE:
                self._finished = True
                self._metrics.record_stream(self._lines_read, self._records_decoded)
                self._log.info(
                    "decode_complete",
                    lines_read=self._lines_read,
                    records_decoded=self._records_decoded,
                )
                raise StopIteration

            try:
                record = self._model.model_validate_json(trimmed)
            except ValidationError as e:
                text = trimmed.decode("utf-8", errors="replace")
                self._fail(
                    DecodeError(
                        f"Malformed record on line {self._lines_read}: "
                        f"{_preview(text)}",
                        line=text,
                        line_number=self._lines_read,
                        cause=e,
                    )
                )

            self._records_decoded += 1
            return record

    def _fail(self, error: DecodeError) -> NoReturn:
        self._finished = True
        self._metrics.record_error()
        self._log.error("decode_failed", **error.to_dict())
        raise error


def decode_records(
    source: IO[bytes],
    model: type[ModelT],
    name: str = "stream",
) -> Iterator[ModelT]:
    """Decode a dump stream as a generator of records.

    Args:
        source: Buffered, already-decompressed byte source.
        model: Pydantic model each element is validated into.
        name: Stream name for logging.

    Yields:
        Decoded records in stream order.

    Raises:
        DecodeError: On a malformed line or a truncated stream.
    """
    yield from RecordDecoder(source, model, name=name)


def open_dump(path: Path) -> gzip.GzipFile:
    """Open a gzip-compressed dump for line-oriented reading.

    Args:
        path: Path to the ``.json.gz`` file.

    Returns:
        Binary file object yielding decompressed lines.
    """
    return gzip.GzipFile(filename=path, mode="rb")


def write_records(sink: IO[bytes], records: Iterable[BaseModel]) -> int:
    """Write records in the one-value-per-line array layout.

    Args:
        sink: Binary output stream.
        records: Records to write, serialized by alias.

    Returns:
        Number of records written.
    """
    sink.write(_OPEN + b"\n")
    count = 0
    pending: bytes | None = None
    for record in records:
        if pending is not None:
            sink.write(pending + b",\n")
        pending = record.model_dump_json(by_alias=True).encode("utf-8")
        count += 1
    if pending is not None:
        sink.write(pending + b"\n")
    sink.write(_CLOSE + b"\n")
    return count
