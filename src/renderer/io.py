"""Atomic file output shared by the JSON renderer and the stats writer."""

import hashlib
from dataclasses import dataclass
from pathlib import Path

import structlog


logger = structlog.get_logger()


@dataclass(frozen=True)
class GeneratedFile:
    """A file written by AtomicWriter.

    Attributes:
        path: Path relative to the writer's base directory when possible.
        absolute_path: Absolute path of the file.
        bytes_written: Size of the content in bytes.
        sha256: SHA-256 of the content.
    """

    path: str
    absolute_path: str
    bytes_written: int
    sha256: str


class AtomicWriter:
    """Writes files so readers never see partial content.

    Content goes to a temporary sibling first and is then renamed over
    the target.
    """

    def __init__(self, base_dir: Path, run_id: str | None = None) -> None:
        """Initialize the atomic writer.

        Args:
            base_dir: Base directory for relative path calculation.
            run_id: Optional run ID for logging context.
        """
        self._base_dir = base_dir
        self._log = logger.bind(component="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def write(self, path: Path, content: str) -> GeneratedFile:
        """Write text content atomically.

        Args:
            path: Target file path.
            content: Content to write (encoded as UTF-8).

        Returns:
            GeneratedFile with path, checksum, and size information.
        """
        content_bytes = content.encode("utf-8")
        sha256 = hashlib.sha256(content_bytes).hexdigest()

        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_bytes(content_bytes)
        temp_path.replace(path)

        try:
            relative_path = str(path.relative_to(self._base_dir))
        except ValueError:
            relative_path = str(path)

        self._log.debug(
            "file_written",
            path=relative_path,
            bytes=len(content_bytes),
            sha256=sha256[:12],
        )

        return GeneratedFile(
            path=relative_path,
            absolute_path=str(path.resolve()),
            bytes_written=len(content_bytes),
            sha256=sha256,
        )
