"""Error types for the journal reader."""

from pathlib import Path


class JournalError(Exception):
    """Raised when the observer state cannot be read from the journal."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        line_number: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the journal error.

        Args:
            message: Human-readable error message.
            path: Journal file or directory involved.
            line_number: 1-based line number of a malformed event.
            cause: Underlying error.
        """
        super().__init__(message)
        self.message = message
        self.path = path
        self.line_number = line_number
        self.cause = cause

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging."""
        return {
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "line_number": self.line_number,
            "cause": str(self.cause) if self.cause else None,
        }
