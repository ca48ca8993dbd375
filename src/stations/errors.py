"""Error types for dump decoding."""


class DecodeError(Exception):
    """Raised when a dump stream is malformed or truncated.

    Decoding stops at the first error; no partial recovery is attempted.
    """

    def __init__(
        self,
        message: str,
        line: str | None = None,
        line_number: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the decode error.

        Args:
            message: Human-readable error message.
            line: Offending line text, if a line was read.
            line_number: 1-based line number within the stream.
            cause: Underlying parse or validation error.
        """
        super().__init__(message)
        self.message = message
        self.line = line
        self.line_number = line_number
        self.cause = cause

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "message": self.message,
            "line": self.line,
            "line_number": self.line_number,
            "cause": str(self.cause) if self.cause else None,
        }
