"""Error types for search runs."""


class SearchError(Exception):
    """Raised when a search run cannot start or continue."""

    def __init__(self, message: str, mode: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            mode: Run mode in effect, if any.
        """
        super().__init__(message)
        self.message = message
        self.mode = mode
