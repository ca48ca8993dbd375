"""Error types for filter pipeline construction."""


class ConfigurationError(Exception):
    """Raised when filter configuration cannot be turned into a pipeline.

    Always raised while the pipeline is being built, before any record is
    evaluated.
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        pattern: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the configuration error.

        Args:
            message: Human-readable error message.
            stage: Name of the stage being built.
            pattern: Offending pattern, for exclusion stages.
            cause: Underlying error.
        """
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.pattern = pattern
        self.cause = cause
