"""Configuration model for the dump fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from src.fetch.constants import (
    DEFAULT_ETAG_CACHE_FILE,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from src.fetch.models import RetryPolicy


class FetchConfig(BaseModel):
    """Configuration for dump downloads.

    Attributes:
        user_agent: User-Agent header sent with every request.
        timeout_seconds: Per-operation network timeout.
        retry_policy: Retry and backoff settings.
        etag_cache_file: File name of the ETag store inside the data
            directory.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = DEFAULT_USER_AGENT
    timeout_seconds: Annotated[float, Field(ge=1.0, le=600.0)] = DEFAULT_TIMEOUT_SECONDS
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
    etag_cache_file: Annotated[str, Field(min_length=1)] = DEFAULT_ETAG_CACHE_FILE
