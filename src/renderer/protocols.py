"""Renderer interface used by the run modes."""

from datetime import datetime
from typing import Protocol

from src.ranker.models import RankerResult


class ResultRenderer(Protocol):
    """Something that can present a ranked result."""

    def print(self, result: RankerResult, last_modified: datetime) -> None:
        """Present a result."""
        ...

    def clear(self) -> None:
        """Make room before the next result in a polling run."""
        ...
