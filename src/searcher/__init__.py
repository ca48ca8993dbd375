"""Search glue and run modes."""

from src.config.schemas.base import RunMode
from src.searcher.errors import SearchError
from src.searcher.modes import ModeRunner
from src.searcher.searcher import StationSearcher


__all__ = [
    "ModeRunner",
    "RunMode",
    "SearchError",
    "StationSearcher",
]
