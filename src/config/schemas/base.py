"""Base schema types for configuration."""

from enum import Enum


class RunMode(str, Enum):
    """How a search run presents its results.

    ONESHOT searches and renders once. UPDATE keeps polling the journal
    and re-renders when the observer moves or docks.
    """

    ONESHOT = "oneshot"
    UPDATE = "update"


class Origin(str, Enum):
    """Where distances are measured from."""

    CURRENT = "current"
    SOL = "sol"
