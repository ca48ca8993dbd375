"""Configuration loading and validation module."""

from src.config.effective import EffectiveConfig
from src.config.loader import ConfigLoader
from src.config.schemas import Origin, RunMode, SearchConfig
from src.config.state_machine import ConfigState, ConfigStateError


__all__ = [
    "ConfigLoader",
    "ConfigState",
    "ConfigStateError",
    "EffectiveConfig",
    "Origin",
    "RunMode",
    "SearchConfig",
]
