"""Shared data model bases."""

from src.data_model.base import DumpModel, JournalModel, StrictBaseModel


__all__ = ["DumpModel", "JournalModel", "StrictBaseModel"]
