"""Dump statistics."""

from src.stats.histogram import DayHistogram, histogram_file_name


__all__ = ["DayHistogram", "histogram_file_name"]
