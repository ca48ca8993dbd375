"""Presentation of ranked stations."""

from src.renderer.io import AtomicWriter, GeneratedFile
from src.renderer.json_renderer import JsonRenderer, record_to_dict
from src.renderer.protocols import ResultRenderer
from src.renderer.text import TextRenderer, si_format


__all__ = [
    "AtomicWriter",
    "GeneratedFile",
    "JsonRenderer",
    "ResultRenderer",
    "TextRenderer",
    "record_to_dict",
    "si_format",
]
