"""Game journal reader supplying the observer position and visited markets."""

from src.journal.errors import JournalError
from src.journal.models import DockedEvent, JournalFile, ObserverState, PositionEvent
from src.journal.reader import JournalReader, parse_journal_name


__all__ = [
    "DockedEvent",
    "JournalError",
    "JournalFile",
    "JournalReader",
    "ObserverState",
    "PositionEvent",
    "parse_journal_name",
]
