"""Historian: bounded undo/redo over caller-supplied inverse operations.

This package contains the history engine and the entry model it records:
- HistoryEntry: an immutable command + arguments pair
- Historian: the two-stack engine (register, undo, redo)
"""

from historian.entry import HistoryEntry, is_receiver_method, is_sequence, normalize_args
from historian.engine import DEFAULT_CAPACITY, Historian, HistoryTarget

__all__ = [
    "DEFAULT_CAPACITY",
    "Historian",
    "HistoryEntry",
    "HistoryTarget",
    "is_receiver_method",
    "is_sequence",
    "normalize_args",
]
