"""Checkpoint history: immutable state, transitions and value comparison."""

from .equality import (
    EqualityFn,
    resolve_equality,
    serialized_equal,
    structural_equal,
)
from .state import MAX_HISTORY_SIZE, Commit, HistoryAction, HistoryState, Redo, Reset, Undo
from .store import HistoryStore, apply_action

__all__ = [
    "MAX_HISTORY_SIZE",
    "HistoryState",
    "HistoryAction",
    "HistoryStore",
    "Commit",
    "Undo",
    "Redo",
    "Reset",
    "EqualityFn",
    "apply_action",
    "resolve_equality",
    "serialized_equal",
    "structural_equal",
]
