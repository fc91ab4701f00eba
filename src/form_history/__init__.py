"""Debounced undo/redo history for interactive form fields."""

from .config import HistorySettings
from .controller import DebouncedHistory, HistoryChange
from .form import FieldSpec, FormHistory, NumericRange
from .history import HistoryState, HistoryStore
from .runtime.scheduler import AsyncioScheduler, PollingScheduler
from .shortcuts import KeyEvent, ShortcutRouter

__all__ = [
    "AsyncioScheduler",
    "DebouncedHistory",
    "FieldSpec",
    "FormHistory",
    "HistoryChange",
    "HistorySettings",
    "HistoryState",
    "HistoryStore",
    "KeyEvent",
    "NumericRange",
    "PollingScheduler",
    "ShortcutRouter",
]

__version__ = "0.1.0"
