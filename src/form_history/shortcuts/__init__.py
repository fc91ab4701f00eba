"""Keyboard shortcuts for undo/redo and the router that dispatches them."""

from .models import KeyChord, KeyEvent, ShortcutAction, ShortcutBinding
from .registry import RegistryStats, ShortcutConflictError, ShortcutRegistry
from .defaults import (
    REDO_ACTION,
    UNDO_ACTION,
    HistoryTarget,
    load_default_shortcuts,
)
from .router import ShortcutRouter

__all__ = [
    "KeyChord",
    "KeyEvent",
    "ShortcutAction",
    "ShortcutBinding",
    "ShortcutRegistry",
    "ShortcutConflictError",
    "RegistryStats",
    "HistoryTarget",
    "REDO_ACTION",
    "UNDO_ACTION",
    "load_default_shortcuts",
    "ShortcutRouter",
]
