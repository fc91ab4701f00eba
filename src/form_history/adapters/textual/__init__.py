"""Textual bindings; the runnable demo lives in ``.app``."""

from .controller import TextualHistoryAdapter, TextualUIHooks

__all__ = ["TextualHistoryAdapter", "TextualUIHooks"]
