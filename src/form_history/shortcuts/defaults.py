"""Built-in undo/redo shortcuts."""

from __future__ import annotations

from typing import Iterable, Protocol

from .models import KeyChord, ShortcutAction, ShortcutBinding
from .registry import ShortcutRegistry

UNDO_ACTION = "history.undo"
REDO_ACTION = "history.redo"


class HistoryTarget(Protocol):
    """What a shortcut needs from a field's history controller."""

    name: str

    @property
    def can_undo(self) -> bool: ...

    @property
    def can_redo(self) -> bool: ...

    def undo(self) -> bool: ...

    def redo(self) -> bool: ...


def undo_target(target: HistoryTarget) -> bool:
    if not target.can_undo:
        return False
    return target.undo()


def redo_target(target: HistoryTarget) -> bool:
    if not target.can_redo:
        return False
    return target.redo()


DEFAULT_ACTIONS: tuple[ShortcutAction, ...] = (
    ShortcutAction(id=UNDO_ACTION, handler=undo_target, description="Undo"),
    ShortcutAction(id=REDO_ACTION, handler=redo_target, description="Redo"),
)

DEFAULT_BINDINGS: tuple[ShortcutBinding, ...] = (
    ShortcutBinding("undo.ctrl", KeyChord("z", ("ctrl",)), UNDO_ACTION, "Undo (Ctrl+Z)"),
    ShortcutBinding("undo.meta", KeyChord("z", ("meta",)), UNDO_ACTION, "Undo (Cmd+Z)"),
    ShortcutBinding("redo.ctrl", KeyChord("y", ("ctrl",)), REDO_ACTION, "Redo (Ctrl+Y)"),
    ShortcutBinding("redo.meta", KeyChord("y", ("meta",)), REDO_ACTION, "Redo (Cmd+Y)"),
)


def load_default_shortcuts(
    registry: ShortcutRegistry,
    *,
    include_bindings: Iterable[str] | None = None,
    replace: bool = False,
) -> ShortcutRegistry:
    """Register the undo/redo actions and (a subset of) their chords."""

    wanted = set(include_bindings) if include_bindings is not None else None
    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)
    for binding in DEFAULT_BINDINGS:
        if wanted is not None and binding.id not in wanted:
            continue
        registry.register_binding(binding, replace=replace)
    return registry


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "HistoryTarget",
    "REDO_ACTION",
    "UNDO_ACTION",
    "load_default_shortcuts",
    "redo_target",
    "undo_target",
]
