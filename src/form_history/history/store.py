"""Bounded linear undo/redo store."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from form_history.runtime import telemetry

from .equality import EqualityFn, structural_equal
from .state import (
    MAX_HISTORY_SIZE,
    Commit,
    HistoryAction,
    HistoryState,
    Redo,
    Reset,
    Undo,
)

T = TypeVar("T")


def _bounded(entries: tuple, max_size: int) -> tuple:
    if len(entries) > max_size:
        return entries[-max_size:]
    return entries


def apply_action(
    state: HistoryState[T],
    action: HistoryAction,
    *,
    max_size: int = MAX_HISTORY_SIZE,
    equals: EqualityFn = structural_equal,
) -> HistoryState[T]:
    """Return the state after ``action``; the same object when nothing moves."""

    if isinstance(action, Commit):
        if equals(action.value, state.present):
            return state
        return HistoryState(
            present=action.value,
            past=_bounded(state.past + (state.present,), max_size),
            future=(),
        )

    if isinstance(action, Undo):
        if not state.past:
            return state
        return HistoryState(
            present=state.past[-1],
            past=state.past[:-1],
            future=(state.present,) + state.future,
        )

    if isinstance(action, Redo):
        if not state.future:
            return state
        return HistoryState(
            present=state.future[0],
            past=_bounded(state.past + (state.present,), max_size),
            future=state.future[1:],
        )

    if isinstance(action, Reset):
        return HistoryState.initial(action.value)

    raise TypeError(f"Unsupported history action {action!r}")


class HistoryStore(Generic[T]):
    """Owns one ``HistoryState`` and applies actions to it."""

    def __init__(
        self,
        initial: T,
        *,
        max_size: int = MAX_HISTORY_SIZE,
        equals: EqualityFn = structural_equal,
        name: str = "history",
        logger_name: Optional[str] = None,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._state: HistoryState[T] = HistoryState.initial(initial)
        self._max_size = max_size
        self._equals = equals
        self._logger_name = logger_name
        self.name = name

    @property
    def state(self) -> HistoryState[T]:
        return self._state

    @property
    def present(self) -> T:
        return self._state.present

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def can_undo(self) -> bool:
        return self._state.can_undo

    @property
    def can_redo(self) -> bool:
        return self._state.can_redo

    def dispatch(self, action: HistoryAction) -> bool:
        """Apply ``action``; ``False`` means the state did not move."""

        previous = self._state
        self._state = apply_action(
            previous, action, max_size=self._max_size, equals=self._equals
        )
        moved = self._state is not previous
        telemetry.record_event(
            f"history.{type(action).__name__.lower()}",
            data={
                "store": self.name,
                "moved": moved,
                "past": len(self._state.past),
                "future": len(self._state.future),
            },
            logger_name=self._logger_name,
        )
        return moved

    def commit(self, value: T) -> bool:
        return self.dispatch(Commit(value))

    def undo(self) -> bool:
        return self.dispatch(Undo())

    def redo(self) -> bool:
        return self.dispatch(Redo())

    def reset(self, value: T) -> None:
        self.dispatch(Reset(value))


__all__ = ["HistoryStore", "apply_action"]
