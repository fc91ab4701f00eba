"""Immutable history snapshot and the actions that transform it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Tuple, TypeVar, Union

T = TypeVar("T")

MAX_HISTORY_SIZE = 25


@dataclass(frozen=True, slots=True)
class HistoryState(Generic[T]):
    """Committed checkpoints around ``present``.

    ``past`` is oldest first, ``future`` is nearest-redo first.
    """

    present: T
    past: Tuple[T, ...] = ()
    future: Tuple[T, ...] = ()

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    @classmethod
    def initial(cls, value: T) -> "HistoryState[T]":
        return cls(present=value)


@dataclass(frozen=True, slots=True)
class Commit(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Undo:
    pass


@dataclass(frozen=True, slots=True)
class Redo:
    pass


@dataclass(frozen=True, slots=True)
class Reset(Generic[T]):
    value: T


HistoryAction = Union[Commit, Undo, Redo, Reset]

__all__ = [
    "MAX_HISTORY_SIZE",
    "HistoryState",
    "HistoryAction",
    "Commit",
    "Undo",
    "Redo",
    "Reset",
]
