"""Debounced commit controller sitting between widgets and a history store."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Callable, Generic, List, Optional, TypeVar, Union

from form_history.config import DEFAULT_QUIET_PERIOD_MS, HistorySettings
from form_history.history import (
    MAX_HISTORY_SIZE,
    EqualityFn,
    HistoryState,
    HistoryStore,
    resolve_equality,
    structural_equal,
)
from form_history.runtime import telemetry
from form_history.runtime.scheduler import ScheduledTask, Scheduler
from form_history.shortcuts.router import ShortcutRouter

T = TypeVar("T")

Updater = Callable[[T], T]


@dataclass(frozen=True, slots=True)
class HistoryChange(Generic[T]):
    """Notification sent to subscribers after the live value or stack moves."""

    kind: str  # set | commit | undo | redo | reset
    field: str
    value: T
    can_undo: bool
    can_redo: bool


class DebouncedHistory(Generic[T]):
    """Live value plus a quiet-period timer in front of a ``HistoryStore``.

    Every ``set`` shows the new value immediately and restarts the quiet
    period; only an edit that survives the whole period is committed as a
    checkpoint. Undo, redo and reset discard a pending edit before touching
    the store. All widgets editing the same field should share one instance.
    """

    def __init__(
        self,
        initial: T,
        *,
        scheduler: Scheduler,
        quiet_period_ms: int = DEFAULT_QUIET_PERIOD_MS,
        max_size: int = MAX_HISTORY_SIZE,
        equals: EqualityFn = structural_equal,
        normalize: Optional[Callable[[T], T]] = None,
        name: str = "field",
        logger_name: str | None = None,
    ) -> None:
        if quiet_period_ms <= 0:
            raise ValueError("quiet_period_ms must be positive")
        self.name = name
        self._scheduler = scheduler
        self._quiet_period_ms = quiet_period_ms
        self._equals = equals
        self._normalize = normalize
        self._logger_name = logger_name or "form_history.controller"

        initial = self._coerce(initial)
        self._store: HistoryStore[T] = HistoryStore(
            initial,
            max_size=max_size,
            equals=equals,
            name=name,
            logger_name=self._logger_name,
        )
        self._live: T = initial
        self._timer: Optional[ScheduledTask] = None
        self._generation = 0
        self._router: Optional[ShortcutRouter] = None
        self._subscribers: List[Callable[[HistoryChange[T]], None]] = []
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        initial: T,
        settings: HistorySettings,
        *,
        scheduler: Scheduler,
        name: str = "field",
        normalize: Optional[Callable[[T], T]] = None,
        quiet_period_ms: int | None = None,
        logger_name: str | None = None,
    ) -> "DebouncedHistory[T]":
        return cls(
            initial,
            scheduler=scheduler,
            quiet_period_ms=quiet_period_ms or settings.quiet_period_ms,
            max_size=settings.max_history_size,
            equals=resolve_equality(settings.equality),
            normalize=normalize,
            name=name,
            logger_name=logger_name,
        )

    # -- read side -----------------------------------------------------

    @property
    def value(self) -> T:
        return self._live

    @property
    def history(self) -> HistoryState[T]:
        return self._store.state

    @property
    def can_undo(self) -> bool:
        return self._store.can_undo

    @property
    def can_redo(self) -> bool:
        return self._store.can_redo

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def quiet_period_ms(self) -> int:
        return self._quiet_period_ms

    # -- edits -----------------------------------------------------------

    def set(self, value_or_updater: Union[T, Updater[T]]) -> T:
        """Show a new live value and restart the quiet period.

        A callable is treated as an updater and receives the current live
        value, so queued updates never read a stale value. After ``close``
        the edit is dropped and the current live value is returned.
        """

        if self._closed:
            telemetry.record_event(
                "history.closed_edit", data={"field": self.name}, logger_name=self._logger_name
            )
            return self._live
        if callable(value_or_updater):
            next_value = value_or_updater(self._live)
        else:
            next_value = value_or_updater
        self._live = self._coerce(next_value)

        self._cancel_pending("superseded")
        self._generation += 1
        self._timer = self._scheduler.call_later(
            self._quiet_period_ms, partial(self._on_quiet_period, self._generation)
        )
        self._notify("set")
        return self._live

    def flush(self) -> bool:
        """Commit a pending edit now instead of waiting out the quiet period."""

        if self._timer is None:
            return False
        self._timer.cancel()
        self._timer = None
        return self._commit_live()

    def undo(self) -> bool:
        return self._navigate("undo", self._store.undo)

    def redo(self) -> bool:
        return self._navigate("redo", self._store.redo)

    def reset(self, value: T) -> None:
        """Replace the whole history, e.g. when a preset is loaded."""

        self._cancel_pending("reset")
        value = self._coerce(value)
        self._store.reset(value)
        self._live = value
        self._notify("reset")

    # -- wiring ----------------------------------------------------------

    def subscribe(
        self, callback: Callable[[HistoryChange[T]], None]
    ) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def mount(self, router: ShortcutRouter) -> None:
        """Start answering undo/redo shortcuts routed through ``router``."""

        if self._router is not None and self._router is not router:
            self._router.detach(self)
        router.attach(self)
        self._router = router

    def activate(self) -> None:
        if self._router is None:
            raise RuntimeError(f"History '{self.name}' is not mounted")
        self._router.activate(self)

    def close(self) -> None:
        """Cancel the pending commit and stop listening for shortcuts."""

        if self._closed:
            return
        self._cancel_pending("closed")
        if self._router is not None:
            self._router.detach(self)
            self._router = None
        self._closed = True
        telemetry.record_event(
            "history.closed", data={"field": self.name}, logger_name=self._logger_name
        )

    def __enter__(self) -> "DebouncedHistory[T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- internals -------------------------------------------------------

    def _coerce(self, value: T) -> T:
        if self._normalize is None:
            return value
        return self._normalize(value)

    def _on_quiet_period(self, generation: int) -> None:
        if generation != self._generation or self._timer is None:
            return
        self._timer = None
        if self._closed:
            return
        self._commit_live()

    def _commit_live(self) -> bool:
        moved = self._store.commit(self._live)
        if moved:
            self._notify("commit")
        return moved

    def _navigate(self, kind: str, step: Callable[[], bool]) -> bool:
        had_pending = self._timer is not None
        self._cancel_pending(kind)
        previous = self._live
        moved = step()
        self._live = self._store.present
        if moved or (had_pending and not self._equals(previous, self._live)):
            self._notify(kind)
        return moved

    def _cancel_pending(self, reason: str) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        telemetry.record_event(
            "history.pending_discarded",
            data={"field": self.name, "reason": reason},
            logger_name=self._logger_name,
        )

    def _notify(self, kind: str) -> None:
        change = HistoryChange(
            kind=kind,
            field=self.name,
            value=self._live,
            can_undo=self.can_undo,
            can_redo=self.can_redo,
        )
        for callback in list(self._subscribers):
            callback(change)


__all__ = ["DebouncedHistory", "HistoryChange", "Updater"]
