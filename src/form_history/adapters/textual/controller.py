"""UI-agnostic bridge between a ``FormHistory`` and Textual widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List

from form_history.controller import HistoryChange
from form_history.form import FormHistory
from form_history.history import structural_equal
from form_history.runtime.scheduler import PollingScheduler
from form_history.shortcuts import KeyChord, KeyEvent, ShortcutRouter


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the adapter uses to update widgets."""

    update_field: Callable[[str, Any], None]
    update_controls: Callable[[str, bool, bool], None] = _noop
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualHistoryAdapter:
    """Relays history changes to hooks and key presses to the router."""

    def __init__(
        self,
        form: FormHistory,
        router: ShortcutRouter,
        hooks: TextualUIHooks,
        *,
        scheduler: PollingScheduler | None = None,
    ) -> None:
        self.form = form
        self.router = router
        self.hooks = hooks
        self.scheduler = scheduler
        self._unsubscribers: List[Callable[[], None]] = []
        for name in form:
            self._unsubscribers.append(form[name].subscribe(self._on_change))
            self._refresh_field(name)

    def handle_textual_key(
        self, key: str, *, modifiers: Iterable[str] = ()
    ) -> bool:
        """Dispatch a key through the router; ``True`` if it was a shortcut.

        ``key`` may be a bare key with separate ``modifiers`` or a Textual
        style chord such as ``"ctrl+z"``.
        """

        chord = KeyChord.parse(key) if "+" in key else KeyChord(key)
        mods = chord.modifiers + tuple(modifiers)
        event = KeyEvent(key=chord.key, modifiers=mods)
        moved = self.router.dispatch(event)
        self._log("key ->", chord=event.chord.token, handled=event.default_prevented, moved=moved)
        if event.default_prevented and not moved:
            binding = self.router.resolve(event.chord)
            if binding is not None:
                self.hooks.update_status(f"{binding.action_id}: nothing to do")
        return event.default_prevented

    def focus_field(self, name: str) -> None:
        self.form.activate(name)
        self.hooks.update_status(f"editing {name}")
        self._log("focus ->", field=name)

    def edit_field(self, name: str, value: Any) -> Any:
        """Forward a widget edit; pushes the value back when normalization changed it."""

        produced: List[Any] = []

        def _record(current: Any) -> Any:
            raw = value(current) if callable(value) else value
            produced.append(raw)
            return raw

        history = self.form[name]
        live = history.set(_record)
        if produced and not structural_equal(produced[0], live):
            self.hooks.update_field(name, live)
        return live

    def process_timeouts(self) -> int:
        if self.scheduler is None:
            return 0
        return self.scheduler.process_due()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.form.close()

    def _on_change(self, change: HistoryChange[Any]) -> None:
        # Widgets already show the value they just produced; edit_field
        # pushes normalized values back itself.
        if change.kind != "set":
            self.hooks.update_field(change.field, change.value)
        self.hooks.update_controls(change.field, change.can_undo, change.can_redo)
        if change.kind in {"commit", "undo", "redo", "reset"}:
            self.hooks.update_status(f"{change.field}:{change.kind}")
        self._log(
            "change ->",
            field=change.field,
            kind=change.kind,
            value=change.value,
            can_undo=change.can_undo,
            can_redo=change.can_redo,
        )

    def _refresh_field(self, name: str) -> None:
        history = self.form[name]
        self.hooks.update_field(name, history.value)
        self.hooks.update_controls(name, history.can_undo, history.can_redo)

    def _log(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "active": self.router.active.name if self.router.active else None,
            "policy": self.router.policy,
        }
        snapshot.update(fields)
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualHistoryAdapter", "TextualUIHooks"]
