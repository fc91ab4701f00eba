"""Process-wide shortcut router forwarding chords to field histories."""

from __future__ import annotations

from typing import List, Optional

from form_history.config import SHORTCUT_POLICIES
from form_history.runtime import telemetry

from .defaults import HistoryTarget, load_default_shortcuts
from .models import KeyChord, KeyEvent, ShortcutBinding
from .registry import ShortcutRegistry


class ShortcutRouter:
    """Single key listener shared by every mounted history controller.

    ``policy="active"`` sends a chord to the last activated target only (or
    to the sole attached target). ``policy="broadcast"`` sends it to every
    attached target, so one press can move several independent fields.
    """

    def __init__(
        self,
        registry: ShortcutRegistry | None = None,
        *,
        policy: str = "active",
        logger_name: str | None = None,
    ) -> None:
        if policy not in SHORTCUT_POLICIES:
            raise ValueError(f"Unknown shortcut policy '{policy}'")
        if registry is None:
            registry = load_default_shortcuts(ShortcutRegistry(logger_name=logger_name))
        self.registry = registry
        self.policy = policy
        self._logger_name = logger_name or "form_history.shortcuts"
        self._targets: List[HistoryTarget] = []
        self._active: Optional[HistoryTarget] = None

    @property
    def targets(self) -> tuple[HistoryTarget, ...]:
        return tuple(self._targets)

    @property
    def active(self) -> Optional[HistoryTarget]:
        return self._active

    def attach(self, target: HistoryTarget) -> None:
        if target not in self._targets:
            self._targets.append(target)

    def detach(self, target: HistoryTarget) -> None:
        if target in self._targets:
            self._targets.remove(target)
        if self._active is target:
            self._active = None

    def activate(self, target: HistoryTarget) -> None:
        if target not in self._targets:
            raise KeyError(f"Target '{target.name}' is not attached")
        self._active = target

    def dispatch(self, event: KeyEvent) -> bool:
        """Run the bound action; ``True`` when some target's history moved.

        Any recognized chord has its default action suppressed, even when
        the action itself is gated off by ``can_undo``/``can_redo``.
        """

        binding = self.resolve(event.chord)
        if binding is None:
            return False
        event.prevent_default()
        action = self.registry.get_action(binding.action_id)

        with telemetry.span(
            "shortcuts::dispatch",
            logger_name=self._logger_name,
            component="shortcuts",
            metadata={"chord": binding.token, "action": action.id, "policy": self.policy},
        ) as handle:
            recipients = self._recipients()
            handle.add_metadata("targets", ",".join(t.name for t in recipients))
            moved = [action(target) for target in recipients]
            handle.add_metadata("moved", sum(moved))
        return any(moved)

    def resolve(self, chord: KeyChord) -> Optional[ShortcutBinding]:
        """Binding a chord triggers, or ``None`` when it is not a shortcut."""

        binding = self.registry.lookup(chord)
        if binding is not None or "shift" in chord.modifiers:
            return binding
        # Extra modifiers alongside ctrl or meta still reach the plain chord.
        for modifier in ("ctrl", "meta"):
            if modifier in chord.modifiers and len(chord.modifiers) > 1:
                binding = self.registry.lookup(KeyChord(chord.key, (modifier,)))
                if binding is not None:
                    return binding
        return None

    def _recipients(self) -> list[HistoryTarget]:
        if self.policy == "broadcast":
            return list(self._targets)
        if self._active is not None:
            return [self._active]
        if len(self._targets) == 1:
            return [self._targets[0]]
        return []


__all__ = ["ShortcutRouter"]
