"""Registry storing shortcut actions and their chord bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from form_history.runtime.telemetry import span

from .models import KeyChord, ShortcutAction, ShortcutBinding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    chords: tuple[str, ...]


class ShortcutConflictError(RuntimeError):
    """Raised when a binding's chord is already taken."""

    def __init__(self, binding: ShortcutBinding, conflicts: Iterable[ShortcutBinding]):
        conflicts_tuple = tuple(conflicts)
        super().__init__(
            f"Shortcut '{binding.id}' ({binding.token}) conflicts with "
            f"{[b.id for b in conflicts_tuple]}"
        )
        self.binding = binding
        self.conflicts = conflicts_tuple


class ShortcutRegistry:
    """Owns shortcut actions and the chord index used for lookups."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ShortcutAction] = {}
        self._bindings: Dict[str, ShortcutBinding] = {}
        self._by_token: Dict[str, set[str]] = {}
        self._logger_name = logger_name

    def get_action(self, action_id: str) -> ShortcutAction:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> ShortcutBinding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(
        self, action: ShortcutAction, *, replace: bool = False
    ) -> ShortcutAction:
        if not replace and action.id in self._actions:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(
        self, binding: ShortcutBinding, *, replace: bool = False
    ) -> ShortcutBinding:
        with span(
            "shortcuts::register_binding",
            logger_name=self._logger_name,
            component="shortcuts",
            metadata={"binding_id": binding.id, "chord": binding.token},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            conflicts = [
                existing
                for existing in self._bindings_for(binding.token)
                if existing.id != binding.id
            ]
            if conflicts and not replace:
                handle.add_metadata("conflicts", ",".join(c.id for c in conflicts))
                raise ShortcutConflictError(binding, conflicts)

            if replace:
                for conflict in conflicts:
                    self._drop(conflict)
            existing = self._bindings.get(binding.id)
            if existing is not None:
                if not replace:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                self._drop(existing)

            self._bindings[binding.id] = binding
            self._by_token.setdefault(binding.token, set()).add(binding.id)
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[ShortcutBinding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        self._drop(binding)
        return binding

    def lookup(self, chord: KeyChord | str) -> Optional[ShortcutBinding]:
        token = chord.token if isinstance(chord, KeyChord) else KeyChord.parse(chord).token
        matches = self._bindings_for(token)
        return matches[0] if matches else None

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            chords=tuple(sorted(self._by_token)),
        )

    def _bindings_for(self, token: str) -> list[ShortcutBinding]:
        return [self._bindings[bid] for bid in self._by_token.get(token, ())]

    def _drop(self, binding: ShortcutBinding) -> None:
        self._bindings.pop(binding.id, None)
        bucket = self._by_token.get(binding.token)
        if bucket is None:
            return
        bucket.discard(binding.id)
        if not bucket:
            self._by_token.pop(binding.token, None)


__all__ = [
    "RegistryStats",
    "ShortcutConflictError",
    "ShortcutRegistry",
]
