"""Dataclasses describing key chords, shortcut actions and bindings."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

MODIFIER_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "control": "ctrl",
        "ctl": "ctrl",
        "cmd": "meta",
        "command": "meta",
        "super": "meta",
        "win": "meta",
        "option": "alt",
    }
)


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = (m.strip().lower() for m in modifiers if m.strip())
    canonical = (MODIFIER_ALIASES.get(m, m) for m in values)
    return tuple(sorted(dict.fromkeys(canonical)))


@dataclass(frozen=True, slots=True)
class KeyChord:
    """One normalized key combination, e.g. ``ctrl+z``.

    Keys are case-folded so ``Z`` and ``z`` resolve to the same chord; Shift
    only counts when it is listed as a modifier.
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", self.key.lower())
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers + (self.key,))
        return self.key

    @classmethod
    def parse(cls, text: str) -> "KeyChord":
        parts = [part for part in text.strip().split("+") if part]
        if not parts:
            raise ValueError(f"Cannot parse key chord {text!r}")
        return cls(key=parts[-1], modifiers=tuple(parts[:-1]))


@dataclass(slots=True)
class KeyEvent:
    """Host key press handed to the shortcut router."""

    key: str
    modifiers: tuple[str, ...] = ()
    default_prevented: bool = False

    @property
    def chord(self) -> KeyChord:
        return KeyChord(self.key, self.modifiers)

    def prevent_default(self) -> None:
        self.default_prevented = True

    @classmethod
    def from_flags(
        cls,
        key: str,
        *,
        ctrl: bool = False,
        meta: bool = False,
        shift: bool = False,
        alt: bool = False,
    ) -> "KeyEvent":
        flags = {"ctrl": ctrl, "meta": meta, "shift": shift, "alt": alt}
        return cls(key=key, modifiers=tuple(name for name, on in flags.items() if on))


@dataclass(frozen=True, slots=True)
class ShortcutAction:
    """Callable run against a shortcut target, returning whether it acted."""

    id: str
    handler: Callable[..., bool]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ShortcutAction id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> bool:
        return bool(self.handler(*args, **kwargs))


@dataclass(frozen=True, slots=True)
class ShortcutBinding:
    """Associates a chord with an action."""

    id: str
    chord: KeyChord
    action_id: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        if isinstance(self.chord, str):
            object.__setattr__(self, "chord", KeyChord.parse(self.chord))

    @property
    def token(self) -> str:
        return self.chord.token


__all__ = [
    "MODIFIER_ALIASES",
    "KeyChord",
    "KeyEvent",
    "ShortcutAction",
    "ShortcutBinding",
]
