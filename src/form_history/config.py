"""Settings shared by every history controller in a host."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from form_history.history.equality import EQUALITY_STRATEGIES
from form_history.history.state import MAX_HISTORY_SIZE

ENV_PREFIX = "FORM_HISTORY_"

DEFAULT_QUIET_PERIOD_MS = 300
SHORTCUT_POLICIES = ("active", "broadcast")


@dataclass(frozen=True, slots=True)
class HistorySettings:
    max_history_size: int = MAX_HISTORY_SIZE
    quiet_period_ms: int = DEFAULT_QUIET_PERIOD_MS
    shortcut_policy: str = "active"
    equality: str = "structural"

    def __post_init__(self) -> None:
        if self.max_history_size <= 0:
            raise ValueError("max_history_size must be positive")
        if self.quiet_period_ms <= 0:
            raise ValueError("quiet_period_ms must be positive")
        if self.shortcut_policy not in SHORTCUT_POLICIES:
            raise ValueError(
                f"Unknown shortcut policy '{self.shortcut_policy}' "
                f"(expected one of {SHORTCUT_POLICIES})"
            )
        if self.equality not in EQUALITY_STRATEGIES:
            raise ValueError(f"Unknown equality strategy '{self.equality}'")

    def with_overrides(self, **changes: object) -> "HistorySettings":
        """Copy with ``changes`` applied, ignoring ``None`` values."""

        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HistorySettings":
        env = os.environ if environ is None else environ

        def _int(name: str, fallback: int) -> int:
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw is None or not raw.strip():
                return fallback
            try:
                return int(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc

        return cls(
            max_history_size=_int("MAX_HISTORY", MAX_HISTORY_SIZE),
            quiet_period_ms=_int("QUIET_MS", DEFAULT_QUIET_PERIOD_MS),
            shortcut_policy=env.get(f"{ENV_PREFIX}SHORTCUT_POLICY", "active").lower(),
            equality=env.get(f"{ENV_PREFIX}EQUALITY", "structural").lower(),
        )


__all__ = [
    "DEFAULT_QUIET_PERIOD_MS",
    "SHORTCUT_POLICIES",
    "HistorySettings",
]
