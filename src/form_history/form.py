"""Named fields, each with its own debounced history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional

from form_history.config import HistorySettings
from form_history.controller import DebouncedHistory
from form_history.runtime import telemetry
from form_history.runtime.scheduler import Scheduler
from form_history.shortcuts.router import ShortcutRouter


@dataclass(frozen=True, slots=True)
class NumericRange:
    """Slider-style bounds; values are clamped and snapped to ``step``."""

    minimum: float
    maximum: float
    step: Optional[float] = None

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError("minimum cannot exceed maximum")
        if self.step is not None and self.step <= 0:
            raise ValueError("step must be positive")

    @property
    def effective_step(self) -> float:
        if self.step is not None:
            return self.step
        return 0.1 if self.minimum < 1 else 1

    def clamp(self, value: float) -> float:
        step = self.effective_step
        bounded = min(max(value, self.minimum), self.maximum)
        snapped = self.minimum + round((bounded - self.minimum) / step) * step
        if snapped > self.maximum:
            snapped -= step
        if isinstance(step, int) and isinstance(self.minimum, int):
            return int(snapped)
        return round(snapped, 10)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    name: str
    initial: Any
    normalize: Optional[Callable[[Any], Any]] = None
    quiet_period_ms: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("field name cannot be empty")


class FormHistory:
    """Independent histories for every field of a parameter form.

    Fields never share a stack: undoing one field leaves the others alone.
    When a router is given every field is mounted on it, so the router's
    policy decides which field a shortcut reaches.
    """

    def __init__(
        self,
        fields: Iterable[FieldSpec],
        *,
        scheduler: Scheduler,
        settings: HistorySettings | None = None,
        router: ShortcutRouter | None = None,
        logger_name: str | None = None,
    ) -> None:
        self.settings = settings or HistorySettings()
        self.router = router
        self._logger_name = logger_name
        self._fields: Dict[str, DebouncedHistory[Any]] = {}
        for field_spec in fields:
            if field_spec.name in self._fields:
                raise ValueError(f"Field '{field_spec.name}' declared twice")
            history: DebouncedHistory[Any] = DebouncedHistory.from_settings(
                field_spec.initial,
                self.settings,
                scheduler=scheduler,
                name=field_spec.name,
                normalize=field_spec.normalize,
                quiet_period_ms=field_spec.quiet_period_ms,
                logger_name=logger_name,
            )
            if router is not None:
                history.mount(router)
            self._fields[field_spec.name] = history

    def field(self, name: str) -> DebouncedHistory[Any]:
        try:
            return self._fields[name]
        except KeyError as exc:
            raise KeyError(f"Unknown field '{name}'") from exc

    __getitem__ = field

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def values(self) -> Dict[str, Any]:
        """Live value of every field."""

        return {name: history.value for name, history in self._fields.items()}

    def load_preset(self, preset: Mapping[str, Any]) -> None:
        """Reset each listed field's history to the preset value."""

        unknown = [name for name in preset if name not in self._fields]
        if unknown:
            raise KeyError(f"Preset references unknown fields {unknown}")
        with telemetry.span(
            "form::load_preset",
            logger_name=self._logger_name or "form_history.form",
            component="form",
            metadata={"fields": ",".join(preset)},
        ):
            for name, value in preset.items():
                self._fields[name].reset(value)

    def activate(self, name: str) -> DebouncedHistory[Any]:
        history = self.field(name)
        history.activate()
        return history

    def flush(self) -> list[str]:
        """Commit every pending edit; returns the fields that gained a checkpoint."""

        return [name for name, history in self._fields.items() if history.flush()]

    def close(self) -> None:
        for history in self._fields.values():
            history.close()


__all__ = ["FieldSpec", "FormHistory", "NumericRange"]
