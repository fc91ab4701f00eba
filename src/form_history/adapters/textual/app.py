"""Textual demo: a generation-parameters form with per-field undo/redo."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, Vertical
    from textual.widgets import Button, Footer, Header, Input, Label, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use form_history.adapters.textual.app"
    ) from exc

from form_history.config import HistorySettings
from form_history.form import FieldSpec, FormHistory, NumericRange
from form_history.runtime import telemetry
from form_history.runtime.scheduler import PollingScheduler
from form_history.shortcuts import ShortcutRouter

from .controller import TextualHistoryAdapter, TextualUIHooks

SIZE_RANGE = NumericRange(64, 2048, 64)
BATCH_SIZE_RANGE = NumericRange(1, 8)


@dataclass(frozen=True, slots=True)
class Size:
    width: int = 512
    height: int = 512


def _clamp_size(size: Size) -> Size:
    return Size(int(SIZE_RANGE.clamp(size.width)), int(SIZE_RANGE.clamp(size.height)))


def default_fields() -> tuple[FieldSpec, ...]:
    return (
        FieldSpec("prompt", ""),
        FieldSpec("negative_prompt", ""),
        # Width and height share one history, edited from two inputs.
        FieldSpec("sizing", Size(), normalize=_clamp_size),
        FieldSpec("batch_size", 4, normalize=lambda v: int(BATCH_SIZE_RANGE.clamp(v))),
        FieldSpec("seed", -1),
    )


# input id -> (field, Size attribute or None)
INPUTS: Dict[str, tuple[str, Optional[str]]] = {
    "prompt": ("prompt", None),
    "negative_prompt": ("negative_prompt", None),
    "width": ("sizing", "width"),
    "height": ("sizing", "height"),
    "batch_size": ("batch_size", None),
    "seed": ("seed", None),
}

LABELS = {
    "prompt": "Prompt",
    "negative_prompt": "Negative prompt",
    "sizing": "Width / Height",
    "batch_size": "Batch size (1-8)",
    "seed": "Seed",
}


class FormHistoryApp(App[None]):
    """Parameter form whose fields debounce edits into undo checkpoints."""

    CSS = """
	Screen {
		layout: vertical;
	}

	.field-row {
		height: auto;
		padding: 0 1;
	}

	.field-row Label {
		width: 18;
		padding: 1 0;
	}

	.field-row Input {
		width: 1fr;
	}

	.field-row Button {
		min-width: 8;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        Binding("ctrl+z", "shortcut('ctrl+z')", "Undo", priority=True),
        Binding("ctrl+y", "shortcut('ctrl+y')", "Redo", priority=True),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, settings: HistorySettings | None = None) -> None:
        super().__init__()
        self.settings = settings or HistorySettings.from_env()
        self.scheduler = PollingScheduler()
        self.router = ShortcutRouter(policy=self.settings.shortcut_policy)
        self.form = FormHistory(
            default_fields(),
            scheduler=self.scheduler,
            settings=self.settings,
            router=self.router,
        )
        self.adapter: TextualHistoryAdapter | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical():
            for name in self.form:
                with Horizontal(classes="field-row"):
                    yield Label(LABELS.get(name, name))
                    for input_id, (field_name, _attr) in INPUTS.items():
                        if field_name == name:
                            yield Input(
                                id=input_id,
                                type="text" if name.endswith("prompt") else "integer",
                            )
                    yield Button("Undo", id=f"undo-{name}", disabled=True)
                    yield Button("Redo", id=f"redo-{name}", disabled=True)
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_field=self._update_field,
            update_controls=self._update_controls,
            update_status=self._update_status,
            log=self._log_line,
        )
        self.adapter = TextualHistoryAdapter(
            self.form, self.router, hooks, scheduler=self.scheduler
        )
        self.set_interval(0.05, self.adapter.process_timeouts)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()
            self.adapter = None

    def action_shortcut(self, chord: str) -> None:
        if self.adapter:
            self.adapter.handle_textual_key(chord)

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        widget_id = event.widget.id or ""
        if widget_id in INPUTS and self.adapter:
            self.adapter.focus_field(INPUTS[widget_id][0])

    def on_input_changed(self, event: Input.Changed) -> None:
        if not self.adapter or event.input.id not in INPUTS:
            return
        field_name, attr = INPUTS[event.input.id]
        if field_name.endswith("prompt"):
            self.adapter.edit_field(field_name, event.value)
            return
        try:
            number = int(event.value)
        except ValueError:
            return
        if attr is None:
            self.adapter.edit_field(field_name, number)
        else:
            self.adapter.edit_field(
                field_name, lambda size: replace(size, **{attr: number})
            )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        kind, _, field_name = (event.button.id or "").partition("-")
        if field_name not in self.form:
            return
        history = self.form[field_name]
        if kind == "undo":
            history.undo()
        elif kind == "redo":
            history.redo()

    def _update_field(self, name: str, value: Any) -> None:
        for input_id, (field_name, attr) in INPUTS.items():
            if field_name != name:
                continue
            shown = getattr(value, attr) if attr else value
            widget = self.query_one(f"#{input_id}", Input)
            with widget.prevent(Input.Changed):
                widget.value = str(shown)

    def _update_controls(self, name: str, can_undo: bool, can_redo: bool) -> None:
        self.query_one(f"#undo-{name}", Button).disabled = not can_undo
        self.query_one(f"#redo-{name}", Button).disabled = not can_redo

    def _update_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)

    def _log_line(self, line: str) -> None:
        self.log(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the form history Textual demo.")
    parser.add_argument("--quiet-ms", type=int, help="Quiet period before an edit becomes a checkpoint")
    parser.add_argument("--max-history", type=int, help="Maximum undo depth per field")
    parser.add_argument(
        "--policy",
        choices=("active", "broadcast"),
        help="Which fields react to Ctrl+Z / Ctrl+Y",
    )
    parser.add_argument(
        "--log-preset",
        default="silent",
        help="Telemetry preset (silent, development, production)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    settings = HistorySettings.from_env().with_overrides(
        quiet_period_ms=args.quiet_ms,
        max_history_size=args.max_history,
        shortcut_policy=args.policy,
    )
    FormHistoryApp(settings).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
