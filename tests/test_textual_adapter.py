from __future__ import annotations

from typing import Any, Dict, List, Tuple

from form_history import FieldSpec, FormHistory, HistorySettings, NumericRange
from form_history.adapters.textual import TextualHistoryAdapter, TextualUIHooks
from form_history.runtime.scheduler import PollingScheduler
from form_history.shortcuts import ShortcutRouter


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms / 1000.0


class Recorder:
    def __init__(self) -> None:
        self.fields: Dict[str, Any] = {}
        self.controls: Dict[str, Tuple[bool, bool]] = {}
        self.statuses: List[str] = []
        self.logs: List[str] = []

    def hooks(self) -> TextualUIHooks:
        return TextualUIHooks(
            update_field=lambda name, value: self.fields.__setitem__(name, value),
            update_controls=lambda name, u, r: self.controls.__setitem__(name, (u, r)),
            update_status=self.statuses.append,
            log=self.logs.append,
        )


def make_adapter(
    policy: str = "active",
) -> Tuple[TextualHistoryAdapter, Recorder, FakeClock]:
    clock = FakeClock()
    scheduler = PollingScheduler(clock=clock)
    settings = HistorySettings(quiet_period_ms=300, shortcut_policy=policy)
    router = ShortcutRouter(policy=policy)
    form = FormHistory(
        (FieldSpec("prompt", ""), FieldSpec("negative_prompt", "blurry")),
        scheduler=scheduler,
        settings=settings,
        router=router,
    )
    recorder = Recorder()
    adapter = TextualHistoryAdapter(form, router, recorder.hooks(), scheduler=scheduler)
    return adapter, recorder, clock


def test_adapter_pushes_initial_state() -> None:
    _adapter, recorder, _clock = make_adapter()

    assert recorder.fields == {"prompt": "", "negative_prompt": "blurry"}
    assert recorder.controls["prompt"] == (False, False)


def test_adapter_commits_on_tick_and_enables_undo() -> None:
    adapter, recorder, clock = make_adapter()
    adapter.focus_field("prompt")

    adapter.edit_field("prompt", "a castle")
    assert adapter.process_timeouts() == 0
    clock.advance(301)
    assert adapter.process_timeouts() == 1

    assert recorder.controls["prompt"] == (True, False)
    assert "prompt:commit" in recorder.statuses


def test_ctrl_z_chord_restores_widget_value() -> None:
    adapter, recorder, clock = make_adapter()
    adapter.focus_field("prompt")
    adapter.edit_field("prompt", "a castle")
    clock.advance(301)
    adapter.process_timeouts()

    assert adapter.handle_textual_key("ctrl+z") is True

    assert recorder.fields["prompt"] == ""
    assert recorder.controls["prompt"] == (False, True)

    assert adapter.handle_textual_key("y", modifiers=("ctrl",)) is True
    assert recorder.fields["prompt"] == "a castle"


def test_gated_chord_reports_nothing_to_do() -> None:
    adapter, recorder, _clock = make_adapter()
    adapter.focus_field("negative_prompt")

    assert adapter.handle_textual_key("ctrl+y") is True

    assert recorder.statuses[-1] == "history.redo: nothing to do"


def test_plain_keys_are_not_consumed() -> None:
    adapter, recorder, _clock = make_adapter()

    assert adapter.handle_textual_key("a") is False
    assert any(line.startswith("key ->") for line in recorder.logs)


def test_close_unsubscribes_and_closes_form() -> None:
    adapter, recorder, clock = make_adapter()
    adapter.edit_field("prompt", "late")
    adapter.close()
    before = dict(recorder.controls)

    clock.advance(301)
    adapter.process_timeouts()

    assert recorder.controls == before
    assert adapter.form["prompt"].history.present == ""


def test_normalized_edit_is_pushed_back_to_widget() -> None:
    clock = FakeClock()
    scheduler = PollingScheduler(clock=clock)
    router = ShortcutRouter()
    batch_range = NumericRange(1, 8)
    form = FormHistory(
        (FieldSpec("batch_size", 4, normalize=batch_range.clamp),),
        scheduler=scheduler,
        router=router,
    )
    recorder = Recorder()
    adapter = TextualHistoryAdapter(form, router, recorder.hooks(), scheduler=scheduler)
    recorder.fields.clear()

    assert adapter.edit_field("batch_size", 6) == 6
    assert recorder.fields == {}

    assert adapter.edit_field("batch_size", lambda current: current * 10) == 8
    assert recorder.fields == {"batch_size": 8}


def test_extra_modifier_chord_is_consumed() -> None:
    adapter, recorder, _clock = make_adapter()
    adapter.focus_field("prompt")

    assert adapter.handle_textual_key("ctrl+alt+z") is True

    assert recorder.statuses[-1] == "history.undo: nothing to do"


def test_edit_after_close_leaves_widgets_alone() -> None:
    adapter, recorder, _clock = make_adapter()
    adapter.close()
    recorder.fields.clear()

    assert adapter.edit_field("prompt", "late") == ""
    assert recorder.fields == {}
