from __future__ import annotations

from typing import Any, Tuple

import pytest

from form_history import DebouncedHistory
from form_history.runtime.scheduler import PollingScheduler
from form_history.shortcuts import (
    KeyChord,
    KeyEvent,
    ShortcutAction,
    ShortcutBinding,
    ShortcutConflictError,
    ShortcutRegistry,
    ShortcutRouter,
    load_default_shortcuts,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_field(
    name: str, initial: Any, scheduler: PollingScheduler, router: ShortcutRouter
) -> DebouncedHistory[Any]:
    history: DebouncedHistory[Any] = DebouncedHistory(
        initial, scheduler=scheduler, quiet_period_ms=100, name=name
    )
    history.mount(router)
    return history


def make_setup(policy: str = "active") -> Tuple[ShortcutRouter, PollingScheduler, FakeClock]:
    clock = FakeClock()
    return ShortcutRouter(policy=policy), PollingScheduler(clock=clock), clock


def commit(history: DebouncedHistory[Any], value: Any) -> None:
    history.set(value)
    history.flush()


def test_key_chord_normalization() -> None:
    assert KeyChord("Z", ("Control",)).token == "ctrl+z"
    assert KeyChord("z", ("cmd",)).token == "meta+z"
    assert KeyChord.parse("shift+ctrl+Z").token == "ctrl+shift+z"
    assert KeyEvent.from_flags("y", meta=True).chord.token == "meta+y"
    with pytest.raises(ValueError):
        KeyChord.parse("+")


def test_registry_conflicts_and_replace() -> None:
    registry = load_default_shortcuts(ShortcutRegistry())
    duplicate = ShortcutBinding("undo.other", KeyChord("z", ("ctrl",)), "history.redo")

    with pytest.raises(ShortcutConflictError):
        registry.register_binding(duplicate)

    registry.register_binding(duplicate, replace=True)

    assert registry.lookup("ctrl+z") == duplicate
    assert registry.stats().binding_count == 4


def test_registry_rejects_unknown_action() -> None:
    registry = ShortcutRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(ShortcutBinding("x", "ctrl+x", "missing"))


def test_registry_unregister_and_include_filter() -> None:
    registry = load_default_shortcuts(
        ShortcutRegistry(), include_bindings=("undo.ctrl", "redo.ctrl")
    )

    assert registry.stats().chords == ("ctrl+y", "ctrl+z")
    assert registry.unregister_binding("undo.ctrl") is not None
    assert registry.unregister_binding("undo.ctrl") is None
    assert registry.lookup("ctrl+z") is None


def test_custom_action_dispatches_through_router() -> None:
    registry = load_default_shortcuts(ShortcutRegistry())
    registry.register_action(
        ShortcutAction("history.flush", lambda target: target.flush())
    )
    registry.register_binding(ShortcutBinding("flush.ctrl", "ctrl+s", "history.flush"))
    router = ShortcutRouter(registry)
    prompt = make_field("prompt", "", PollingScheduler(clock=FakeClock()), router)
    prompt.set("draft")

    assert router.dispatch(KeyEvent("s", ("ctrl",))) is True
    assert prompt.history.present == "draft"


def test_ctrl_z_undoes_single_mounted_field() -> None:
    router, scheduler, _clock = make_setup()
    prompt = make_field("prompt", "", scheduler, router)
    commit(prompt, "cat")

    event = KeyEvent("z", ("ctrl",))
    assert router.dispatch(event) is True

    assert event.default_prevented is True
    assert prompt.value == ""


def test_meta_and_uppercase_keys_are_recognized() -> None:
    router, scheduler, _clock = make_setup()
    prompt = make_field("prompt", "", scheduler, router)
    commit(prompt, "cat")

    router.dispatch(KeyEvent("Z", ("meta",)))
    assert prompt.value == ""
    router.dispatch(KeyEvent("Y", ("meta",)))
    assert prompt.value == "cat"


@pytest.mark.parametrize("modifiers", [("ctrl", "meta"), ("ctrl", "alt"), ("meta", "alt")])
def test_extra_modifiers_still_trigger_undo(modifiers: Tuple[str, ...]) -> None:
    router, scheduler, _clock = make_setup()
    prompt = make_field("prompt", "", scheduler, router)
    commit(prompt, "cat")

    event = KeyEvent("z", modifiers)

    assert router.dispatch(event) is True
    assert event.default_prevented is True
    assert prompt.value == ""


def test_shift_with_extra_modifiers_is_ignored() -> None:
    router, scheduler, _clock = make_setup()
    prompt = make_field("prompt", "", scheduler, router)
    commit(prompt, "cat")

    event = KeyEvent("z", ("ctrl", "alt", "shift"))

    assert router.dispatch(event) is False
    assert event.default_prevented is False
    assert prompt.value == "cat"


def test_shift_disables_shortcut() -> None:
    router, scheduler, _clock = make_setup()
    prompt = make_field("prompt", "", scheduler, router)
    commit(prompt, "cat")

    event = KeyEvent("z", ("ctrl", "shift"))

    assert router.dispatch(event) is False
    assert event.default_prevented is False
    assert prompt.value == "cat"


def test_gated_shortcut_still_prevents_default() -> None:
    router, scheduler, _clock = make_setup()
    make_field("prompt", "", scheduler, router)

    event = KeyEvent("y", ("ctrl",))

    assert router.dispatch(event) is False
    assert event.default_prevented is True


def test_unrelated_keys_pass_through() -> None:
    router, scheduler, _clock = make_setup()
    make_field("prompt", "", scheduler, router)

    event = KeyEvent("a", ("ctrl",))

    assert router.dispatch(event) is False
    assert event.default_prevented is False


def test_active_policy_only_moves_focused_field() -> None:
    router, scheduler, _clock = make_setup("active")
    prompt = make_field("prompt", "", scheduler, router)
    batch = make_field("batch_size", 4, scheduler, router)
    commit(prompt, "cat")
    commit(batch, 6)

    assert router.dispatch(KeyEvent("z", ("ctrl",))) is False

    batch.activate()
    router.dispatch(KeyEvent("z", ("ctrl",)))

    assert batch.value == 4
    assert prompt.value == "cat"


def test_broadcast_policy_moves_every_field() -> None:
    router, scheduler, _clock = make_setup("broadcast")
    prompt = make_field("prompt", "", scheduler, router)
    batch = make_field("batch_size", 4, scheduler, router)
    commit(prompt, "cat")

    assert router.dispatch(KeyEvent("z", ("ctrl",))) is True

    assert prompt.value == ""
    assert batch.value == 4


def test_closed_field_stops_receiving_shortcuts() -> None:
    router, scheduler, _clock = make_setup()
    prompt = make_field("prompt", "", scheduler, router)
    commit(prompt, "cat")
    prompt.activate()

    prompt.close()

    assert router.targets == ()
    assert router.active is None
    assert router.dispatch(KeyEvent("z", ("ctrl",))) is False
    assert prompt.value == "cat"


def test_router_validates_policy_and_activation() -> None:
    with pytest.raises(ValueError):
        ShortcutRouter(policy="focused")

    router, scheduler, _clock = make_setup()
    stray: DebouncedHistory[Any] = DebouncedHistory("", scheduler=scheduler, name="stray")
    with pytest.raises(KeyError):
        router.activate(stray)
    with pytest.raises(RuntimeError):
        stray.activate()
