import pytest

from form_history import HistorySettings


def test_defaults() -> None:
    settings = HistorySettings()

    assert settings.max_history_size == 25
    assert settings.quiet_period_ms == 300
    assert settings.shortcut_policy == "active"
    assert settings.equality == "structural"


def test_from_env_reads_prefixed_values() -> None:
    settings = HistorySettings.from_env(
        {
            "FORM_HISTORY_MAX_HISTORY": "10",
            "FORM_HISTORY_QUIET_MS": "500",
            "FORM_HISTORY_SHORTCUT_POLICY": "Broadcast",
            "FORM_HISTORY_EQUALITY": "serialized",
        }
    )

    assert settings == HistorySettings(
        max_history_size=10,
        quiet_period_ms=500,
        shortcut_policy="broadcast",
        equality="serialized",
    )


def test_from_env_falls_back_on_blank_values() -> None:
    assert HistorySettings.from_env({"FORM_HISTORY_QUIET_MS": " "}) == HistorySettings()


@pytest.mark.parametrize(
    "environ",
    [
        {"FORM_HISTORY_QUIET_MS": "soon"},
        {"FORM_HISTORY_MAX_HISTORY": "0"},
        {"FORM_HISTORY_SHORTCUT_POLICY": "focused"},
        {"FORM_HISTORY_EQUALITY": "identity"},
    ],
)
def test_from_env_rejects_invalid_values(environ: dict) -> None:
    with pytest.raises(ValueError):
        HistorySettings.from_env(environ)


def test_with_overrides_skips_none() -> None:
    settings = HistorySettings().with_overrides(quiet_period_ms=None, max_history_size=5)

    assert settings.quiet_period_ms == 300
    assert settings.max_history_size == 5
