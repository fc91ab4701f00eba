import pytest

from form_history.runtime import telemetry


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="silent")


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_span_reraises_and_keeps_logger_cached() -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("test::failing", component=True, metadata={"field": "prompt"}):
            raise RuntimeError("boom")

    assert telemetry.get_logger() is telemetry.get_logger()
