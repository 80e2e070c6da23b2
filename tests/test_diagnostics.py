from __future__ import annotations

import logging

import pytest

from streamsmith.diagnostics import LoggingEmitter, NullEmitter, format_event_message
from streamsmith.exceptions import MathTypesettingError, exception_hint, exception_messages
from streamsmith.ui.cli.state import CLIState, CliEmitter, bind_cli_state


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.ERROR):
        emitter.error("boom")
    assert any(record.message == "boom" for record in caplog.records)
    assert emitter.debug_enabled is True


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.INFO):
        emitter.event("math_fallback", {"latex": "\\x", "display": True, "error": "bad"})
    assert any(
        record.message == "Math fallback (display) for '\\x': bad" for record in caplog.records
    )


def test_format_event_message() -> None:
    message = format_event_message("stream_frame_unstable", {"index": 3, "size": 48})
    assert message == "Frame 3 (48 chars) changed when re-normalized"
    assert format_event_message("unknown", {}) is None


def test_exception_hint_prefers_root_cause() -> None:
    try:
        try:
            raise ValueError("Unknown macro \\foo")
        except ValueError as exc:
            raise MathTypesettingError("\\foo", "Unable to typeset") from exc
    except MathTypesettingError as error:
        assert error.latex == "\\foo"
        assert exception_messages(error) == ["Unable to typeset", "Unknown macro \\foo"]
        assert exception_hint(error) == "Unknown macro \\foo"


def test_cli_emitter_prints_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    state = bind_cli_state(CLIState(verbosity=1))
    emitter = CliEmitter(state)

    emitter.warning("Heads up", exc=None)
    emitter.error("Boom", exc=None)
    emitter.event("stream_frame_unstable", {"index": 1, "size": 10})

    captured = capsys.readouterr()
    assert "warning: Heads up" in captured.err
    assert "error: Boom" in captured.err
    assert "Frame 1 (10 chars) changed when re-normalized" in captured.err


def test_cli_emitter_logs_events_when_quiet(
    caplog: pytest.LogCaptureFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    emitter = CliEmitter(bind_cli_state(CLIState()))
    with caplog.at_level(logging.INFO):
        emitter.event("math_fallback", {"latex": "\\x", "display": False, "error": "bad"})

    assert "Math fallback" not in capsys.readouterr().err
    assert any(record.message.startswith("Math fallback") for record in caplog.records)
