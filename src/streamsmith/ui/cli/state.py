"""Per-invocation CLI state and console reporting."""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any

import click
import typer

from streamsmith.config import PipelineConfig
from streamsmith.diagnostics import LoggingEmitter, format_event_message


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "CliEmitter",
    "bind_cli_state",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Verbosity, traceback switch and pipeline config for one invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    config: PipelineConfig = field(default_factory=PipelineConfig)
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        from rich.console import Console

        if self._console is None or self._console.file is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        from rich.console import Console

        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


_CONTEXT_TYPES = (typer.Context, click.Context)
_STATE_VAR: ContextVar[CLIState | None] = ContextVar("streamsmith_cli_state", default=None)


def bind_cli_state(state: CLIState, ctx: typer.Context | click.Context | None = None) -> CLIState:
    """Make ``state`` the active state, attaching it to ``ctx`` when given."""
    if ctx is not None:
        ctx.obj = state
    _STATE_VAR.set(state)
    return state


def get_cli_state(
    ctx: typer.Context | click.Context | None = None,
    *,
    create: bool = True,
) -> CLIState:
    """Return the state bound to ``ctx`` or its parents, else the active one."""
    current: Any = ctx
    while isinstance(current, _CONTEXT_TYPES):
        if isinstance(current.obj, CLIState):
            return current.obj
        current = getattr(current, "parent", None)

    state = _STATE_VAR.get(None)
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = bind_cli_state(CLIState())
    return state


def _render(level: str, message: str, exception: BaseException | None) -> None:
    from rich.text import Text

    state = get_cli_state()
    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        lines = [f"type: {type(exception).__name__}"]
        cause = exception.__cause__
        while cause is not None and state.verbosity >= 2:
            lines.append(f"caused by {type(cause).__name__}: {cause}")
            cause = cause.__cause__
        text.append("\n" + "\n".join(lines), style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    _render("warning", message, exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    _render("error", message, exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False


class CliEmitter(LoggingEmitter):
    """Pipeline emitter printing warnings and errors to stderr.

    Known events are shown with ``-v``; everything else goes through logging.
    """

    def __init__(self, state: CLIState) -> None:
        super().__init__(debug_enabled=state.show_tracebacks)
        self.state = state

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message and self.state.verbosity >= 1:
            self.state.err_console.print(message)
            return
        super().event(name, payload)
