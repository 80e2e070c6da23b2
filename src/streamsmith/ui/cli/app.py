"""Typer application wiring for the streamsmith CLI."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from streamsmith.config import load_config
from streamsmith.exceptions import ConfigError
from streamsmith.version import get_version

from ._options import ConfigOption, DebugOption, VerboseOption
from .commands import normalize, render, stream
from .state import CLIState, bind_cli_state, debug_enabled, emit_error, get_cli_state


app = typer.Typer(
    help="Normalize and render streamed assistant Markdown.",
    context_settings={"help_option_names": ["--help", "-h"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"streamsmith {get_version()}")
        raise typer.Exit()


@app.callback()
def configure(
    ctx: typer.Context,
    config_path: ConfigOption = None,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the installed version and exit.",
        ),
    ] = False,
) -> None:
    """Configure diagnostics and load the pipeline configuration."""
    state = bind_cli_state(CLIState(verbosity=max(0, verbose), show_tracebacks=debug), ctx)
    if state.verbosity >= 2 or debug:
        logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    if config_path is None:
        return
    try:
        state.config = load_config(config_path)
    except ConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


app.command()(normalize)
app.command()(render)
app.command()(stream)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
