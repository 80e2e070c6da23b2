"""Public CLI exports for streamsmith."""

from __future__ import annotations

from streamsmith.adapters.markdown import DEFAULT_MARKDOWN_EXTENSIONS

from .app import app, main
from .state import CLIState, debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "CLIState",
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "app",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "main",
]
