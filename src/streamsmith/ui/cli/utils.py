"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any

import typer

from streamsmith.config import PipelineConfig

from ._options import MathModeChoice


def read_input(path: Path | None) -> str:
    """Return the message text from ``path`` or from piped stdin."""
    if path is not None:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise typer.BadParameter(f"Unable to read '{path}': {exc}") from exc

    stream = sys.stdin
    if stream is None or stream.closed:
        raise typer.BadParameter("Provide an INPUT file or pipe content via stdin.")
    try:
        interactive = stream.isatty()
    except (AttributeError, ValueError):
        interactive = False
    if interactive:
        raise typer.BadParameter("Provide an INPUT file or pipe content via stdin.")
    return stream.read()


def apply_overrides(
    config: PipelineConfig,
    *,
    math_mode: MathModeChoice | None = None,
    link_citations: bool | None = None,
    message_id: str | None = None,
    streaming: bool | None = None,
) -> PipelineConfig:
    """Layer command-line overrides on top of the loaded configuration."""
    updates: dict[str, Any] = {}
    if math_mode is not None:
        updates["math_mode"] = MathModeChoice(math_mode).value
    if link_citations is not None:
        updates["link_citations"] = link_citations
    if message_id is not None:
        updates["message_id"] = message_id
    if streaming:
        updates["strip_streaming_artifacts"] = True
    if not updates:
        return config
    return config.model_copy(update=updates)


__all__ = ["apply_overrides", "read_input"]
