"""Implementation of the ``streamsmith stream`` command."""

from __future__ import annotations

import typer

from streamsmith.render import stream_frames

from .._options import (
    ChunkSizeOption,
    InputPathArgument,
    LinkCitationsOption,
    MathModeOption,
    ShowFramesOption,
    StrictOption,
)
from ..state import CliEmitter, emit_warning, get_cli_state
from ..utils import apply_overrides, read_input


def stream(
    ctx: typer.Context,
    input_path: InputPathArgument = None,
    chunk_size: ChunkSizeOption = 16,
    math_mode: MathModeOption = None,
    link_citations: LinkCitationsOption = None,
    show_frames: ShowFramesOption = False,
    strict: StrictOption = False,
) -> None:
    """Replay a message as a growing buffer and check every frame is stable."""
    state = get_cli_state(ctx)
    config = apply_overrides(state.config, math_mode=math_mode, link_citations=link_citations)
    text = read_input(input_path)
    emitter = CliEmitter(state)

    unstable = 0
    last_text = ""
    for frame in stream_frames(text, chunk_size, config):
        last_text = frame.text
        if show_frames:
            state.console.rule(f"frame {frame.index} ({frame.size} chars)")
            typer.echo(frame.text)
        if not frame.stable:
            unstable += 1
            emitter.event("stream_frame_unstable", {"index": frame.index, "size": frame.size})

    if not show_frames:
        typer.echo(last_text, nl=False)

    if unstable:
        emit_warning(f"{unstable} frame(s) changed when normalized a second time.")
        if strict:
            raise typer.Exit(code=1)


__all__ = ["stream"]
