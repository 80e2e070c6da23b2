"""Implementation of the ``streamsmith normalize`` command."""

from __future__ import annotations

import typer

from streamsmith.render import normalize_markdown

from .._options import (
    InputPathArgument,
    LinkCitationsOption,
    MathModeOption,
    StreamingOption,
)
from ..state import get_cli_state
from ..utils import apply_overrides, read_input


def normalize(
    ctx: typer.Context,
    input_path: InputPathArgument = None,
    streaming: StreamingOption = False,
    math_mode: MathModeOption = None,
    link_citations: LinkCitationsOption = None,
) -> None:
    """Print the normalized Markdown source of a message."""
    state = get_cli_state(ctx)
    config = apply_overrides(
        state.config,
        math_mode=math_mode,
        link_citations=link_citations,
        streaming=streaming,
    )
    text = read_input(input_path)
    typer.echo(normalize_markdown(text, config, streaming=streaming), nl=False)


__all__ = ["normalize"]
