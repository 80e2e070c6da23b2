"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
PIPELINE_PANEL = "Pipeline"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"


class MathModeChoice(str, Enum):
    """Math handling selectable from the command line."""

    render = "render"
    code_spans = "code_spans"
    off = "off"


class OutputFormat(str, Enum):
    """Output flavours of the ``render`` command."""

    html = "html"
    tree = "tree"


InputPathArgument = Annotated[
    Path | None,
    typer.Argument(
        metavar="INPUT",
        help="Markdown message to process. Reads stdin when omitted.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

StreamingOption = Annotated[
    bool,
    typer.Option(
        "--streaming",
        help="Treat the input as a live buffer and strip trailing cursor glyphs.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

MathModeOption = Annotated[
    MathModeChoice | None,
    typer.Option(
        "--math-mode",
        help="Override math handling: render, code_spans or off.",
        case_sensitive=False,
        rich_help_panel=PIPELINE_PANEL,
    ),
]

LinkCitationsOption = Annotated[
    bool | None,
    typer.Option(
        "--link-citations/--no-link-citations",
        help="Rewrite [N] citations as (#cite-N) Markdown links.",
        rich_help_panel=PIPELINE_PANEL,
    ),
]

MessageIdOption = Annotated[
    str | None,
    typer.Option(
        "--message-id",
        help="Prefix applied to generated heading ids.",
        rich_help_panel=PIPELINE_PANEL,
    ),
]

ExtensionOption = Annotated[
    list[str] | None,
    typer.Option(
        "--extension",
        "-x",
        help="Additional Markdown extensions (repeat or separate with commas).",
        rich_help_panel=PIPELINE_PANEL,
    ),
]

DisableExtensionOption = Annotated[
    list[str] | None,
    typer.Option(
        "--disable-extension",
        "-d",
        help="Markdown extensions to disable (repeat or separate with commas).",
        rich_help_panel=PIPELINE_PANEL,
    ),
]

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Emit rendered HTML or the node tree of the message.",
        case_sensitive=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ChunkSizeOption = Annotated[
    int,
    typer.Option(
        "--chunk-size",
        "-n",
        min=1,
        help="Number of characters appended to the buffer per replayed frame.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

ShowFramesOption = Annotated[
    bool,
    typer.Option(
        "--show-frames",
        help="Print every intermediate frame, not only the final one.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Exit with status 1 when a frame changes on re-normalization.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file holding pipeline settings.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=PIPELINE_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]


__all__ = [
    "ChunkSizeOption",
    "ConfigOption",
    "DebugOption",
    "DisableExtensionOption",
    "ExtensionOption",
    "InputPathArgument",
    "LinkCitationsOption",
    "MathModeChoice",
    "MathModeOption",
    "MessageIdOption",
    "OutputFormat",
    "OutputFormatOption",
    "ShowFramesOption",
    "StreamingOption",
    "StrictOption",
    "VerboseOption",
]
