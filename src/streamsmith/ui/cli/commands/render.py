"""Implementation of the ``streamsmith render`` command."""

from __future__ import annotations

from collections.abc import Sequence

from rich.text import Text
from rich.tree import Tree
import typer

from streamsmith.adapters.markdown import render_markdown, resolve_markdown_extensions
from streamsmith.exceptions import MarkdownConversionError
from streamsmith.nodes import (
    CitationGroup,
    LineBreak,
    MathFallback,
    MathNode,
    RenderNode,
    iter_nodes,
)
from streamsmith.render import normalize_markdown, render_text_with_math_and_citations

from .._options import (
    DisableExtensionOption,
    ExtensionOption,
    InputPathArgument,
    MathModeOption,
    MessageIdOption,
    OutputFormat,
    OutputFormatOption,
    StreamingOption,
)
from ..state import CliEmitter, emit_error, get_cli_state
from ..utils import apply_overrides, read_input


def _node_label(node: RenderNode) -> str:
    if isinstance(node, str):
        return f"text {node!r}"
    if isinstance(node, CitationGroup):
        numbers = ", ".join(str(number) for number in node.numbers)
        return f"citation-group #{node.anchor_id} [{numbers}]"
    if isinstance(node, LineBreak):
        return "line-break"
    if isinstance(node, MathNode):
        mode = "display" if node.display else "inline"
        return f"math ({mode}) {node.latex!r}"
    if isinstance(node, MathFallback):
        mode = "display" if node.display else "inline"
        return f"math-fallback ({mode}) {node.latex!r}: {node.error}"
    return repr(node)


def build_node_tree(nodes: Sequence[RenderNode]) -> Tree:
    """Return a Rich tree describing rendered nodes."""
    tree = Tree("message")
    for node in nodes:
        tree.add(Text(_node_label(node)))
    return tree


def render(
    ctx: typer.Context,
    input_path: InputPathArgument = None,
    output_format: OutputFormatOption = OutputFormat.html,
    streaming: StreamingOption = False,
    math_mode: MathModeOption = None,
    message_id: MessageIdOption = None,
    extensions: ExtensionOption = None,
    disabled_extensions: DisableExtensionOption = None,
) -> None:
    """Render a message to HTML, or show the node tree it produces."""
    state = get_cli_state(ctx)
    config = apply_overrides(
        state.config, math_mode=math_mode, message_id=message_id, streaming=streaming
    )
    text = read_input(input_path)
    emitter = CliEmitter(state)

    if OutputFormat(output_format) is OutputFormat.tree:
        source = normalize_markdown(text, config, streaming=streaming)
        rendered = render_text_with_math_and_citations(
            source, emitter=emitter, render_math_spans=config.math_mode == "render"
        )
        state.console.print(build_node_tree(iter_nodes(rendered)))
        return

    try:
        document = render_markdown(
            text,
            resolve_markdown_extensions(extensions, disabled_extensions),
            config=config,
            streaming=streaming,
            emitter=emitter,
        )
    except MarkdownConversionError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    typer.echo(document.html)


__all__ = ["build_node_tree", "render"]
