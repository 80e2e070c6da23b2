"""Pipeline entry points composing the individual passes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .citations import (
    convert_citations_to_markdown_links,
    expand_grouped_citations,
    normalize_citation_patterns,
    render_citations_for_plain_text,
    unescape_citation_brackets,
)
from .config import DEFAULT_CONFIG, PipelineConfig
from .delimiters import normalize_latex_delimiters
from .diagnostics import DiagnosticEmitter
from .emphasis import remove_parentheses_around_italics
from .entities import (
    buffer_incomplete_entities,
    decode_minimal_entities,
    strip_dangling_closers,
    strip_trailing_streaming_artifacts,
)
from .escapes import normalize_escaped_markdown
from .math import MathTypesetter, iter_math_segments, protect_math, render_math
from .math import wrap_math_in_code_spans
from .nodes import RenderNode


def _extend(parts: list[RenderNode], rendered: RenderNode | list[RenderNode]) -> None:
    if isinstance(rendered, list):
        parts.extend(rendered)
    elif rendered != "":
        parts.append(rendered)


def render_text_with_math_and_citations(
    text: str,
    *,
    typesetter: MathTypesetter | None = None,
    emitter: DiagnosticEmitter | None = None,
    render_math_spans: bool = True,
) -> RenderNode | list[RenderNode]:
    """Render ``text`` into math, citation and plain text nodes.

    Dangling closing tags are removed and comma groups expanded first. The
    text is then walked once: math spans go to the typesetter, everything
    between them is scanned for citations. Citation syntax inside math is
    therefore never touched. A single resulting node is returned unwrapped.
    """
    if not text:
        return ""
    text = expand_grouped_citations(strip_dangling_closers(text))
    if not render_math_spans:
        return render_citations_for_plain_text(text)

    parts: list[RenderNode] = []
    cursor = 0
    for start, end, segment in iter_math_segments(text):
        if start > cursor:
            _extend(parts, render_citations_for_plain_text(text[cursor:start]))
        parts.append(render_math(segment, typesetter, emitter=emitter))
        cursor = end
    if cursor < len(text):
        _extend(parts, render_citations_for_plain_text(text[cursor:]))

    if not parts:
        return ""
    return parts[0] if len(parts) == 1 else parts


def normalize_markdown(
    text: str,
    config: PipelineConfig | None = None,
    *,
    streaming: bool = False,
) -> str:
    """Run the string passes over a (possibly partial) Markdown buffer.

    The result is stable under re-application, so a live view can feed the
    whole buffer through this function on every new chunk.
    """
    if not text:
        return text
    config = config or DEFAULT_CONFIG

    if streaming or config.strip_streaming_artifacts:
        text = strip_trailing_streaming_artifacts(text)
    if config.buffer_entities:
        text = buffer_incomplete_entities(text)
    if config.decode_entities:
        text = decode_minimal_entities(text)
    if config.normalize_citations:
        text = unescape_citation_brackets(text)
    if config.normalize_delimiters:
        text = normalize_latex_delimiters(text)

    math_enabled = config.math_mode != "off"
    restore = None
    if math_enabled:
        text, restore = protect_math(text)
    if config.normalize_escapes:
        text = normalize_escaped_markdown(text)
    if config.strip_italic_parentheses:
        text = remove_parentheses_around_italics(text)
    if config.link_citations:
        text = convert_citations_to_markdown_links(text)
    elif config.normalize_citations:
        text = normalize_citation_patterns(text)
    if restore is not None:
        text = restore(text)

    if config.math_mode == "code_spans":
        text = wrap_math_in_code_spans(text)
    return text


@dataclass(frozen=True, slots=True)
class StreamFrame:
    """Pipeline output for one prefix of a replayed stream."""

    index: int
    size: int
    text: str
    stable: bool


def stream_frames(
    text: str,
    chunk_size: int = 16,
    config: PipelineConfig | None = None,
) -> Iterator[StreamFrame]:
    """Replay ``text`` as a growing buffer, normalizing every prefix from scratch.

    ``stable`` reports whether normalizing the frame output again leaves it
    unchanged.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be a positive integer.")
    config = config or DEFAULT_CONFIG
    sizes = list(range(chunk_size, len(text), chunk_size))
    sizes.append(len(text))
    for index, size in enumerate(sizes):
        output = normalize_markdown(text[:size], config, streaming=size < len(text))
        stable = normalize_markdown(output, config, streaming=size < len(text)) == output
        yield StreamFrame(index=index, size=size, text=output, stable=stable)


__all__ = [
    "StreamFrame",
    "normalize_markdown",
    "render_text_with_math_and_citations",
    "stream_frames",
]
