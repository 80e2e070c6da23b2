"""Normalize and render streamed assistant Markdown."""

from __future__ import annotations

from streamsmith.breaks import apply_hard_line_breaks, apply_hard_line_breaks_to_string
from streamsmith.citations import (
    convert_citations_to_markdown_links,
    expand_grouped_citations,
    normalize_citation_patterns,
    render_citations_for_plain_text,
    strip_citations,
    unescape_citation_brackets,
)
from streamsmith.config import PipelineConfig, load_config
from streamsmith.delimiters import normalize_latex_delimiters
from streamsmith.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from streamsmith.emphasis import remove_parentheses_around_italics
from streamsmith.entities import (
    buffer_incomplete_entities,
    decode_minimal_entities,
    strip_dangling_closers,
    strip_trailing_streaming_artifacts,
)
from streamsmith.escapes import normalize_escaped_markdown
from streamsmith.exceptions import (
    ConfigError,
    MarkdownConversionError,
    MathTypesettingError,
    StreamsmithError,
)
from streamsmith.math import (
    MathSegment,
    MathTypesetter,
    iter_math_segments,
    latex2mathml_typesetter,
    render_math,
    split_math,
    try_render_math,
    wrap_math_in_code_spans,
)
from streamsmith.nodes import (
    CitationGroup,
    CitationLink,
    LineBreak,
    MathFallback,
    MathNode,
    RenderNode,
    render_html,
)
from streamsmith.render import (
    StreamFrame,
    normalize_markdown,
    render_text_with_math_and_citations,
    stream_frames,
)
from streamsmith.version import get_version


__version__ = get_version()

__all__ = [
    "CitationGroup",
    "CitationLink",
    "ConfigError",
    "DiagnosticEmitter",
    "LineBreak",
    "LoggingEmitter",
    "MarkdownConversionError",
    "MathFallback",
    "MathNode",
    "MathSegment",
    "MathTypesetter",
    "MathTypesettingError",
    "NullEmitter",
    "PipelineConfig",
    "RenderNode",
    "StreamFrame",
    "StreamsmithError",
    "__version__",
    "apply_hard_line_breaks",
    "apply_hard_line_breaks_to_string",
    "buffer_incomplete_entities",
    "convert_citations_to_markdown_links",
    "decode_minimal_entities",
    "expand_grouped_citations",
    "iter_math_segments",
    "latex2mathml_typesetter",
    "load_config",
    "normalize_citation_patterns",
    "normalize_escaped_markdown",
    "normalize_latex_delimiters",
    "normalize_markdown",
    "remove_parentheses_around_italics",
    "render_citations_for_plain_text",
    "render_html",
    "render_math",
    "render_text_with_math_and_citations",
    "split_math",
    "stream_frames",
    "strip_citations",
    "strip_dangling_closers",
    "strip_trailing_streaming_artifacts",
    "try_render_math",
    "unescape_citation_brackets",
    "wrap_math_in_code_spans",
]
