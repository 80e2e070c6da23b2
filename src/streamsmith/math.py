"""Math span detection, unescaping and typesetting.

Only canonical dollar delimiters are recognised here; run
:func:`streamsmith.delimiters.normalize_latex_delimiters` first to fold
``\\[...\\]`` and ``\\(...\\)`` into them.

Display math is ``$$...$$`` without an inner ``$``. Inline math is
``$...$`` on a single line where the opening ``$`` does not follow a word
character, another ``$`` or a backslash, and the closing ``$`` is not
followed by a digit. The last rule keeps ``$10 and $20`` as prose while
``$2$`` and ``$2p$`` still render.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
import logging
import re
from typing import Protocol

from .diagnostics import DiagnosticEmitter
from .exceptions import MathTypesettingError, exception_hint
from .nodes import MathFallback, MathNode


logger = logging.getLogger(__name__)

_MATH_RE = re.compile(r"\$\$([^$]+?)\$\$|(?<![\w$\\])\$([^$\n]+?)\$(?!\d)")
_ESCAPED_MARKDOWN_RE = re.compile(r"\\([_*])")
_CODE_RE = re.compile(r"(```[\s\S]*?(?:```|\Z)|`[^`\n]*`)")
_NEWLINE_RUN_RE = re.compile(r"\s*\n\s*")
_PLACEHOLDER_RE = re.compile("\x02math(\\d+)\x03")


class MathTypesetter(Protocol):
    """Callable turning LaTeX into display or inline markup."""

    def __call__(self, latex: str, *, display: bool) -> str: ...


@dataclass(frozen=True, slots=True)
class MathSegment:
    """A detected math span."""

    latex: str
    display: bool
    raw: str


def latex2mathml_typesetter(latex: str, *, display: bool) -> str:
    """Typeset ``latex`` as MathML."""
    from latex2mathml.converter import convert

    return convert(latex, display="block" if display else "inline")


def _segment_from_match(match: re.Match[str]) -> MathSegment:
    display_body = match.group(1)
    if display_body is not None:
        return MathSegment(latex=display_body, display=True, raw=match.group(0))
    return MathSegment(latex=match.group(2), display=False, raw=match.group(0))


def iter_math_segments(text: str) -> Iterator[tuple[int, int, MathSegment]]:
    """Yield ``(start, end, segment)`` for every math span in ``text``."""
    if not text or "$" not in text:
        return
    for match in _MATH_RE.finditer(text):
        yield match.start(), match.end(), _segment_from_match(match)


def split_math(text: str) -> list[str | MathSegment]:
    """Split ``text`` into literal strings and :class:`MathSegment` items."""
    pieces: list[str | MathSegment] = []
    cursor = 0
    for start, end, segment in iter_math_segments(text):
        if start > cursor:
            pieces.append(text[cursor:start])
        pieces.append(segment)
        cursor = end
    if cursor < len(text) or not pieces:
        pieces.append(text[cursor:])
    return pieces


def match_math(text: str) -> MathSegment | None:
    """Return the segment when ``text`` is exactly one math span."""
    if not text or "$" not in text:
        return None
    match = _MATH_RE.fullmatch(text.strip())
    if match is None:
        return None
    return _segment_from_match(match)


def unescape_math(latex: str) -> str:
    r"""Undo Markdown escaping that LaTeX does not need.

    ``\_`` and ``\*`` become ``_`` and ``*``. ``\{``, ``\}``, ``\[`` and ``\]``
    carry meaning in LaTeX and are kept.
    """
    return _ESCAPED_MARKDOWN_RE.sub(r"\1", latex)


def render_math(
    segment: MathSegment,
    typesetter: MathTypesetter | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> MathNode | MathFallback:
    """Typeset ``segment``; typesetting errors become a :class:`MathFallback`."""
    latex = unescape_math(segment.latex)
    if segment.display:
        latex = latex.strip()
    engine = typesetter or latex2mathml_typesetter
    try:
        markup = engine(latex, display=segment.display)
    except Exception as cause:
        exc = MathTypesettingError(latex, f"Unable to typeset '{latex}'")
        exc.__cause__ = cause
        error = exception_hint(exc) or str(exc)
        logger.debug("math typesetting failed for %r: %s", latex, error)
        if emitter is not None:
            emitter.warning(f"Math fallback for '{latex}': {error}", exc)
            emitter.event(
                "math_fallback",
                {"latex": latex, "display": segment.display, "error": error},
            )
        return MathFallback(latex=latex, display=segment.display, error=error)
    return MathNode(latex=latex, display=segment.display, markup=markup)


def try_render_math(
    text: str,
    typesetter: MathTypesetter | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> MathNode | MathFallback | None:
    """Render ``text`` when it is a single math span, otherwise return ``None``."""
    segment = match_math(text)
    if segment is None:
        return None
    return render_math(segment, typesetter, emitter=emitter)


def _wrap_span(match: re.Match[str]) -> str:
    raw = match.group(0)
    if "`" in raw:
        return raw
    return f"`{_NEWLINE_RUN_RE.sub(' ', raw)}`"


def wrap_math_in_code_spans(text: str) -> str:
    """Wrap math spans in backticks so a Markdown renderer keeps them verbatim.

    Existing code spans and fenced blocks (including a fence still open at
    the end of a streamed buffer) are skipped, as is math touching one of
    them, which also keeps the function idempotent. Newlines inside display math collapse to single spaces since
    code spans cannot hold them.
    """
    if not text or "$" not in text:
        return text
    code_ranges = [match.span() for match in _CODE_RE.finditer(text)]
    pieces: list[str] = []
    cursor = 0
    for match in _MATH_RE.finditer(text):
        start, end = match.span()
        if any(start <= code_end and code_start <= end for code_start, code_end in code_ranges):
            continue
        pieces.append(text[cursor:start])
        pieces.append(_wrap_span(match))
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def protect_math(text: str) -> tuple[str, Callable[[str], str]]:
    """Swap math spans for placeholders; return the text and a restore callback.

    The placeholder store lives in the returned closure, so concurrent or
    nested calls never share state.
    """
    store: list[str] = []

    def _stash(match: re.Match[str]) -> str:
        store.append(match.group(0))
        return f"\x02math{len(store) - 1}\x03"

    def restore(value: str) -> str:
        if not store:
            return value
        return _PLACEHOLDER_RE.sub(lambda match: store[int(match.group(1))], value)

    if not text or "$" not in text:
        return text, restore
    return _MATH_RE.sub(_stash, text), restore


__all__ = [
    "MathSegment",
    "MathTypesetter",
    "iter_math_segments",
    "latex2mathml_typesetter",
    "match_math",
    "protect_math",
    "render_math",
    "split_math",
    "try_render_math",
    "unescape_math",
    "wrap_math_in_code_spans",
]
