"""Repair provider-specific over-escaping of Markdown control characters.

Some providers send Markdown with block markers escaped (``\\# Title``),
citation brackets escaped (``\\[1\\]``) or whole responses flattened into a
single line with literal ``\\n`` sequences. The passes below undo those
artifacts conservatively, in a fixed order, and leave inline escapes alone.
"""

from __future__ import annotations

import re


# Horizontal and invisible whitespace: tab, space, NBSP, Ogham space, Mongolian
# vowel separator, U+2000..U+200D, narrow NBSP, medium math space, ideographic
# space and the BOM.
WHITESPACE_CLASS = r"[\t \u00A0\u1680\u180E\u2000-\u200D\u202F\u205F\u3000\uFEFF]"

_LITERAL_NEWLINE_RE = re.compile(r"\\n")
_ESCAPED_NEWLINE_RE = re.compile(r"\\+(?:r\\+)?n")

_LINE_START_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^[ \t]{0,3}\\```", re.MULTILINE), "```"),
    (re.compile(r"^[ \t]{0,3}\\(#{1,6})(?=\s)", re.MULTILINE), r"\1"),
    (re.compile(r"^[ \t]{0,3}\\([-*])(?=\s)", re.MULTILINE), r"\1"),
    (re.compile(r"^[ \t]{0,3}\\(\d+)\.(?=\s)", re.MULTILINE), r"\1."),
    (re.compile(r"^[ \t]{0,3}\\>(?=\s)", re.MULTILINE), ">"),
    (re.compile(r"^[ \t]{0,3}\\\|", re.MULTILINE), "|"),
)

_ESCAPED_BRACKET_RE = re.compile(r"\\+([\[\]])")
_EMPHASIS_BACKSLASH_RE = re.compile(r"(\*[^*\n]+\*|_[^_\n]+_)\\+[^\S\r\n]+")
_STRAY_BACKSLASH_RE = re.compile(rf"\\+{WHITESPACE_CLASS}+")


def _expand_literal_newlines(text: str) -> str:
    if "\n" in text:
        return text
    if len(_LITERAL_NEWLINE_RE.findall(text)) < 2:
        return text
    return _ESCAPED_NEWLINE_RE.sub("\n", text)


def _unescape_line_starts(text: str) -> str:
    for pattern, replacement in _LINE_START_RULES:
        text = pattern.sub(replacement, text)
    return text


def collapse_stray_backslashes(text: str) -> str:
    """Collapse backslash runs followed by horizontal whitespace into one space."""
    if not text or "\\" not in text:
        return text
    return _STRAY_BACKSLASH_RE.sub(" ", text)


def normalize_escaped_markdown(text: str) -> str:
    """Undo over-escaped Markdown produced by some providers.

    The passes run in order:

    1. A payload with no real newline but at least two literal ``\\n``
       sequences is treated as flattened, and its literal newlines expanded.
    2. Escaped fences, headings, list markers, blockquotes and table pipes are
       unescaped at line starts (at most three leading spaces).
    3. Escaped square brackets are unescaped everywhere.
    4. Backslash + whitespace right after ``*emphasis*``/``_emphasis_`` is
       reduced to a single space.
    5. Any other backslash run before horizontal whitespace becomes one space.
    6. The line-start rules run again for markers that step 5 uncovered.
    """
    if not text or "\\" not in text:
        return text

    text = _unescape_line_starts(_expand_literal_newlines(text))
    text = _ESCAPED_BRACKET_RE.sub(r"\1", text)
    text = _EMPHASIS_BACKSLASH_RE.sub(r"\1 ", text)
    return _unescape_line_starts(collapse_stray_backslashes(text))


__all__ = [
    "WHITESPACE_CLASS",
    "collapse_stray_backslashes",
    "normalize_escaped_markdown",
]
