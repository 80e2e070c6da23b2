"""Bracket citation normalisation, linking and node rendering."""

from __future__ import annotations

import re

from .nodes import CitationGroup, RenderNode


_ESCAPED_BRACKET_RE = re.compile(r"\\+([\[\]])")
_ESCAPED_CITATION_RE = re.compile(r"\\+\[(\s*\d+(?:\s*,\s*\d+)*\s*)\\+\]")
_DOUBLE_BRACKET_RE = re.compile(r"\[{2,}\s*(\d+)\s*\]{2,}")
_GROUPED_RE = re.compile(r"\[\s*(\d+(?:\s*,\s*\d+)+)\s*\](?!\()")
_SPACED_SINGLE_RE = re.compile(r"\[\s*(\d+)\s*\]")
_ADJACENT_RE = re.compile(r"(\[\d+\])(\s+)(?=\[\d+\](?!\())")
_RUN_RE = re.compile(r"(?:\[\d+\])+")
_NUMBER_RE = re.compile(r"\[(\d+)\]")
_TOKEN_RE = re.compile(r"\[(\d+)\](?!\()")
_LINKED_RE = re.compile(r"[^\S\n]?\[\d+(?:,\d+)*\]\(#cite-[\w-]+\)")
_BARE_RE = re.compile(r"[^\S\n]?\[\d+\](?!\()")


def _expand_group(match: re.Match[str]) -> str:
    return "".join(f"[{number.strip()}]" for number in match.group(1).split(","))


def _join_adjacent(match: re.Match[str]) -> str:
    # A blank line is a paragraph break, not citation spacing.
    if match.group(2).count("\n") > 1:
        return match.group(0)
    return match.group(1)


def expand_grouped_citations(text: str) -> str:
    """Split comma groups such as ``[1, 2,3]`` into ``[1][2][3]``."""
    if not text or "," not in text:
        return text
    return _GROUPED_RE.sub(_expand_group, text)


def unescape_citation_brackets(text: str) -> str:
    r"""Unescape ``\[1\]`` and ``\[1, 2\]`` while leaving other ``\[`` alone."""
    if not text or "\\" not in text:
        return text
    return _ESCAPED_CITATION_RE.sub(r"[\1]", text)


def normalize_citation_patterns(text: str) -> str:
    """Canonicalise bracket citations into clean, adjacent ``[N]`` tokens.

    ``\\[1\\]`` loses its backslashes, ``[[1]]`` collapses to ``[1]``,
    ``[1, 2]`` expands to ``[1][2]`` (unless already followed by a link
    target), ``[ 1 ]`` is trimmed and ``[1] [2]`` is joined into ``[1][2]``.
    """
    if not text or "[" not in text:
        return text
    text = _ESCAPED_BRACKET_RE.sub(r"\1", text)
    text = _DOUBLE_BRACKET_RE.sub(r"[\1]", text)
    text = _GROUPED_RE.sub(_expand_group, text)
    text = _SPACED_SINGLE_RE.sub(r"[\1]", text)
    return _ADJACENT_RE.sub(_join_adjacent, text)


def _link_run(match: re.Match[str]) -> str:
    source = match.string
    if source.startswith("(", match.end()):
        return match.group(0)
    numbers = _NUMBER_RE.findall(match.group(0))
    if len(numbers) == 1:
        return f"[{numbers[0]}](#cite-{numbers[0]})"
    return f"[{','.join(numbers)}](#cite-group-{'-'.join(numbers)})"


def convert_citations_to_markdown_links(text: str) -> str:
    """Turn ``[N]`` runs into Markdown links understood by the citation view.

    ``[1]`` becomes ``[1](#cite-1)`` and ``[1][2][3]`` becomes
    ``[1,2,3](#cite-group-1-2-3)``. Runs already followed by a link target are
    left alone, so the function is idempotent.
    """
    if not text or "[" not in text:
        return text
    return _RUN_RE.sub(_link_run, normalize_citation_patterns(text))


def strip_citations(text: str) -> str:
    """Remove bare and linked citations, e.g. for plain-text export."""
    if not text or "[" not in text:
        return text
    text = _LINKED_RE.sub("", text)
    return _BARE_RE.sub("", normalize_citation_patterns(text))


def render_citations_for_plain_text(text: str) -> RenderNode | list[RenderNode]:
    """Split ``text`` into plain strings and :class:`CitationGroup` nodes.

    Citations separated only by whitespace are merged into one group. A single
    resulting node is returned as-is rather than wrapped in a list.
    """
    normalized = normalize_citation_patterns(text)
    parts: list[RenderNode] = []
    group: list[str] = []
    start = 0

    for match in _TOKEN_RE.finditer(normalized):
        between = normalized[start : match.start()]
        if between and not (group and not between.strip()):
            if group:
                parts.append(CitationGroup.from_numbers(group))
                group = []
            parts.append(between)
        group.append(match.group(1))
        start = match.end()

    if group:
        parts.append(CitationGroup.from_numbers(group))
    tail = normalized[start:]
    if tail:
        parts.append(tail)

    if not parts:
        return normalized
    return parts[0] if len(parts) == 1 else parts


__all__ = [
    "convert_citations_to_markdown_links",
    "expand_grouped_citations",
    "normalize_citation_patterns",
    "render_citations_for_plain_text",
    "strip_citations",
    "unescape_citation_brackets",
]
