"""Hard line break conversion."""

from __future__ import annotations

from collections.abc import Sequence
import re

from .escapes import collapse_stray_backslashes
from .nodes import LineBreak, RenderNode


_HARD_BREAK_RE = re.compile(r"(?: {2,}|\\)\r?\n")


def apply_hard_line_breaks_to_string(text: str) -> list[RenderNode]:
    """Split ``text`` on hard-break markers and interleave :class:`LineBreak` nodes.

    Two or more trailing spaces, or a single backslash, before a newline mark
    a hard break. Plain newlines stay in the text. Backslash runs followed by
    horizontal whitespace are collapsed to one space first.
    """
    cleaned = collapse_stray_backslashes(text)
    parts = _HARD_BREAK_RE.split(cleaned)
    if len(parts) == 1:
        return [cleaned]
    nodes: list[RenderNode] = []
    for index, part in enumerate(parts):
        if index:
            nodes.append(LineBreak())
        if part:
            nodes.append(part)
    return nodes


def apply_hard_line_breaks(tree: RenderNode | Sequence[RenderNode]) -> list[RenderNode]:
    """Apply hard breaks to every text node of ``tree``; other nodes pass through."""
    if isinstance(tree, str):
        return apply_hard_line_breaks_to_string(tree)
    if not isinstance(tree, (list, tuple)):
        return [tree]
    nodes: list[RenderNode] = []
    for node in tree:
        nodes.extend(apply_hard_line_breaks(node))
    return nodes


__all__ = ["apply_hard_line_breaks", "apply_hard_line_breaks_to_string"]
