"""Canonicalise LaTeX math delimiters to dollar syntax."""

from __future__ import annotations

import re


_DISPLAY_DELIMITER_RE = re.compile(r"\\\[([\s\S]*?)\\\]")
_INLINE_DELIMITER_RE = re.compile(r"\\\(([\s\S]*?)\\\)")


def normalize_latex_delimiters(text: str) -> str:
    r"""Rewrite ``\[...\]`` as ``$$...$$`` and ``\(...\)`` as ``$...$``.

    Downstream math detection only needs to understand dollar delimiters once
    this pass has run.
    """
    if not text or "\\" not in text:
        return text
    text = _DISPLAY_DELIMITER_RE.sub(lambda match: f"$${match.group(1)}$$", text)
    return _INLINE_DELIMITER_RE.sub(lambda match: f"${match.group(1)}$", text)


__all__ = ["normalize_latex_delimiters"]
