"""Emphasis clean-up."""

from __future__ import annotations

import re


_PAREN_ASTERISK_RE = re.compile(r"\(\s*\*([\s\S]*?)\*\s*\)")
_PAREN_UNDERSCORE_RE = re.compile(r"\(\s*_([\s\S]*?)_\s*\)")


def is_multi_word(content: str) -> bool:
    """Return ``True`` when ``content`` holds whitespace once trimmed."""
    stripped = content.strip()
    return any(char in stripped for char in " \t\n")


def _unwrap(marker: str):
    def replace(match: re.Match[str]) -> str:
        content = match.group(1)
        if not is_multi_word(content):
            return match.group(0)
        return f"{marker}{content}{marker}"

    return replace


def remove_parentheses_around_italics(text: str) -> str:
    """Turn ``(*several words*)`` into ``*several words*``.

    Single-word emphasis such as ``(see *above*)`` or ``(*sic*)`` is left as
    written.
    """
    if not text or "(" not in text:
        return text
    text = _PAREN_ASTERISK_RE.sub(_unwrap("*"), text)
    return _PAREN_UNDERSCORE_RE.sub(_unwrap("_"), text)


__all__ = ["is_multi_word", "remove_parentheses_around_italics"]
