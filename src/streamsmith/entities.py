"""Entity buffering and minimal decoding for growing text buffers.

A streamed buffer can end halfway through an HTML character reference
(``&nb`` on its way to ``&nbsp;``). The helpers here hide such a tail until
it either resolves or stops looking like an entity, and decode the handful
of numeric references some providers emit for whitespace.
"""

from __future__ import annotations

import re


_INCOMPLETE_ENTITY_RE = re.compile(r"&(?:#?x?[\dA-Fa-f]{0,6}|[A-Za-z]{0,10})?\Z")
_SPACE_ENTITY_RE = re.compile(r"&#x20;|&#32;")
_NEWLINE_ENTITY_RE = re.compile(r"&#x0A;|&#10;")
_DANGLING_CLOSER_RE = re.compile(r"</(?:span|a|div|p|em|strong|code|pre)>", re.IGNORECASE)
_TRAILING_ZERO_WIDTH_RE = re.compile(r"[\u200B\u200C\u200D\uFEFF\u2060\u00AD]+\Z")
_TRAILING_BOX_DRAWING_RE = re.compile(r"[\u2500-\u257F\u2580-\u259F\u2758-\u275A]+\Z")


def buffer_incomplete_entities(text: str) -> str:
    """Trim a trailing, still-open HTML entity from ``text``.

    Only the trailing run is removed, and only when it is longer than the bare
    ampersand and not terminated by ``;``. Calling this on every new chunk is
    safe: once the entity closes, the next call returns the text unchanged.
    """
    if not text or "&" not in text:
        return text
    match = _INCOMPLETE_ENTITY_RE.search(text)
    if match is None:
        return text
    payload = match.group(0)
    if len(payload) > 1 and not payload.endswith(";"):
        return text[: match.start()]
    return text


def decode_minimal_entities(text: str) -> str:
    """Decode numeric space and newline references, and nothing else."""
    if not text or "&#" not in text:
        return text
    text = _SPACE_ENTITY_RE.sub(" ", text)
    return _NEWLINE_ENTITY_RE.sub("\n", text)


def strip_dangling_closers(text: str) -> str:
    """Remove closing inline/block tags left behind by a truncated chunk."""
    if not text or "</" not in text:
        return text
    return _DANGLING_CLOSER_RE.sub("", text)


def strip_trailing_streaming_artifacts(text: str) -> str:
    """Drop cursor glyphs and zero-width characters appended while streaming."""
    if not text:
        return text
    text = _TRAILING_ZERO_WIDTH_RE.sub("", text)
    return _TRAILING_BOX_DRAWING_RE.sub("", text)


__all__ = [
    "buffer_incomplete_entities",
    "decode_minimal_entities",
    "strip_dangling_closers",
    "strip_trailing_streaming_artifacts",
]
