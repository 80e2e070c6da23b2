"""Exception hierarchy for the streaming text pipeline."""

from __future__ import annotations


class StreamsmithError(RuntimeError):
    """Base exception for pipeline failures surfaced to callers."""


class MathTypesettingError(StreamsmithError):
    """Raised when the math typesetter rejects a LaTeX payload."""

    def __init__(self, latex: str, message: str) -> None:
        super().__init__(message)
        self.latex = latex


class ConfigError(StreamsmithError):
    """Raised when a pipeline configuration cannot be loaded or validated."""


class MarkdownConversionError(StreamsmithError):
    """Raised when Markdown cannot be converted into HTML."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "MarkdownConversionError",
    "MathTypesettingError",
    "StreamsmithError",
    "exception_hint",
    "exception_messages",
]
