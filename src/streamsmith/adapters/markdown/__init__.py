"""Markdown conversion utilities for streamed assistant messages."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import re
from threading import Lock
from typing import Any

import markdown

from ...config import DEFAULT_CONFIG, PipelineConfig
from ...diagnostics import DiagnosticEmitter
from ...exceptions import MarkdownConversionError
from ...math import MathTypesetter


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "MarkdownDocument",
    "deduplicate_markdown_extensions",
    "normalize_markdown_extensions",
    "render_markdown",
    "resolve_markdown_extensions",
]


STREAM_NORMALIZE_EXTENSION = "streamsmith.extensions.stream_normalize:StreamNormalizeExtension"
MATH_CITATIONS_EXTENSION = "streamsmith.extensions.math_citations:MathCitationExtension"
HEADING_IDS_EXTENSION = "streamsmith.extensions.heading_ids:HeadingIdExtension"

DEFAULT_MARKDOWN_EXTENSIONS = [
    "pymdownx.superfences",
    "pymdownx.betterem",
    "pymdownx.tilde",
    "pymdownx.tasklist",
    "pymdownx.magiclink",
    "sane_lists",
    "tables",
    STREAM_NORMALIZE_EXTENSION,
    MATH_CITATIONS_EXTENSION,
    HEADING_IDS_EXTENSION,
]


DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, object]] = {
    "pymdownx.tasklist": {
        "custom_checkbox": False,
    },
    "pymdownx.magiclink": {
        "hide_protocol": False,
    },
}


@dataclass(slots=True)
class MarkdownDocument:
    """Result of converting Markdown into HTML."""

    html: str


class _MarkdownCacheEntry:
    __slots__ = ("lock", "processor")

    def __init__(self, processor: Any) -> None:
        self.processor = processor
        self.lock = Lock()


_MARKDOWN_CACHE: dict[tuple[tuple[str, ...], str, bool], _MarkdownCacheEntry] = {}
_MARKDOWN_CACHE_GUARD = Lock()


def resolve_markdown_extensions(
    requested: Iterable[str] | None,
    disabled: Iterable[str] | None,
) -> list[str]:
    """Return the active Markdown extension list after applying overrides."""
    enabled = normalize_markdown_extensions(requested)
    disabled_normalized = {
        _normalise_extension_name(extension)
        for extension in normalize_markdown_extensions(disabled)
    }

    combined = deduplicate_markdown_extensions(list(DEFAULT_MARKDOWN_EXTENSIONS) + enabled)

    if not disabled_normalized:
        return combined

    return [
        extension
        for extension in combined
        if _normalise_extension_name(extension) not in disabled_normalized
    ]


def deduplicate_markdown_extensions(values: Iterable[str]) -> list[str]:
    """Remove duplicate extensions while preserving order and case."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def normalize_markdown_extensions(
    values: Iterable[str] | str | None,
) -> list[str]:
    """Normalise extension names from CLI-friendly strings into a flat list."""
    if values is None:
        return []

    if isinstance(values, str):
        candidates: Iterable[str] = [values]
    else:
        candidates = values

    normalized: list[str] = []
    for value in candidates:
        if not isinstance(value, str):
            continue
        chunks = re.split(r"[,\s\x00]+", value)
        normalized.extend(chunk for chunk in chunks if chunk)
    return normalized


def render_markdown(
    source: str,
    extensions: Sequence[str] | None = None,
    *,
    config: PipelineConfig | None = None,
    streaming: bool = False,
    typesetter: MathTypesetter | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> MarkdownDocument:
    """Convert an assistant message into HTML.

    Processors are cached per extension list and pipeline configuration.
    Passing a custom ``typesetter`` or ``emitter`` builds a dedicated
    processor instead.
    """
    config = config or DEFAULT_CONFIG
    active_extensions = tuple(
        DEFAULT_MARKDOWN_EXTENSIONS if extensions is None else extensions
    )

    if typesetter is not None or emitter is not None:
        entry = _MarkdownCacheEntry(
            _build_markdown_processor(
                active_extensions, config, streaming, typesetter=typesetter, emitter=emitter
            )
        )
    else:
        entry = _resolve_markdown_entry(active_extensions, config, streaming)

    try:
        with entry.lock:
            processor = entry.processor
            processor.reset()
            html = processor.convert(source)
    except MarkdownConversionError:
        raise
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc

    return MarkdownDocument(html=html)


def _resolve_markdown_entry(
    extensions_key: tuple[str, ...],
    config: PipelineConfig,
    streaming: bool,
) -> _MarkdownCacheEntry:
    cache_key = (extensions_key, config.model_dump_json(), streaming)
    entry = _MARKDOWN_CACHE.get(cache_key)
    if entry is not None:
        return entry
    with _MARKDOWN_CACHE_GUARD:
        entry = _MARKDOWN_CACHE.get(cache_key)
        if entry is None:
            processor = _build_markdown_processor(extensions_key, config, streaming)
            entry = _MarkdownCacheEntry(processor)
            _MARKDOWN_CACHE[cache_key] = entry
    return entry


def _build_markdown_processor(
    extensions_key: tuple[str, ...],
    config: PipelineConfig,
    streaming: bool,
    *,
    typesetter: MathTypesetter | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> Any:
    active_extensions = list(extensions_key)
    extension_configs = {
        name: dict(DEFAULT_EXTENSION_CONFIGS[name])
        for name in active_extensions
        if name in DEFAULT_EXTENSION_CONFIGS
    }

    math_options: dict[str, object] = {
        "render_math": config.math_mode == "render",
        "hard_breaks": config.hard_breaks,
    }
    if typesetter is not None:
        math_options["typesetter"] = typesetter
    if emitter is not None:
        math_options["emitter"] = emitter
    pipeline_options: dict[str, dict[str, object]] = {
        STREAM_NORMALIZE_EXTENSION: {"pipeline": config, "streaming": streaming},
        MATH_CITATIONS_EXTENSION: math_options,
        HEADING_IDS_EXTENSION: {"message_id": config.message_id or ""},
    }
    for name in active_extensions:
        options = pipeline_options.get(name)
        if options is not None:
            extension_configs.setdefault(name, {}).update(options)

    try:
        processor = markdown.Markdown(
            extensions=active_extensions, extension_configs=extension_configs
        )
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to initialize Markdown processor: {exc}") from exc

    return processor


def _normalise_extension_name(value: str | object) -> str:
    if not isinstance(value, str):
        return ""
    return value.split(":", 1)[0].lower()
