"""Pipeline configuration.

PipelineConfig

`buffer_entities` (`bool`)
: Hide a trailing, still-open HTML entity until the stream completes it.

`decode_entities` (`bool`)
: Decode the numeric space and newline references some providers emit.

`normalize_escapes` (`bool`)
: Undo over-escaped Markdown control characters and flattened ``\\n`` payloads.

`normalize_delimiters` (`bool`)
: Rewrite ``\\[...\\]`` and ``\\(...\\)`` to dollar delimiters.

`strip_italic_parentheses` (`bool`)
: Unwrap ``(*multi word emphasis*)``.

`normalize_citations` (`bool`)
: Canonicalise bracket citations into adjacent ``[N]`` tokens.

`link_citations` (`bool`)
: Turn citations into ``[N](#cite-N)`` Markdown links in the normalized source.

`hard_breaks` (`bool`)
: Convert trailing double spaces and trailing backslashes into line breaks.

`strip_streaming_artifacts` (`bool`)
: Remove trailing cursor glyphs and zero-width characters from a live buffer.

`math_mode` (`"render" | "code_spans" | "off"`)
: ``render`` typesets math into nodes, ``code_spans`` only protects math with
  backticks in the Markdown source, ``off`` leaves dollar signs alone.

`message_id` (`str | None`)
: Prefix applied to generated heading ids so several messages can share a page.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError
import yaml

from .exceptions import ConfigError


MathMode = Literal["render", "code_spans", "off"]


class PipelineConfig(BaseModel):
    """Toggles for each pass of the normalization pipeline."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    buffer_entities: bool = True
    decode_entities: bool = True
    normalize_escapes: bool = True
    normalize_delimiters: bool = True
    strip_italic_parentheses: bool = True
    normalize_citations: bool = True
    link_citations: bool = False
    hard_breaks: bool = True
    strip_streaming_artifacts: bool = False
    math_mode: MathMode = "render"
    message_id: str | None = None


DEFAULT_CONFIG = PipelineConfig()


def config_from_mapping(data: Mapping[str, Any] | None) -> PipelineConfig:
    """Validate ``data`` into a :class:`PipelineConfig`."""
    if not data:
        return PipelineConfig()
    if not isinstance(data, Mapping):
        raise ConfigError("Pipeline configuration must be a mapping.")
    payload = data.get("streamsmith", data)
    if payload is None:
        return PipelineConfig()
    if not isinstance(payload, Mapping):
        raise ConfigError("The 'streamsmith' section must be a mapping.")
    try:
        return PipelineConfig.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigError(f"Invalid pipeline configuration: {exc}") from exc


def load_config(path: Path | str) -> PipelineConfig:
    """Load a YAML configuration file.

    Settings live either at the top level or under a ``streamsmith`` key.
    """
    path = Path(path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration '{path}': {exc}") from exc

    try:
        payload = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in '{path}': {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Configuration '{path}' must contain a mapping.")
    return config_from_mapping(payload)


__all__ = [
    "DEFAULT_CONFIG",
    "MathMode",
    "PipelineConfig",
    "config_from_mapping",
    "load_config",
]
