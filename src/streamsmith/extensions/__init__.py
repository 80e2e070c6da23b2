"""Central registry for the bundled Markdown extensions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from importlib import import_module
from typing import Any


__all__ = [
    "ExtensionSpec",
    "available_extensions",
    "get_extension_spec",
    "load_markdown_extension",
]


def _load_attribute(path: str) -> Any:
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        msg = f"Extension entry point '{path}' must use the 'module:attribute' format."
        raise ValueError(msg)
    module = import_module(module_name)
    target: Any = module
    for chunk in attribute.split("."):
        target = getattr(target, chunk)
    return target


def _normalise_slug(value: str) -> str:
    slug = value.split(":", 1)[0].lower()
    if slug.startswith("streamsmith.extensions."):
        return slug.removeprefix("streamsmith.extensions.")
    if slug.startswith("streamsmith."):
        return slug.removeprefix("streamsmith.")
    return slug


@dataclass(frozen=True, slots=True)
class ExtensionSpec:
    """Describe how to import a bundled Markdown extension."""

    slug: str
    markdown_entry: str
    description: str | None = None


_EXTENSIONS: dict[str, ExtensionSpec] = {
    "stream_normalize": ExtensionSpec(
        slug="stream_normalize",
        markdown_entry="streamsmith.extensions.stream_normalize:StreamNormalizeExtension",
        description="Normalizes streamed assistant Markdown before block parsing.",
    ),
    "math_citations": ExtensionSpec(
        slug="math_citations",
        markdown_entry="streamsmith.extensions.math_citations:MathCitationExtension",
        description="Typesets math spans and links '[N]' citations outside code.",
    ),
    "heading_ids": ExtensionSpec(
        slug="heading_ids",
        markdown_entry="streamsmith.extensions.heading_ids:HeadingIdExtension",
        description="Assigns slugified, message-scoped ids to headings.",
    ),
}


def available_extensions() -> list[ExtensionSpec]:
    """Return the registered extension specs sorted by slug."""
    return [_EXTENSIONS[key] for key in sorted(_EXTENSIONS)]


def get_extension_spec(name: str) -> ExtensionSpec:
    """Look up the spec for a given extension slug or qualified name."""
    slug = _normalise_slug(name)
    try:
        return _EXTENSIONS[slug]
    except KeyError as exc:
        raise KeyError(f"No streamsmith extension named '{name}'.") from exc


def load_markdown_extension(name: str, **config: Any) -> Any:
    """Instantiate a Python-Markdown extension by slug or qualified name."""
    spec = get_extension_spec(name)
    factory: Callable[..., Any] = _load_attribute(spec.markdown_entry)
    return factory(**config)
