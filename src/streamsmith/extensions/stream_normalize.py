"""Markdown preprocessor normalizing streamed assistant output."""

from __future__ import annotations

from typing import Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from ..config import PipelineConfig, config_from_mapping
from ..render import normalize_markdown


def coerce_pipeline_config(value: Any) -> PipelineConfig:
    """Accept a :class:`PipelineConfig`, a mapping or ``None``."""
    if isinstance(value, PipelineConfig):
        return value
    return config_from_mapping(value)


class _StreamNormalizePreprocessor(Preprocessor):
    """Run the string pipeline over the whole source before block parsing."""

    def __init__(self, md: Markdown, config: PipelineConfig, streaming: bool) -> None:
        super().__init__(md)
        # Math must reach the tree as code spans, or emphasis and escapes
        # would be applied inside LaTeX.
        if config.math_mode == "render":
            config = config.model_copy(update={"math_mode": "code_spans"})
        self.pipeline = config
        self.streaming = streaming

    def run(self, lines: list[str]) -> list[str]:
        # NormalizeWhitespace appends blank lines; the streaming passes
        # anchor on the real end of the message.
        end = len(lines)
        while end and not lines[end - 1].strip():
            end -= 1
        source = "\n".join(lines[:end])
        normalized = normalize_markdown(source, self.pipeline, streaming=self.streaming)
        return normalized.split("\n") + lines[end:]


class StreamNormalizeExtension(Extension):
    """Register the streaming normalization preprocessor."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "pipeline": [{}, "PipelineConfig instance or mapping of pipeline options."],
            "streaming": [False, "Treat the source as a live, still-growing buffer."],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        pipeline = coerce_pipeline_config(self.getConfig("pipeline"))
        md.preprocessors.register(
            _StreamNormalizePreprocessor(md, pipeline, bool(self.getConfig("streaming"))),
            "streamsmith_normalize",
            priority=24,
        )


def makeExtension(**kwargs: Any) -> StreamNormalizeExtension:  # noqa: N802
    return StreamNormalizeExtension(**kwargs)


__all__ = ["StreamNormalizeExtension", "coerce_pipeline_config", "makeExtension"]
