"""Markdown extension turning math spans and ``[N]`` citations into nodes."""

from __future__ import annotations

from collections.abc import Sequence
import html
from typing import Any, ClassVar
import xml.etree.ElementTree as ElementTree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from ..breaks import apply_hard_line_breaks
from ..diagnostics import DiagnosticEmitter, NullEmitter
from ..math import MathTypesetter, latex2mathml_typesetter, try_render_math
from ..nodes import RenderNode, append_nodes, iter_nodes, to_element
from ..render import render_text_with_math_and_citations


class _MathCitationTreeprocessor(Treeprocessor):
    """Render math code spans, citations and hard breaks outside code."""

    _SKIP_TAGS: ClassVar[set[str]] = {"pre", "a", "kbd", "script", "style"}

    def __init__(
        self,
        md: Markdown,
        *,
        render_math: bool,
        hard_breaks: bool,
        typesetter: MathTypesetter | None,
        emitter: DiagnosticEmitter | None,
    ) -> None:
        super().__init__(md)
        self.render_math = render_math
        self.hard_breaks = hard_breaks
        self.typesetter = typesetter
        self.emitter = emitter

    def run(self, root: ElementTree.Element) -> None:  # type: ignore[override]
        self._process(root)

    # -- internals -----------------------------------------------------
    def _process(self, element: ElementTree.Element) -> None:
        children = list(element)
        if element.text:
            self._splice_text(element, self._render(element.text))

        for child in children:
            tag = self._tag(child)
            if tag == "code":
                if self.render_math:
                    child = self._replace_math_code(element, child)
            elif tag not in self._SKIP_TAGS:
                self._process(child)
            if child.tail:
                self._splice_tail(element, child, self._render(child.tail))

    def _render(self, text: str) -> list[RenderNode] | None:
        rendered = render_text_with_math_and_citations(
            text,
            typesetter=self.typesetter,
            emitter=self.emitter,
            render_math_spans=self.render_math,
        )
        nodes = iter_nodes(rendered)
        if self.hard_breaks:
            nodes = apply_hard_line_breaks(nodes)
        if len(nodes) == 1 and nodes[0] == text:
            return None
        return nodes

    def _replace_math_code(
        self, parent: ElementTree.Element, code: ElementTree.Element
    ) -> ElementTree.Element:
        if len(code) or not code.text:
            return code
        # Code spans keep &, < and > entity-escaped.
        node = try_render_math(
            html.unescape(code.text), self.typesetter, emitter=self.emitter
        )
        if node is None:
            return code
        replacement = to_element(node)
        if isinstance(replacement, str):
            return code
        replacement.tail = code.tail
        index = list(parent).index(code)
        parent.remove(code)
        parent.insert(index, replacement)
        return replacement

    def _splice_text(
        self, element: ElementTree.Element, nodes: Sequence[RenderNode] | None
    ) -> None:
        if nodes is None:
            return
        holder = ElementTree.Element("span")
        append_nodes(holder, nodes)
        element.text = holder.text
        for offset, fragment in enumerate(list(holder)):
            element.insert(offset, fragment)

    def _splice_tail(
        self,
        parent: ElementTree.Element,
        child: ElementTree.Element,
        nodes: Sequence[RenderNode] | None,
    ) -> None:
        if nodes is None:
            return
        holder = ElementTree.Element("span")
        append_nodes(holder, nodes)
        child.tail = holder.text
        base_index = list(parent).index(child) + 1
        for offset, fragment in enumerate(list(holder)):
            parent.insert(base_index + offset, fragment)

    @staticmethod
    def _tag(element: ElementTree.Element) -> str:
        tag = element.tag
        return tag.lower() if isinstance(tag, str) else ""


class MathCitationExtension(Extension):
    """Register the math and citation tree-processor."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "render_math": [True, "Typeset math code spans and dollar math in text."],
            "hard_breaks": [True, "Convert trailing backslashes and double spaces to <br>."],
            "typesetter": [latex2mathml_typesetter, "Callable (latex, *, display) -> markup; MathML by default."],
            "emitter": [NullEmitter(), "Diagnostic emitter receiving math fallback warnings."],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.treeprocessors.register(
            _MathCitationTreeprocessor(
                md,
                render_math=bool(self.getConfig("render_math")),
                hard_breaks=bool(self.getConfig("hard_breaks")),
                typesetter=self.getConfig("typesetter"),
                emitter=self.getConfig("emitter"),
            ),
            "streamsmith_math_citations",
            priority=15,
        )


def makeExtension(**kwargs: Any) -> MathCitationExtension:  # noqa: N802
    return MathCitationExtension(**kwargs)


__all__ = ["MathCitationExtension", "makeExtension"]
