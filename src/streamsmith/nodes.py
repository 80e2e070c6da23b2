"""Render node tree produced by the pipeline.

Text nodes are plain strings, mirroring how Python-Markdown stores text in
``Element.text`` and ``Element.tail``. Every other node is an immutable
dataclass that knows how to turn itself into an ``ElementTree`` element.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from html import escape
from typing import Union
import xml.etree.ElementTree as ElementTree


@dataclass(frozen=True, slots=True)
class CitationLink:
    """A single ``[N]`` reference pointing at ``#cite-N``."""

    number: int

    @property
    def anchor_id(self) -> str:
        return f"cite-{self.number}"

    @property
    def href(self) -> str:
        return f"#{self.anchor_id}"

    @property
    def label(self) -> str:
        return str(self.number)


@dataclass(frozen=True, slots=True)
class CitationGroup:
    """A run of citations separated only by whitespace."""

    links: tuple[CitationLink, ...]

    @classmethod
    def from_numbers(cls, numbers: Iterable[int | str]) -> CitationGroup:
        return cls(links=tuple(CitationLink(int(number)) for number in numbers))

    @property
    def numbers(self) -> tuple[int, ...]:
        return tuple(link.number for link in self.links)

    @property
    def anchor_id(self) -> str:
        """Anchor shared with the scroll-to-citation feature."""
        if len(self.links) == 1:
            return self.links[0].anchor_id
        return "cite-group-" + "-".join(str(number) for number in self.numbers)


@dataclass(frozen=True, slots=True)
class LineBreak:
    """Explicit hard line break."""


@dataclass(frozen=True, slots=True)
class MathNode:
    """Typeset LaTeX, inline or display."""

    latex: str
    display: bool
    markup: str


@dataclass(frozen=True, slots=True)
class MathFallback:
    """Visible stand-in for LaTeX the typesetter rejected."""

    latex: str
    display: bool
    error: str


RenderNode = Union[str, CitationGroup, LineBreak, MathNode, MathFallback]


def _math_element(node: MathNode) -> ElementTree.Element:
    mode = "display" if node.display else "inline"
    element = ElementTree.Element(
        "span", {"class": f"math math-{mode}", "data-latex": node.latex}
    )
    try:
        markup = ElementTree.fromstring(node.markup)
    except ElementTree.ParseError:
        element.text = node.markup
        return element
    # Plain tag names serialize the same under ElementTree and Python-Markdown.
    namespace = None
    for child in markup.iter():
        if isinstance(child.tag, str) and child.tag.startswith("{"):
            namespace, _, child.tag = child.tag[1:].partition("}")
    if namespace:
        markup.set("xmlns", namespace)
    element.append(markup)
    return element


def to_element(node: RenderNode) -> ElementTree.Element | str:
    """Convert a node into an ``ElementTree`` element (text stays a string)."""
    if isinstance(node, str):
        return node
    if isinstance(node, LineBreak):
        return ElementTree.Element("br")
    if isinstance(node, CitationGroup):
        group = ElementTree.Element(
            "span", {"class": "citation-group", "data-anchor": node.anchor_id}
        )
        for link in node.links:
            anchor = ElementTree.SubElement(
                group, "a", {"href": link.href, "class": "citation-link"}
            )
            anchor.text = link.label
        return group
    if isinstance(node, MathNode):
        return _math_element(node)
    if isinstance(node, MathFallback):
        mode = "display" if node.display else "inline"
        element = ElementTree.Element(
            "span", {"class": f"math-error math-{mode}", "title": node.error}
        )
        element.text = node.latex
        return element
    raise TypeError(f"Unsupported render node: {node!r}")


def iter_nodes(tree: RenderNode | Sequence[RenderNode]) -> list[RenderNode]:
    """Flatten a single node or a node list into a list."""
    if isinstance(tree, (list, tuple)):
        return list(tree)
    return [tree]


def render_html(tree: RenderNode | Sequence[RenderNode]) -> str:
    """Serialize a node or node list to an HTML fragment."""
    container = ElementTree.Element("div")
    append_nodes(container, iter_nodes(tree))
    return escape(container.text or "", quote=False) + "".join(
        ElementTree.tostring(child, encoding="unicode", method="html") for child in container
    )


def append_nodes(parent: ElementTree.Element, nodes: Iterable[RenderNode]) -> None:
    """Append nodes to ``parent``, folding text into ``text``/``tail`` slots."""
    for node in nodes:
        converted = to_element(node)
        if isinstance(converted, str):
            if not converted:
                continue
            children = list(parent)
            if children:
                last = children[-1]
                last.tail = (last.tail or "") + converted
            else:
                parent.text = (parent.text or "") + converted
            continue
        parent.append(converted)


__all__ = [
    "CitationGroup",
    "CitationLink",
    "LineBreak",
    "MathFallback",
    "MathNode",
    "RenderNode",
    "append_nodes",
    "iter_nodes",
    "render_html",
    "to_element",
]
