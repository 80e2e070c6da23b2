from __future__ import annotations

from bs4 import BeautifulSoup
import pytest

from streamsmith.nodes import (
    CitationGroup,
    LineBreak,
    MathFallback,
    MathNode,
    render_html,
    to_element,
)


def test_citation_group_anchor_scheme() -> None:
    single = CitationGroup.from_numbers(["4"])
    group = CitationGroup.from_numbers([1, 2, 10])

    assert single.anchor_id == "cite-4"
    assert group.anchor_id == "cite-group-1-2-10"
    assert [link.href for link in group.links] == ["#cite-1", "#cite-2", "#cite-10"]


def test_render_html_for_citation_group() -> None:
    html = render_html(["Fact ", CitationGroup.from_numbers([1, 2]), "."])
    soup = BeautifulSoup(html, "html.parser")

    group = soup.find("span", class_="citation-group")
    assert group is not None
    assert group["data-anchor"] == "cite-group-1-2"
    assert [a["href"] for a in group.find_all("a")] == ["#cite-1", "#cite-2"]
    assert soup.get_text() == "Fact 12."


def test_render_html_escapes_text() -> None:
    assert render_html("a < b & c") == "a &lt; b &amp; c"


def test_math_node_element_strips_namespaces() -> None:
    node = MathNode(
        latex="x",
        display=False,
        markup='<math xmlns="http://www.w3.org/1998/Math/MathML"><mi>x</mi></math>',
    )
    html = render_html(node)
    soup = BeautifulSoup(html, "html.parser")

    span = soup.find("span", class_="math-inline")
    assert span is not None
    assert span["data-latex"] == "x"
    math = span.find("math")
    assert math is not None
    assert math["xmlns"] == "http://www.w3.org/1998/Math/MathML"
    assert "ns0" not in html


def test_math_node_with_unparsable_markup_keeps_text() -> None:
    element = to_element(MathNode(latex="x", display=True, markup="<broken"))
    assert not isinstance(element, str)
    assert element.text == "<broken"
    assert element.get("class") == "math math-display"


def test_math_fallback_carries_error_tooltip() -> None:
    soup = BeautifulSoup(
        render_html(MathFallback(latex=r"\bad", display=False, error="Unknown macro")),
        "html.parser",
    )
    span = soup.find("span", class_="math-error")
    assert span is not None
    assert span["title"] == "Unknown macro"
    assert span.get_text() == r"\bad"


def test_line_break_element() -> None:
    assert "<br" in render_html(["a", LineBreak(), "b"])


def test_unknown_node_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        to_element(42)  # type: ignore[arg-type]
