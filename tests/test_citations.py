from __future__ import annotations

import pytest

from streamsmith.citations import (
    convert_citations_to_markdown_links,
    expand_grouped_citations,
    normalize_citation_patterns,
    render_citations_for_plain_text,
    strip_citations,
    unescape_citation_brackets,
)
from streamsmith.nodes import CitationGroup


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("[[3]]", "[3]"),
        ("[1, 2,3]", "[1][2][3]"),
        ("[ 5 ]", "[5]"),
        ("\\[4\\]", "[4]"),
        ("see [1] [2]", "see [1][2]"),
        ("[1]\n[2]", "[1][2]"),
        ("plain [link](http://x.y)", "plain [link](http://x.y)"),
    ],
)
def test_normalize_citation_patterns(text: str, expected: str) -> None:
    assert normalize_citation_patterns(text) == expected


def test_blank_line_separates_citations() -> None:
    assert normalize_citation_patterns("end [1]\n\n[2] start") == "end [1]\n\n[2] start"


def test_expand_grouped_citations_skips_link_text() -> None:
    assert expand_grouped_citations("[1, 2]") == "[1][2]"
    assert expand_grouped_citations("[1,2](#cite-group-1-2)") == "[1,2](#cite-group-1-2)"


def test_unescape_citation_brackets_leaves_math_delimiters() -> None:
    assert unescape_citation_brackets("\\[1, 2\\] and \\[x\\]") == "[1, 2] and \\[x\\]"


def test_single_citation_becomes_link() -> None:
    assert convert_citations_to_markdown_links("Fact [1].") == "Fact [1](#cite-1)."


def test_adjacent_citations_become_group_link() -> None:
    linked = convert_citations_to_markdown_links("Fact [1][2] and [3, 4].")
    assert linked == "Fact [1,2](#cite-group-1-2) and [3,4](#cite-group-3-4)."


def test_linking_is_idempotent() -> None:
    once = convert_citations_to_markdown_links("[1][2]")
    assert once == "[1,2](#cite-group-1-2)"
    assert convert_citations_to_markdown_links(once) == once


def test_existing_links_are_untouched() -> None:
    text = "[1](#cite-1) and [2](https://example.com)"
    assert convert_citations_to_markdown_links(text) == text


def test_strip_citations() -> None:
    assert strip_citations("Sky is blue [1][2].") == "Sky is blue."
    assert strip_citations("Sky is blue [1,2](#cite-group-1-2).") == "Sky is blue."


def test_plain_text_rendering_groups_adjacent_citations() -> None:
    nodes = render_citations_for_plain_text("The sky is blue [1] [2]. Grass [3].")
    assert nodes == [
        "The sky is blue ",
        CitationGroup.from_numbers([1, 2]),
        ". Grass ",
        CitationGroup.from_numbers([3]),
        ".",
    ]
    assert nodes[1].anchor_id == "cite-group-1-2"
    assert nodes[3].anchor_id == "cite-3"


def test_plain_text_rendering_returns_single_node_unwrapped() -> None:
    assert render_citations_for_plain_text("no citations here") == "no citations here"
    group = render_citations_for_plain_text("[7]")
    assert group == CitationGroup.from_numbers([7])
    assert group.links[0].href == "#cite-7"
