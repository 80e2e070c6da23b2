from __future__ import annotations

from streamsmith.config import PipelineConfig
from streamsmith.nodes import CitationGroup, MathFallback, MathNode
from streamsmith.render import (
    normalize_markdown,
    render_text_with_math_and_citations,
    stream_frames,
)


def _typesetter(latex: str, *, display: bool) -> str:
    return f"<math><mi>{latex}</mi></math>"


def test_citations_and_currency() -> None:
    nodes = render_text_with_math_and_citations(
        "The sky is blue [1][2]. Cost is $10.", typesetter=_typesetter
    )
    assert nodes == [
        "The sky is blue ",
        CitationGroup.from_numbers([1, 2]),
        ". Cost is $10.",
    ]
    group = nodes[1]
    assert [link.href for link in group.links] == ["#cite-1", "#cite-2"]
    assert group.anchor_id == "cite-group-1-2"


def test_display_math_after_text() -> None:
    nodes = render_text_with_math_and_citations("Energy: $$E=mc^2$$", typesetter=_typesetter)
    assert isinstance(nodes, list)
    assert nodes[0] == "Energy: "
    assert len(nodes) == 2
    assert isinstance(nodes[1], MathNode)
    assert nodes[1].latex == "E=mc^2"
    assert nodes[1].display is True


def test_single_node_is_returned_unwrapped() -> None:
    node = render_text_with_math_and_citations("$x$", typesetter=_typesetter)
    assert isinstance(node, MathNode)
    assert render_text_with_math_and_citations("just text") == "just text"
    assert render_text_with_math_and_citations("") == ""


def test_citation_syntax_inside_math_is_not_linked() -> None:
    nodes = render_text_with_math_and_citations("See $a[1]$ [2]", typesetter=_typesetter)
    assert isinstance(nodes, list)
    assert isinstance(nodes[1], MathNode)
    assert nodes[1].latex == "a[1]"
    assert nodes[-1] == CitationGroup.from_numbers([2])


def test_grouped_citations_and_dangling_closers() -> None:
    nodes = render_text_with_math_and_citations("Claim [1, 3]</span>")
    assert nodes == ["Claim ", CitationGroup.from_numbers([1, 3])]


def test_typesetting_failure_never_raises() -> None:
    def broken(latex: str, *, display: bool) -> str:
        raise RuntimeError("engine down")

    node = render_text_with_math_and_citations("$x$", typesetter=broken)
    assert isinstance(node, MathFallback)
    assert node.error == "engine down"


def test_math_spans_can_be_left_as_text() -> None:
    nodes = render_text_with_math_and_citations("$x$ [1]", render_math_spans=False)
    assert nodes == ["$x$ ", CitationGroup.from_numbers([1])]


def test_normalize_markdown_full_pipeline() -> None:
    source = "\\# Title\n\nSee \\[1\\] and \\[2\\] for $a\\_1$ and \\(b\\) &am"
    assert normalize_markdown(source) == "# Title\n\nSee [1] and [2] for $a\\_1$ and $b$ "


def test_normalize_markdown_keeps_display_delimiters_apart_from_citations() -> None:
    assert normalize_markdown("\\[x^2\\] cites \\[3\\]") == "$$x^2$$ cites [3]"


def test_normalize_markdown_leaves_latex_row_breaks_alone() -> None:
    source = "$$\\begin{matrix} a \\\\ b \\end{matrix}$$"
    assert normalize_markdown(source) == source


def test_normalize_markdown_links_and_wraps() -> None:
    config = PipelineConfig(link_citations=True, math_mode="code_spans")
    result = normalize_markdown("Value $x$ [1] [2]", config)
    assert result == "Value `$x$` [1,2](#cite-group-1-2)"
    assert normalize_markdown(result, config) == result


def test_normalize_markdown_respects_disabled_passes() -> None:
    config = PipelineConfig(
        normalize_escapes=False, normalize_citations=False, buffer_entities=False
    )
    assert normalize_markdown("\\# keep [1] [2] &am", config) == "\\# keep [1] [2] &am"


def test_streaming_strips_cursor_glyphs() -> None:
    assert normalize_markdown("Hello\u258c", streaming=True) == "Hello"
    assert normalize_markdown("Hello\u258c") == "Hello\u258c"


def test_stream_frames_replay_prefixes() -> None:
    text = "Fish &amp; chips [1] [2] cost $x$."
    frames = list(stream_frames(text, chunk_size=5))

    assert [frame.size for frame in frames][-1] == len(text)
    assert frames[-1].text == normalize_markdown(text)
    assert all(frame.stable for frame in frames)
    assert [frame.index for frame in frames] == list(range(len(frames)))
