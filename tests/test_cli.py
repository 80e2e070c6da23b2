from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup
from typer.testing import CliRunner

from streamsmith.ui.cli import app, get_cli_state
from streamsmith.version import get_version


runner = CliRunner()


def _write(tmp_path: Path, text: str, name: str = "message.md") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"streamsmith {get_version()}"


def test_normalize_reads_file(tmp_path: Path) -> None:
    path = _write(tmp_path, "\\# Title\n\nFacts [1, 2] &am")
    result = runner.invoke(app, ["normalize", str(path)])
    assert result.exit_code == 0, result.output
    assert result.stdout == "# Title\n\nFacts [1][2] "


def test_normalize_reads_stdin_with_overrides() -> None:
    result = runner.invoke(
        app,
        ["normalize", "--link-citations", "--math-mode", "code_spans"],
        input="Value $x$ [3]",
    )
    assert result.exit_code == 0, result.output
    assert result.stdout == "Value `$x$` [3](#cite-3)"


def test_config_file_is_applied(tmp_path: Path) -> None:
    config = _write(tmp_path, "streamsmith:\n  link_citations: true\n", "pipeline.yml")
    result = runner.invoke(app, ["--config", str(config), "normalize"], input="See [4]")
    assert result.exit_code == 0, result.output
    assert result.stdout == "See [4](#cite-4)"


def test_invalid_config_reports_error(tmp_path: Path) -> None:
    config = _write(tmp_path, "math_mode: nope\n", "pipeline.yml")
    result = runner.invoke(app, ["--config", str(config), "normalize"], input="x")
    assert result.exit_code == 1
    assert "Invalid pipeline configuration" in result.output


def test_render_html(tmp_path: Path) -> None:
    path = _write(tmp_path, "# Title\n\nThe sky is blue [1][2].")
    result = runner.invoke(app, ["render", str(path), "--message-id", "m9"])
    assert result.exit_code == 0, result.output

    soup = BeautifulSoup(result.stdout, "html.parser")
    assert soup.find("h1")["id"] == "m9-title"
    group = soup.find("span", class_="citation-group")
    assert group is not None
    assert group["data-anchor"] == "cite-group-1-2"


def test_render_tree() -> None:
    result = runner.invoke(
        app, ["render", "--format", "tree"], input="Energy $$E=mc^2$$ [1]"
    )
    assert result.exit_code == 0, result.output
    assert "math (display) 'E=mc^2'" in result.stdout
    assert "citation-group #cite-1 [1]" in result.stdout


def test_stream_replays_frames(tmp_path: Path) -> None:
    path = _write(tmp_path, "Fish &amp; chips [1] [2].")
    result = runner.invoke(app, ["stream", str(path), "--chunk-size", "4", "--strict"])
    assert result.exit_code == 0, result.output
    assert result.stdout == "Fish &amp; chips [1][2]."


def test_stream_show_frames() -> None:
    result = runner.invoke(
        app, ["stream", "--chunk-size", "3", "--show-frames"], input="abcdefg"
    )
    assert result.exit_code == 0, result.output
    assert "frame 0 (3 chars)" in result.stdout
    assert "frame 2 (7 chars)" in result.stdout


def test_missing_input_file_is_rejected(tmp_path: Path) -> None:
    result = runner.invoke(app, ["normalize", str(tmp_path / "missing.md")])
    assert result.exit_code == 2


def test_config_does_not_leak_into_next_invocation(tmp_path: Path) -> None:
    config = _write(tmp_path, "link_citations: true\n", "link.yml")
    first = runner.invoke(app, ["--config", str(config), "normalize"], input="See [4]")
    assert first.stdout == "See [4](#cite-4)"

    second = runner.invoke(app, ["normalize"], input="See [4]")
    assert second.exit_code == 0, second.output
    assert second.stdout == "See [4]"


def test_verbose_flag_is_reset_between_invocations() -> None:
    runner.invoke(app, ["-vv", "normalize"], input="x")
    result = runner.invoke(app, ["normalize"], input="x")
    assert result.exit_code == 0
    assert get_cli_state().verbosity == 0
