from __future__ import annotations

from pathlib import Path

import pytest

from streamsmith.config import PipelineConfig, config_from_mapping, load_config
from streamsmith.exceptions import ConfigError


def test_defaults() -> None:
    config = PipelineConfig()
    assert config.math_mode == "render"
    assert config.link_citations is False
    assert config.hard_breaks is True
    assert config.message_id is None


def test_load_config_top_level(tmp_path: Path) -> None:
    path = tmp_path / "pipeline.yml"
    path.write_text("link_citations: true\nmath_mode: code_spans\n", encoding="utf-8")

    config = load_config(path)

    assert config.link_citations is True
    assert config.math_mode == "code_spans"


def test_load_config_nested_section(tmp_path: Path) -> None:
    path = tmp_path / "pipeline.yml"
    path.write_text("streamsmith:\n  message_id: msg-7\n", encoding="utf-8")

    assert load_config(path).message_id == "msg-7"


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == PipelineConfig()


@pytest.mark.parametrize(
    "payload",
    [
        "unknown_option: 1\n",
        "math_mode: mathjax\n",
        "- a\n- b\n",
        "streamsmith: [1, 2]\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "bad.yml"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Failed to read"):
        load_config(tmp_path / "missing.yml")


def test_config_from_mapping() -> None:
    assert config_from_mapping(None) == PipelineConfig()
    assert config_from_mapping({"hard_breaks": False}).hard_breaks is False
