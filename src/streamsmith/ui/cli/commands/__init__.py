"""CLI command implementations exposed via `streamsmith.ui.cli`."""

from __future__ import annotations

from .normalize import normalize
from .render import render
from .stream import stream


__all__ = ["normalize", "render", "stream"]
