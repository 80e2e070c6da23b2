"""Markdown extension assigning message-scoped ids to headings."""

from __future__ import annotations

import re
from typing import Any
import xml.etree.ElementTree as ElementTree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from slugify import slugify


_HEADING_RE = re.compile(r"^h[1-6]$")
_PLACEHOLDER_RE = re.compile("\x02[^\x03]*\x03")


def heading_slug(text: str, *, message_id: str | None = None, separator: str = "-") -> str:
    """Return the id used for a heading titled ``text``."""
    slug = slugify(_PLACEHOLDER_RE.sub("", text), separator=separator)
    if message_id and slug:
        return f"{message_id}{separator}{slug}"
    return slug


class _HeadingIdTreeprocessor(Treeprocessor):
    """Give every heading without an id a unique, slugified one."""

    def __init__(self, md: Markdown, message_id: str, separator: str) -> None:
        super().__init__(md)
        self.message_id = message_id or None
        self.separator = separator

    def run(self, root: ElementTree.Element) -> None:  # type: ignore[override]
        seen: set[str] = {
            element.get("id", "") for element in root.iter() if element.get("id")
        }
        for element in root.iter():
            if not isinstance(element.tag, str) or not _HEADING_RE.match(element.tag):
                continue
            if element.get("id"):
                continue
            slug = heading_slug(
                "".join(element.itertext()),
                message_id=self.message_id,
                separator=self.separator,
            )
            if not slug:
                continue
            candidate = slug
            counter = 2
            while candidate in seen:
                candidate = f"{slug}{self.separator}{counter}"
                counter += 1
            seen.add(candidate)
            element.set("id", candidate)


class HeadingIdExtension(Extension):
    """Register the heading id tree-processor."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "message_id": ["", "Prefix scoping heading ids to a single message."],
            "separator": ["-", "Word separator used in generated ids."],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.treeprocessors.register(
            _HeadingIdTreeprocessor(
                md, str(self.getConfig("message_id") or ""), str(self.getConfig("separator"))
            ),
            "streamsmith_heading_ids",
            priority=6,
        )


def makeExtension(**kwargs: Any) -> HeadingIdExtension:  # noqa: N802
    return HeadingIdExtension(**kwargs)


__all__ = ["HeadingIdExtension", "heading_slug", "makeExtension"]
