"""Markdown rendering of content bodies with caching.

Converts item bodies to HTML with mistune, gives every heading a slug id and
extracts a table of contents. Rendered output is cached per item and
invalidated by source file mtime.
"""

import logging
import re
from dataclasses import dataclass
from html import unescape
from typing import Any

import mistune
from mistune.toc import add_toc_hook

from portfolio.core.cache import FileCache, NullCache
from portfolio.core.content import ContentItem
from portfolio.core.types import Category

logger = logging.getLogger(__name__)

MARKDOWN_PLUGINS = ["strikethrough", "table", "url", "task_lists", "footnotes"]

_HEADING_STRIP_RE = re.compile(r"[^\w\- ]")
_TAG_RE = re.compile(r"<[^>]+>")


@dataclass(frozen=True)
class TocEntry:
    """Table of contents entry."""

    level: int
    title: str
    id: str

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {"level": self.level, "title": self.title, "id": self.id}


@dataclass
class RenderResult:
    """Result of rendering a content body."""

    html: str
    toc: list[TocEntry]
    from_cache: bool


def heading_slug(text: str) -> str:
    """GitHub-style anchor for a heading ("C++ & Rust!" -> "c--rust").

    Punctuation is dropped and every space becomes a hyphen, so runs of
    spaces left by removed characters are kept as runs of hyphens.
    """
    plain = unescape(_TAG_RE.sub("", text)).strip().lower()
    return _HEADING_STRIP_RE.sub("", plain).replace(" ", "-")


def _plain_text(title: str) -> str:
    # mistune hands ToC titles over as escaped HTML
    return unescape(_TAG_RE.sub("", title)).strip()


class _HeadingSlugger:
    """Heading id generator producing unique slugs within one document.

    Repeated headings get a numeric suffix: "setup", "setup-1", "setup-2".
    """

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def __call__(self, token: dict[str, Any], index: int) -> str:
        # mistune numbers headings from 0 on every parse
        if index == 0:
            self._seen = {}

        base = heading_slug(token.get("text", "")) or "section"
        count = self._seen.get(base, 0)
        self._seen[base] = count + 1
        return base if count == 0 else f"{base}-{count}"


class BodyRenderer:
    """Renders content item bodies with caching.

    Raw HTML in bodies is passed through unchanged.
    """

    def __init__(
        self,
        cache: FileCache | NullCache,
        *,
        toc_min_level: int = 2,
        toc_max_level: int = 4,
    ) -> None:
        """Initialize renderer.

        Args:
            cache: Cache for rendered bodies
            toc_min_level: Shallowest heading level listed in the ToC
            toc_max_level: Deepest heading level listed in the ToC
        """
        self._cache = cache
        self._toc_min_level = toc_min_level
        self._toc_max_level = toc_max_level

        self._markdown = mistune.create_markdown(escape=False, plugins=MARKDOWN_PLUGINS)
        add_toc_hook(self._markdown, min_level=1, max_level=6, heading_id=_HeadingSlugger())

    @property
    def cache(self) -> FileCache | NullCache:
        return self._cache

    def render(self, item: ContentItem[Any], category: Category) -> RenderResult:
        """Render the body of a content item.

        Args:
            item: Loaded content item
            category: Category the item belongs to (part of the cache key)

        Returns:
            RenderResult with HTML and ToC
        """
        key = f"{category.value}/{item.slug}"
        source_mtime = item.source_path.stat().st_mtime

        cached = self._cache.get(key, source_mtime)
        if cached is not None:
            toc = [
                TocEntry(level=int(entry["level"]), title=str(entry["title"]), id=str(entry["id"]))
                for entry in cached.meta["toc"]
            ]
            return RenderResult(html=cached.html, toc=toc, from_cache=True)

        html, toc = self.convert(item.body)
        self._cache.set(key, html, source_mtime, [entry.to_dict() for entry in toc])
        logger.debug("Rendered %s (%d heading(s) in ToC)", key, len(toc))

        return RenderResult(html=html, toc=toc, from_cache=False)

    def convert(self, markdown_text: str) -> tuple[str, list[TocEntry]]:
        """Convert Markdown to HTML and extract the table of contents."""
        html, state = self._markdown.parse(markdown_text)
        toc = [
            TocEntry(level=level, title=_plain_text(title), id=heading_id)
            for level, heading_id, title in state.env.get("toc_items", [])
            if self._toc_min_level <= level <= self._toc_max_level
        ]
        return str(html), toc
