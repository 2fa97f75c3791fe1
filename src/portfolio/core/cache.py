"""File-based render cache with mtime invalidation.

Cache structure:
    .cache/
    ├── pages/
    │   └── projects/
    │       └── rover.html       # Rendered body HTML
    └── meta/
        └── projects/
            └── rover.json       # Source mtime and table of contents
"""

import json
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TypedDict


class CachedMetadata(TypedDict):
    """Cached body metadata structure."""

    source_mtime: float
    toc: list[dict[str, str | int]]


@dataclass
class CacheEntry:
    """Result of cache lookup."""

    html: str
    meta: CachedMetadata


class FileCache:
    """File-based cache for rendered content bodies.

    Uses source file mtime for invalidation. Cache entries are considered valid
    when the cached mtime matches the current source file mtime.
    """

    _GITIGNORE_CONTENT = "# Ignore everything in this directory\n*\n"

    def __init__(self, cache_dir: Path) -> None:
        """Initialize cache with directory path.

        Args:
            cache_dir: Root directory for cache files (e.g., .cache/)
        """
        self._cache_dir = cache_dir
        self._pages_dir = cache_dir / "pages"
        self._meta_dir = cache_dir / "meta"

    @property
    def cache_dir(self) -> Path:
        """Root cache directory."""
        return self._cache_dir

    def _ensure_cache_dir(self) -> None:
        """Create cache directory with .gitignore if it doesn't exist."""
        if not self._cache_dir.exists():
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            gitignore_path = self._cache_dir / ".gitignore"
            gitignore_path.write_text(self._GITIGNORE_CONTENT, encoding="utf-8")

    def get(self, key: str, source_mtime: float) -> CacheEntry | None:
        """Retrieve cached entry if valid.

        Args:
            key: Item key (e.g., "projects/rover")
            source_mtime: Current mtime of source file

        Returns:
            CacheEntry if cache hit and valid, None otherwise
        """
        html_path = self._pages_dir / f"{key}.html"
        meta_path = self._meta_dir / f"{key}.json"

        if not html_path.exists() or not meta_path.exists():
            return None

        meta = self._read_meta(meta_path)
        if meta is None:
            return None

        if meta["source_mtime"] != source_mtime:
            return None

        try:
            html = html_path.read_text(encoding="utf-8")
        except OSError:
            return None

        return CacheEntry(html=html, meta=meta)

    def set(
        self,
        key: str,
        html: str,
        source_mtime: float,
        toc: list[dict[str, str | int]],
    ) -> None:
        """Store entry in cache.

        Args:
            key: Item key (e.g., "projects/rover")
            html: Rendered HTML content
            source_mtime: Source file mtime for invalidation
            toc: Table of contents entries
        """
        self._ensure_cache_dir()

        html_path = self._pages_dir / f"{key}.html"
        meta_path = self._meta_dir / f"{key}.json"

        html_path.parent.mkdir(parents=True, exist_ok=True)
        meta_path.parent.mkdir(parents=True, exist_ok=True)

        # An entry is valid only while its meta file exists
        meta_path.unlink(missing_ok=True)
        _write_atomic(html_path, html)

        meta: CachedMetadata = {"source_mtime": source_mtime, "toc": toc}
        _write_atomic(meta_path, json.dumps(meta))

    def invalidate(self, key: str) -> None:
        """Remove entry from cache."""
        html_path = self._pages_dir / f"{key}.html"
        meta_path = self._meta_dir / f"{key}.json"

        if html_path.exists():
            html_path.unlink()
        if meta_path.exists():
            meta_path.unlink()

    def clear(self) -> None:
        """Remove all cached entries."""
        if self._pages_dir.exists():
            shutil.rmtree(self._pages_dir)
        if self._meta_dir.exists():
            shutil.rmtree(self._meta_dir)

    def _read_meta(self, meta_path: Path) -> CachedMetadata | None:
        """Read and validate metadata file.

        Args:
            meta_path: Path to metadata JSON file

        Returns:
            CachedMetadata if valid, None otherwise
        """
        try:
            data = json.loads(meta_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None

        if not isinstance(data, dict):
            return None
        if "source_mtime" not in data:
            return None
        if "toc" not in data:
            return None

        return CachedMetadata(source_mtime=data["source_mtime"], toc=data["toc"])


def _write_atomic(path: Path, text: str) -> None:
    """Write text to a sibling temp file, then rename it over path."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class NullCache:
    """Cache that never stores anything, used when caching is disabled."""

    cache_dir: Path | None = None

    def get(self, key: str, source_mtime: float) -> CacheEntry | None:
        return None

    def set(
        self,
        key: str,
        html: str,
        source_mtime: float,
        toc: list[dict[str, str | int]],
    ) -> None:
        pass

    def invalidate(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass
