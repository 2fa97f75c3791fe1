"""Front-matter parsing for content files.

Content files start with a YAML block fenced by ``---`` lines followed by the
Markdown body. Field helpers validate individual values and raise
ContentError, since a malformed content file is an authoring error that must
surface at build time.
"""

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from portfolio.core.terms import to_datetime

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\n(.*?)^---[ \t]*(?:\n|\Z)", re.DOTALL | re.MULTILINE)


class ContentError(Exception):
    """Malformed content file."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


def split_frontmatter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """Split a content document into metadata and body.

    Args:
        text: Raw file content
        path: Source file, used in error messages

    Returns:
        Tuple of (metadata, body). Metadata is empty when the document
        has no front-matter block.

    Raises:
        ContentError: If the YAML is invalid or is not a mapping
    """
    text = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise ContentError(path, f"invalid front-matter: {e}") from e

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise ContentError(path, "front-matter must be a mapping")

    return metadata, text[match.end() :]


def _coerce_date(value: object) -> object:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def require_str(data: dict[str, Any], key: str, path: Path) -> str:
    """Return a required string field."""
    if key not in data or data[key] is None:
        raise ContentError(path, f"missing required field '{key}'")
    value = _coerce_date(data[key])
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ContentError(path, f"'{key}' must be a string")
    return value


def optional_str(data: dict[str, Any], key: str, path: Path) -> str | None:
    """Return an optional string field, None when absent or empty."""
    if data.get(key) in (None, ""):
        return None
    return require_str(data, key, path)


def str_list(
    data: dict[str, Any],
    key: str,
    path: Path,
    *,
    required: bool = False,
) -> list[str]:
    """Return a list-of-strings field."""
    value = data.get(key)
    if value is None:
        if required:
            raise ContentError(path, f"missing required field '{key}'")
        return []
    if not isinstance(value, list):
        raise ContentError(path, f"'{key}' must be a list")
    items: list[str] = []
    for item in value:
        item = _coerce_date(item)
        if isinstance(item, (int, float)) and not isinstance(item, bool):
            item = str(item)
        if not isinstance(item, str):
            raise ContentError(path, f"'{key}' items must be strings")
        items.append(item)
    return items


def flag(data: dict[str, Any], key: str, path: Path) -> bool:
    """Return an optional boolean field, False when absent."""
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ContentError(path, f"'{key}' must be a boolean")
    return value


def choice(
    data: dict[str, Any],
    key: str,
    path: Path,
    allowed: tuple[str, ...],
    *,
    required: bool = False,
) -> str | None:
    """Return a string field restricted to a set of values."""
    value = require_str(data, key, path) if required else optional_str(data, key, path)
    if value is not None and value not in allowed:
        raise ContentError(
            path,
            f"'{key}' must be one of {', '.join(allowed)} (got '{value}')",
        )
    return value


def extra_fields(data: dict[str, Any], known: frozenset[str]) -> dict[str, Any]:
    """Return fields not covered by a schema, with dates normalized."""
    return {key: _coerce_date(value) for key, value in data.items() if key not in known}


def optional_date(data: dict[str, Any], key: str, path: Path) -> str | None:
    """Return an optional date field as an ISO string ("2024-01-15" or "2024-01")."""
    value = optional_str(data, key, path)
    if value is None:
        return None
    try:
        to_datetime(value)
    except ValueError as e:
        raise ContentError(path, f"'{key}' is not a valid date (got '{value}')") from e
    return value
