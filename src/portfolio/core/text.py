"""Text formatting helpers used by templates."""

import re

from portfolio.core.terms import to_datetime

_NON_WORD_RE = re.compile(r"[^\w ]+")
_SPACES_RE = re.compile(r" +")


def format_date(value: str) -> str:
    """Format a date as "Jan 2024"."""
    return to_datetime(value).strftime("%b %Y")


def format_date_range(start: str | None, end: str | None = None) -> str:
    """Format a date range as "Jan 2024 — Mar 2024" or "Jan 2024 — Present".

    Returns an empty string when there is no start date.
    """
    if not start:
        return ""
    end_label = format_date(end) if end else "Present"
    return f"{format_date(start)} — {end_label}"


def get_year(value: str) -> int:
    return to_datetime(value).year


def slugify(text: str) -> str:
    """Convert text to a URL-friendly slug ("Hello, World" -> "hello-world")."""
    return _SPACES_RE.sub("-", _NON_WORD_RE.sub("", text.lower()))


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length characters, marking the cut with "..."."""
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."
