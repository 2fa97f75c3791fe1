"""Header navigation built from the configured nav items.

The menu is flat: items keep the order they are declared in and are marked
active based on the current request path.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio.config import NavItem


@dataclass(frozen=True)
class NavLink:
    """Navigation item prepared for rendering."""

    label: str
    href: str
    is_anchor: bool
    active: bool

    def to_dict(self) -> dict[str, str | bool]:
        """Convert to dictionary for JSON serialization."""
        return {
            "label": self.label,
            "href": self.href,
            "isAnchor": self.is_anchor,
            "active": self.active,
        }


def is_active(href: str, current_path: str) -> bool:
    """Check whether a nav href matches the current path.

    The root link is active only on the home page; any other link is active
    for its own route and everything below it.
    """
    if href == "/":
        return current_path == "/"
    return current_path.startswith(href)


def build_navigation(nav_items: Iterable[NavItem], current_path: str = "/") -> list[NavLink]:
    """Build navigation links in declared order.

    Args:
        nav_items: Configured navigation entries
        current_path: Path of the page being rendered

    Returns:
        One NavLink per configured item
    """
    return [
        NavLink(
            label=item.label,
            href=item.href,
            is_anchor=item.is_anchor,
            active=is_active(item.href, current_path),
        )
        for item in nav_items
    ]
