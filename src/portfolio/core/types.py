"""Core type definitions."""

from __future__ import annotations

from enum import StrEnum
from typing import NewType

# URL path for routing (e.g., "/projects", "/experience/acme")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)


class Category(StrEnum):
    """Content categories, one directory each under the content store."""

    PROJECTS = "projects"
    JOBS = "jobs"
    EDUCATION = "education"
    VOLUNTEER = "volunteer"
    EXTRACURRICULAR = "extracurricular"

    @property
    def route(self) -> URLPath:
        """Route prefix of list and detail pages for this category."""
        if self is Category.JOBS:
            return URLPath("/experience")
        return URLPath(f"/{self.value}")

    @classmethod
    def from_route(cls, segment: str) -> Category | None:
        """Resolve the first path segment of a page route to a category."""
        for category in cls:
            if category.route == f"/{segment}":
                return category
        return None
