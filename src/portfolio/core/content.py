"""Content store loader.

Reads content files from the content directory and returns typed records:

    content/
    ├── projects/*.mdx
    ├── jobs/*.mdx
    ├── education/*.mdx
    ├── volunteer/*.mdx
    └── extracurricular/*.mdx

Each file holds YAML front-matter and a Markdown body. Listings are sorted by
academic term, newest first. Files are re-read on every call, so edits show
up without restarting the server.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar, Generic, TypeVar, cast

from portfolio.core.frontmatter import (
    ContentError,
    choice,
    extra_fields,
    flag,
    optional_date,
    optional_str,
    require_str,
    split_frontmatter,
    str_list,
)
from portfolio.core.terms import term_sort_key_for
from portfolio.core.types import Category

logger = logging.getLogger(__name__)

CONTENT_EXTENSIONS = (".mdx", ".md")

# Python field name -> authored front-matter key
_AUTHORED_KEYS = {
    "start_date": "startDate",
    "end_date": "endDate",
    "cover_image": "coverImage",
    "gallery_images": "galleryImages",
    "project_type": "projectType",
}

_COMMON_KEYS = frozenset(
    {
        "term",
        "description",
        "startDate",
        "endDate",
        "image",
        "coverImage",
        "featured",
        "galleryImages",
    }
)


def _common_fields(data: dict[str, Any], path: Path, known: frozenset[str]) -> dict[str, Any]:
    return {
        "term": require_str(data, "term", path),
        "description": optional_str(data, "description", path),
        "start_date": optional_date(data, "startDate", path),
        "end_date": optional_date(data, "endDate", path),
        "image": optional_str(data, "image", path),
        "cover_image": optional_str(data, "coverImage", path),
        "featured": flag(data, "featured", path),
        "gallery_images": tuple(str_list(data, "galleryImages", path)),
        "extra": extra_fields(data, _COMMON_KEYS | known),
    }


@dataclass(frozen=True, kw_only=True)
class Frontmatter(ABC):
    """Fields shared by every content category."""

    term: str
    description: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    image: str | None = None
    cover_image: str | None = None
    featured: bool = False
    gallery_images: tuple[str, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    KEYS: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    @abstractmethod
    def from_dict(cls, data: dict[str, Any], path: Path) -> Frontmatter:
        """Build front-matter from parsed YAML.

        Raises:
            ContentError: If a required field is missing or has the wrong type
        """

    @property
    def display_title(self) -> str:
        return cast(str, getattr(self, "title"))

    @property
    def display_subtitle(self) -> str:
        return ""

    @property
    def display_tags(self) -> tuple[str, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using the authored (camelCase) keys."""
        result: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            result[_AUTHORED_KEYS.get(f.name, f.name)] = value
        result.update(self.extra)
        return result


@dataclass(frozen=True, kw_only=True)
class ProjectFrontmatter(Frontmatter):
    title: str
    tags: tuple[str, ...]
    github: str | None = None
    demo: str | None = None
    status: str | None = None
    project_type: tuple[str, ...] = ()

    KEYS: ClassVar[frozenset[str]] = frozenset(
        {"title", "tags", "github", "demo", "status", "projectType", "date"}
    )
    STATUSES: ClassVar[tuple[str, ...]] = ("completed", "in-progress", "archived")

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path) -> ProjectFrontmatter:
        common = _common_fields(data, path, cls.KEYS)
        # Older files carry "date" instead of "startDate"
        if common["start_date"] is None:
            common["start_date"] = optional_date(data, "date", path)
        return cls(
            **common,
            title=require_str(data, "title", path),
            tags=tuple(str_list(data, "tags", path, required=True)),
            github=optional_str(data, "github", path),
            demo=optional_str(data, "demo", path),
            status=choice(data, "status", path, cls.STATUSES),
            project_type=tuple(str_list(data, "projectType", path)),
        )

    @property
    def display_subtitle(self) -> str:
        return " • ".join(self.tags[:3])

    @property
    def display_tags(self) -> tuple[str, ...]:
        return self.tags


@dataclass(frozen=True, kw_only=True)
class JobFrontmatter(Frontmatter):
    title: str
    company: str
    location: str
    technologies: tuple[str, ...] = ()
    type: str | None = None

    KEYS: ClassVar[frozenset[str]] = frozenset(
        {"title", "company", "location", "technologies", "type"}
    )
    TYPES: ClassVar[tuple[str, ...]] = ("full-time", "part-time", "internship", "contract")

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path) -> JobFrontmatter:
        return cls(
            **_common_fields(data, path, cls.KEYS),
            title=require_str(data, "title", path),
            company=require_str(data, "company", path),
            location=require_str(data, "location", path),
            technologies=tuple(str_list(data, "technologies", path)),
            type=choice(data, "type", path, cls.TYPES),
        )

    @property
    def display_subtitle(self) -> str:
        return self.company

    @property
    def display_tags(self) -> tuple[str, ...]:
        return self.technologies


@dataclass(frozen=True, kw_only=True)
class EducationFrontmatter(Frontmatter):
    institution: str
    degree: str
    field: str
    location: str | None = None
    gpa: str | None = None
    honors: tuple[str, ...] = ()
    coursework: tuple[str, ...] = ()

    KEYS: ClassVar[frozenset[str]] = frozenset(
        {"institution", "degree", "field", "location", "gpa", "honors", "coursework"}
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path) -> EducationFrontmatter:
        return cls(
            **_common_fields(data, path, cls.KEYS),
            institution=require_str(data, "institution", path),
            degree=require_str(data, "degree", path),
            field=require_str(data, "field", path),
            location=optional_str(data, "location", path),
            gpa=optional_str(data, "gpa", path),
            honors=tuple(str_list(data, "honors", path)),
            coursework=tuple(str_list(data, "coursework", path)),
        )

    @property
    def display_title(self) -> str:
        return self.degree

    @property
    def display_subtitle(self) -> str:
        return self.institution

    @property
    def display_tags(self) -> tuple[str, ...]:
        return self.coursework

    @property
    def summary(self) -> str:
        """Field of study with GPA when known (e.g., "Computer Engineering • GPA: 3.9")."""
        return f"{self.field} • GPA: {self.gpa}" if self.gpa else self.field


@dataclass(frozen=True, kw_only=True)
class VolunteerFrontmatter(Frontmatter):
    title: str
    organization: str

    KEYS: ClassVar[frozenset[str]] = frozenset({"title", "organization"})

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path) -> VolunteerFrontmatter:
        return cls(
            **_common_fields(data, path, cls.KEYS),
            title=require_str(data, "title", path),
            organization=require_str(data, "organization", path),
        )

    @property
    def display_subtitle(self) -> str:
        return self.organization


@dataclass(frozen=True, kw_only=True)
class ExtracurricularFrontmatter(Frontmatter):
    title: str
    type: str
    location: str | None = None
    tags: tuple[str, ...] = ()
    link: str | None = None
    award: str | None = None

    KEYS: ClassVar[frozenset[str]] = frozenset(
        {"title", "type", "location", "tags", "link", "award"}
    )
    TYPES: ClassVar[tuple[str, ...]] = ("competition", "workshop", "photography", "event", "other")

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path) -> ExtracurricularFrontmatter:
        return cls(
            **_common_fields(data, path, cls.KEYS),
            title=require_str(data, "title", path),
            type=cast(str, choice(data, "type", path, cls.TYPES, required=True)),
            location=optional_str(data, "location", path),
            tags=tuple(str_list(data, "tags", path)),
            link=optional_str(data, "link", path),
            award=optional_str(data, "award", path),
        )

    @property
    def display_subtitle(self) -> str:
        return self.description or ""

    @property
    def display_tags(self) -> tuple[str, ...]:
        return self.tags


FRONTMATTER_TYPES: dict[Category, type[Frontmatter]] = {
    Category.PROJECTS: ProjectFrontmatter,
    Category.JOBS: JobFrontmatter,
    Category.EDUCATION: EducationFrontmatter,
    Category.VOLUNTEER: VolunteerFrontmatter,
    Category.EXTRACURRICULAR: ExtracurricularFrontmatter,
}

F = TypeVar("F", bound=Frontmatter)
T = TypeVar("T")


@dataclass(frozen=True)
class ContentItem(Generic[F]):
    """A loaded content file."""

    slug: str
    frontmatter: F
    body: str
    source_path: Path

    @property
    def featured(self) -> bool:
        return self.frontmatter.featured

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "slug": self.slug,
            "frontmatter": self.frontmatter.to_dict(),
            "content": self.body,
        }


@dataclass(frozen=True)
class TimelineItem:
    """Entry of the combined timeline across content categories."""

    type: str
    term: str
    title: str
    subtitle: str
    date: str | None = None
    end_date: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    slug: str | None = None
    link: str | None = None
    image: str | None = None
    github: str | None = None
    demo: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type,
            "term": self.term,
            "date": self.date,
            "endDate": self.end_date,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "tags": list(self.tags),
            "slug": self.slug,
            "link": self.link,
            "image": self.image,
            "github": self.github,
            "demo": self.demo,
        }


def sort_by_term(
    items: Sequence[ContentItem[F]],
    *,
    newest_first: bool = True,
) -> list[ContentItem[F]]:
    """Sort items by front-matter term; ties keep their original order."""
    return sorted(
        items,
        key=lambda item: term_sort_key_for(item.frontmatter.term),
        reverse=newest_first,
    )


def only_featured(items: Sequence[ContentItem[F]]) -> list[ContentItem[F]]:
    """Keep featured items, preserving their relative order."""
    return [item for item in items if item.featured]


def take(items: Sequence[T], n: int) -> list[T]:
    """Return the first n items, or all of them when there are fewer.

    Raises:
        ValueError: If n is negative
    """
    if n < 0:
        raise ValueError(f"Cannot take a negative number of items: {n}")
    return list(items[:n])


class ContentLoader:
    """Loads content items from the content directory."""

    def __init__(self, content_dir: Path) -> None:
        """Initialize loader.

        Args:
            content_dir: Root directory holding one subdirectory per category
        """
        self._content_dir = content_dir

    @property
    def content_dir(self) -> Path:
        """Root content directory."""
        return self._content_dir

    def get_items(self, category: Category) -> list[ContentItem[Any]]:
        """Load every item of a category, newest term first.

        Returns an empty list when the category directory does not exist.

        Raises:
            ContentError: If any file is malformed
        """
        items = [self._read_item(category, path) for path in self._content_files(category)]
        logger.debug("Loaded %d %s item(s) from %s", len(items), category, self._content_dir)
        return sort_by_term(items)

    def get_item(self, category: Category, slug: str) -> ContentItem[Any] | None:
        """Load a single item by slug.

        Returns:
            The matching item, or None when no file has that slug
        """
        for path in self._content_files(category):
            if path.stem == slug:
                return self._read_item(category, path)
        return None

    def get_slugs(self, category: Category) -> list[str]:
        """List slugs of a category in file name order, without parsing files."""
        return [path.stem for path in self._content_files(category)]

    def get_projects(self) -> list[ContentItem[ProjectFrontmatter]]:
        return self.get_items(Category.PROJECTS)

    def get_featured_projects(self) -> list[ContentItem[ProjectFrontmatter]]:
        return only_featured(self.get_projects())

    def get_project_by_slug(self, slug: str) -> ContentItem[ProjectFrontmatter] | None:
        return self.get_item(Category.PROJECTS, slug)

    def get_all_project_slugs(self) -> list[str]:
        return self.get_slugs(Category.PROJECTS)

    def get_jobs(self) -> list[ContentItem[JobFrontmatter]]:
        return self.get_items(Category.JOBS)

    def get_job_by_slug(self, slug: str) -> ContentItem[JobFrontmatter] | None:
        return self.get_item(Category.JOBS, slug)

    def get_all_job_slugs(self) -> list[str]:
        return self.get_slugs(Category.JOBS)

    def get_education(self) -> list[ContentItem[EducationFrontmatter]]:
        return self.get_items(Category.EDUCATION)

    def get_education_by_slug(self, slug: str) -> ContentItem[EducationFrontmatter] | None:
        return self.get_item(Category.EDUCATION, slug)

    def get_all_education_slugs(self) -> list[str]:
        return self.get_slugs(Category.EDUCATION)

    def get_volunteer(self) -> list[ContentItem[VolunteerFrontmatter]]:
        return self.get_items(Category.VOLUNTEER)

    def get_volunteer_by_slug(self, slug: str) -> ContentItem[VolunteerFrontmatter] | None:
        return self.get_item(Category.VOLUNTEER, slug)

    def get_all_volunteer_slugs(self) -> list[str]:
        return self.get_slugs(Category.VOLUNTEER)

    def get_extracurricular(self) -> list[ContentItem[ExtracurricularFrontmatter]]:
        return self.get_items(Category.EXTRACURRICULAR)

    def get_extracurricular_by_slug(
        self, slug: str
    ) -> ContentItem[ExtracurricularFrontmatter] | None:
        return self.get_item(Category.EXTRACURRICULAR, slug)

    def get_all_extracurricular_slugs(self) -> list[str]:
        return self.get_slugs(Category.EXTRACURRICULAR)

    def get_timeline(self) -> list[TimelineItem]:
        """Build the combined timeline, oldest term first.

        Volunteer work is not part of the timeline.
        """
        items: list[TimelineItem] = []

        for project in self.get_projects():
            fm = project.frontmatter
            items.append(
                TimelineItem(
                    type="project",
                    term=fm.term,
                    date=fm.start_date,
                    end_date=fm.end_date,
                    title=fm.title,
                    subtitle=fm.display_subtitle,
                    description=fm.description,
                    tags=fm.tags,
                    slug=project.slug,
                    link=f"{Category.PROJECTS.route}/{project.slug}",
                    image=fm.image,
                    github=fm.github,
                    demo=fm.demo,
                )
            )

        for job in self.get_jobs():
            jfm = job.frontmatter
            items.append(
                TimelineItem(
                    type="job",
                    term=jfm.term,
                    date=jfm.start_date,
                    end_date=jfm.end_date,
                    title=jfm.title,
                    subtitle=jfm.company,
                    description=jfm.description,
                    tags=jfm.technologies,
                    link=f"{Category.JOBS.route}/{job.slug}",
                    image=jfm.image,
                )
            )

        for education in self.get_education():
            efm = education.frontmatter
            items.append(
                TimelineItem(
                    type="education",
                    term=efm.term,
                    date=efm.start_date,
                    end_date=efm.end_date,
                    title=efm.degree,
                    subtitle=efm.institution,
                    description=efm.summary,
                    tags=efm.coursework,
                    link=f"{Category.EDUCATION.route}/{education.slug}",
                    image=efm.image,
                )
            )

        for activity in self.get_extracurricular():
            xfm = activity.frontmatter
            items.append(
                TimelineItem(
                    type="extracurricular",
                    term=xfm.term,
                    date=xfm.start_date,
                    end_date=xfm.end_date,
                    title=xfm.title,
                    subtitle=xfm.description or "",
                    description=xfm.description,
                    tags=xfm.tags,
                    slug=activity.slug,
                    link=xfm.link,
                    image=xfm.image,
                )
            )

        return sorted(items, key=lambda item: term_sort_key_for(item.term))

    def _content_files(self, category: Category) -> list[Path]:
        """List content files of a category, sorted by name.

        Raises:
            ContentError: If two files share a slug (e.g., a.md and a.mdx)
        """
        directory = self._content_dir / category.value
        if not directory.is_dir():
            return []

        files = sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix in CONTENT_EXTENSIONS
        )

        seen: dict[str, Path] = {}
        for path in files:
            if path.stem in seen:
                other = seen[path.stem].name
                raise ContentError(path, f"duplicate slug '{path.stem}' (also {other})")
            seen[path.stem] = path
        return files

    def _read_item(self, category: Category, path: Path) -> ContentItem[Any]:
        text = path.read_text(encoding="utf-8")
        metadata, body = split_frontmatter(text, path)
        frontmatter_type = FRONTMATTER_TYPES[category]
        frontmatter = frontmatter_type.from_dict(metadata, path)
        return ContentItem(slug=path.stem, frontmatter=frontmatter, body=body, source_path=path)
