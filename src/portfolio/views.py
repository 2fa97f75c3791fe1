"""HTML page rendering.

Maps site routes to content selections and renders them with Jinja2
templates. Views only select content (featured filter, first-N truncation);
all formatting lives in the templates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from portfolio.config import Config, PagesConfig, SiteConfig
from portfolio.core.cache import FileCache, NullCache
from portfolio.core.content import ContentItem, ContentLoader, only_featured, take
from portfolio.core.navigation import build_navigation
from portfolio.core.renderer import BodyRenderer
from portfolio.core.terms import get_current_academic_term, group_items_by_term
from portfolio.core.text import format_date_range, get_year, slugify, truncate
from portfolio.core.types import Category, URLPath

logger = logging.getLogger(__name__)

# List page heading and detail template per category
_CATEGORY_PAGES: dict[Category, tuple[str, str]] = {
    Category.PROJECTS: ("Projects", "project.html"),
    Category.JOBS: ("Experience", "job.html"),
    Category.EDUCATION: ("Education", "education.html"),
    Category.EXTRACURRICULAR: ("Extracurricular", "extracurricular.html"),
    Category.VOLUNTEER: ("Volunteer", "volunteer.html"),
}


class PageNotFound(Exception):
    """Raised when a path matches no route or no content item."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Page not found: {path}")
        self.path = path


@dataclass
class Page:
    """Resolved route: template, title and template context."""

    path: URLPath
    template: str
    title: str
    context: dict[str, Any] = field(default_factory=dict)


def create_environment() -> Environment:
    """Create the Jinja2 environment for the bundled templates."""
    env = Environment(
        loader=PackageLoader("portfolio", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["date_range"] = format_date_range
    env.filters["truncate_text"] = truncate
    env.filters["year"] = get_year
    env.filters["slugify"] = slugify
    return env


def normalize_path(path: str) -> URLPath:
    """Normalize a request path ("projects/" -> "/projects")."""
    stripped = path.strip("/")
    return URLPath(f"/{stripped}" if stripped else "/")


class PageViews:
    """Renders site pages from the content store."""

    def __init__(
        self,
        site: SiteConfig,
        pages: PagesConfig,
        loader: ContentLoader,
        renderer: BodyRenderer,
        *,
        live_reload: bool = False,
    ) -> None:
        """Initialize views.

        Args:
            site: Site identity and navigation
            pages: Preview section sizes
            loader: Content loader
            renderer: Renderer for item bodies
            live_reload: Include the live reload client script in pages
        """
        self._site = site
        self._pages = pages
        self._loader = loader
        self._renderer = renderer
        self._live_reload = live_reload
        self._env = create_environment()

    @property
    def loader(self) -> ContentLoader:
        return self._loader

    @property
    def renderer(self) -> BodyRenderer:
        return self._renderer

    def render(self, path: str) -> str:
        """Render the page at a path.

        Raises:
            PageNotFound: If no route or content item matches the path
            ContentError: If a content file is malformed
        """
        page = self.resolve(path)
        logger.debug("Rendering %s with %s", page.path, page.template)
        return self._render_template(page)

    def render_not_found(self, path: str) -> str:
        """Render the not-found page for a path."""
        page = Page(
            path=normalize_path(path),
            template="not_found.html",
            title=self._title("Page not found"),
            context={"requested_path": path},
        )
        return self._render_template(page)

    def resolve(self, path: str) -> Page:
        """Resolve a path to a page.

        Raises:
            PageNotFound: If no route or content item matches the path
        """
        url = normalize_path(path)
        parts = url.strip("/").split("/") if url != "/" else []

        if not parts:
            return self._home(url)

        if len(parts) == 1:
            if parts[0] == "about":
                return self._about(url)
            if parts[0] == "resume":
                return self._resume(url)
            if parts[0] == "photography":
                return self._photography(url)

        category = Category.from_route(parts[0])
        if category is not None:
            if len(parts) == 1:
                return self._category_list(url, category)
            if len(parts) == 2:
                return self._category_detail(url, category, parts[1])

        raise PageNotFound(url)

    def iter_paths(self) -> Iterator[URLPath]:
        """Yield every renderable route, detail pages included."""
        yield URLPath("/")
        yield URLPath("/about")
        for category in _CATEGORY_PAGES:
            yield category.route
            for slug in self._loader.get_slugs(category):
                yield URLPath(f"{category.route}/{slug}")
        yield URLPath("/resume")
        yield URLPath("/photography")

    def _home(self, url: URLPath) -> Page:
        timeline = take(self._loader.get_timeline(), self._pages.timeline_items)
        _, current_term = get_current_academic_term()
        return Page(
            path=url,
            template="home.html",
            title=f"{self._site.name} | Portfolio",
            context={
                "featured_projects": take(
                    self._loader.get_featured_projects(), self._pages.featured_projects
                ),
                "featured_jobs": take(
                    only_featured(self._loader.get_jobs()), self._pages.featured_jobs
                ),
                "timeline": timeline,
                "timeline_by_term": group_items_by_term(timeline),
                "current_term": current_term,
            },
        )

    def _about(self, url: URLPath) -> Page:
        return Page(
            path=url,
            template="about.html",
            title=self._title("About"),
            context={
                "jobs": take(self._loader.get_jobs(), self._pages.about_jobs),
                "education": self._loader.get_education(),
                "volunteer": self._loader.get_volunteer(),
            },
        )

    def _resume(self, url: URLPath) -> Page:
        return Page(path=url, template="resume.html", title=self._title("Resume"))

    def _photography(self, url: URLPath) -> Page:
        return Page(path=url, template="photography.html", title=self._title("Photography"))

    def _category_list(self, url: URLPath, category: Category) -> Page:
        heading, _ = _CATEGORY_PAGES[category]
        return Page(
            path=url,
            template="list.html",
            title=self._title(heading),
            context={
                "heading": heading,
                "category": category,
                "items": self._loader.get_items(category),
            },
        )

    def _category_detail(self, url: URLPath, category: Category, slug: str) -> Page:
        item: ContentItem[Any] | None = self._loader.get_item(category, slug)
        if item is None:
            raise PageNotFound(url)

        heading, template = _CATEGORY_PAGES[category]
        result = self._renderer.render(item, category)
        return Page(
            path=url,
            template=template,
            title=self._title(item.frontmatter.display_title),
            context={
                "heading": heading,
                "category": category,
                "item": item,
                "fm": item.frontmatter,
                "body_html": result.html,
                "toc": result.toc,
            },
        )

    def _title(self, page_title: str) -> str:
        return f"{page_title} | {self._site.name}"

    def _render_template(self, page: Page) -> str:
        template = self._env.get_template(page.template)
        return template.render(
            page=page,
            site=self._site,
            nav=build_navigation(self._site.nav_items, page.path),
            year=date.today().year,
            live_reload=self._live_reload,
            **page.context,
        )


def create_views(config: Config, *, live_reload: bool = False) -> PageViews:
    """Wire loader, render cache and renderer for a configuration.

    Args:
        config: Application configuration
        live_reload: Include the live reload client script in pages

    Returns:
        PageViews reading from config.content.source_dir
    """
    cache: FileCache | NullCache
    if config.content.cache_enabled:
        cache = FileCache(config.content.cache_dir)
    else:
        cache = NullCache()

    return PageViews(
        config.site,
        config.pages,
        ContentLoader(config.content.source_dir),
        BodyRenderer(cache),
        live_reload=live_reload,
    )
