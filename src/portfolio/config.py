"""Configuration management for the portfolio site.

Supports TOML configuration format with auto-discovery. The ``[site]`` table
holds the site-wide identity (name, contact details, navigation) that every
page reads; the other tables configure serving and building.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "portfolio.toml"


@dataclass(frozen=True)
class NavItem:
    """Navigation menu entry."""

    label: str
    href: str
    is_anchor: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"label": self.label, "href": self.href, "isAnchor": self.is_anchor}


@dataclass(frozen=True)
class SocialLinks:
    """Social profile URLs."""

    github: str
    linkedin: str
    twitter: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"github": self.github, "linkedin": self.linkedin, "twitter": self.twitter}


DEFAULT_NAV_ITEMS: tuple[NavItem, ...] = (
    NavItem(label="About", href="/about"),
    NavItem(label="Projects", href="/projects"),
    NavItem(label="Experience", href="/experience"),
    NavItem(label="Extracurricular", href="/extracurricular"),
    NavItem(label="Resume", href="/resume"),
    NavItem(label="Photography", href="/photography"),
)


@dataclass(frozen=True)
class SiteConfig:
    """Site identity shown on every page. Read-only for the process lifetime."""

    name: str = "Achal Patel"
    title: str = "Computer Engineering Student | Robotics & Embedded Systems"
    description: str = (
        "Portfolio of Achal Patel - Computer Engineering student at Concordia University, "
        "passionate about robotics, embedded systems, and autonomous systems."
    )
    tagline: str = "Building intelligent machines, one system at a time."
    email: str = "Achalypatel3403@gmail.com"
    social: SocialLinks = field(
        default_factory=lambda: SocialLinks(
            github="https://github.com/ac-pate",
            linkedin="https://linkedin.com/in/achal-patel",
        )
    )
    nav_items: tuple[NavItem, ...] = DEFAULT_NAV_ITEMS
    resume_repo: str = "https://github.com/ac-pate/LaTeX-Resume"
    resume_url: str = "https://github.com/ac-pate/LaTeX-Resume/releases/latest/download/resume.pdf"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "tagline": self.tagline,
            "email": self.email,
            "social": self.social.to_dict(),
            "navItems": [item.to_dict() for item in self.nav_items],
            "resumeRepo": self.resume_repo,
            "resumeUrl": self.resume_url,
        }


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content store configuration."""

    source_dir: Path = field(default_factory=lambda: Path("content"))
    cache_dir: Path = field(default_factory=lambda: Path(".cache"))
    cache_enabled: bool = True


@dataclass
class BuildConfig:
    """Static export configuration."""

    output_dir: Path = field(default_factory=lambda: Path("dist"))


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class PagesConfig:
    """How many items the preview sections show."""

    featured_projects: int = 4
    featured_jobs: int = 3
    timeline_items: int = 8
    about_jobs: int = 2


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    build: BuildConfig
    live_reload: LiveReloadConfig
    pages: PagesConfig
    site: SiteConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for portfolio.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            content=ContentConfig(),
            build=BuildConfig(),
            live_reload=LiveReloadConfig(),
            pages=PagesConfig(),
            site=SiteConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            build=cls._parse_build(data.get("build"), config_dir),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            pages=cls._parse_pages(data.get("pages")),
            site=cls._parse_site(data.get("site")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(
                source_dir=config_dir / "content",
                cache_dir=config_dir / ".cache",
            )

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        source_dir = data.get("source_dir", "content")
        if not isinstance(source_dir, str):
            raise ValueError("content.source_dir must be a string")

        cache_dir = data.get("cache_dir", ".cache")
        if not isinstance(cache_dir, str):
            raise ValueError("content.cache_dir must be a string")

        cache_enabled = data.get("cache_enabled", True)
        if not isinstance(cache_enabled, bool):
            raise ValueError("content.cache_enabled must be a boolean")

        return ContentConfig(
            source_dir=config_dir / source_dir,
            cache_dir=config_dir / cache_dir,
            cache_enabled=cache_enabled,
        )

    @classmethod
    def _parse_build(cls, data: object, config_dir: Path) -> BuildConfig:
        if data is None:
            return BuildConfig(output_dir=config_dir / "dist")

        if not isinstance(data, dict):
            raise ValueError("build section must be a dictionary")

        output_dir = data.get("output_dir", "dist")
        if not isinstance(output_dir, str):
            raise ValueError("build.output_dir must be a string")

        return BuildConfig(output_dir=config_dir / output_dir)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        """Parse live_reload configuration section.

        Args:
            data: Raw live_reload section data

        Returns:
            LiveReloadConfig instance
        """
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        watch_patterns: list[str] | None = None
        if watch_patterns_raw is not None:
            if not isinstance(watch_patterns_raw, list):
                raise ValueError("live_reload.watch_patterns must be a list")
            watch_patterns = []
            for item in watch_patterns_raw:
                if not isinstance(item, str):
                    raise ValueError("live_reload.watch_patterns items must be strings")
                watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    @classmethod
    def _parse_pages(cls, data: object) -> PagesConfig:
        if data is None:
            return PagesConfig()

        if not isinstance(data, dict):
            raise ValueError("pages section must be a dictionary")

        defaults = PagesConfig()
        limits: dict[str, int] = {}
        for key in ("featured_projects", "featured_jobs", "timeline_items", "about_jobs"):
            value = data.get(key, getattr(defaults, key))
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"pages.{key} must be a non-negative integer")
            limits[key] = value

        return PagesConfig(**limits)

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section.

        Missing keys fall back to the built-in site identity.

        Args:
            data: Raw site section data

        Returns:
            SiteConfig instance
        """
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        defaults = SiteConfig()
        values: dict[str, Any] = {}
        for key in ("name", "title", "description", "tagline", "email", "resume_repo", "resume_url"):
            value = data.get(key, getattr(defaults, key))
            if not isinstance(value, str):
                raise ValueError(f"site.{key} must be a string")
            values[key] = value

        return SiteConfig(
            **values,
            social=cls._parse_social(data.get("social"), defaults.social),
            nav_items=cls._parse_nav(data.get("nav"), defaults.nav_items),
        )

    @classmethod
    def _parse_social(cls, data: object, defaults: SocialLinks) -> SocialLinks:
        if data is None:
            return defaults

        if not isinstance(data, dict):
            raise ValueError("site.social section must be a dictionary")

        github = data.get("github", defaults.github)
        if not isinstance(github, str):
            raise ValueError("site.social.github must be a string")

        linkedin = data.get("linkedin", defaults.linkedin)
        if not isinstance(linkedin, str):
            raise ValueError("site.social.linkedin must be a string")

        twitter = data.get("twitter", defaults.twitter)
        if twitter is not None and not isinstance(twitter, str):
            raise ValueError("site.social.twitter must be a string")

        return SocialLinks(github=github, linkedin=linkedin, twitter=twitter)

    @classmethod
    def _parse_nav(cls, data: object, defaults: tuple[NavItem, ...]) -> tuple[NavItem, ...]:
        """Parse the [[site.nav]] array of tables, keeping declared order."""
        if data is None:
            return defaults

        if not isinstance(data, list):
            raise ValueError("site.nav must be an array of tables")

        items: list[NavItem] = []
        for entry in data:
            if not isinstance(entry, dict):
                raise ValueError("site.nav entries must be tables")

            label = entry.get("label")
            if not isinstance(label, str):
                raise ValueError("site.nav.label must be a string")

            href = entry.get("href")
            if not isinstance(href, str):
                raise ValueError("site.nav.href must be a string")

            is_anchor = entry.get("is_anchor", False)
            if not isinstance(is_anchor, bool):
                raise ValueError("site.nav.is_anchor must be a boolean")

            items.append(NavItem(label=label, href=href, is_anchor=is_anchor))

        return tuple(items)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        cache_dir: Path | None = None,
        cache_enabled: bool | None = None,
        output_dir: Path | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. This follows
        the immutable pattern - the original Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            source_dir: Override content.source_dir
            cache_dir: Override content.cache_dir
            cache_enabled: Override content.cache_enabled
            output_dir: Override build.output_dir
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if source_dir is not None or cache_dir is not None or cache_enabled is not None:
            content = replace(
                self.content,
                source_dir=source_dir if source_dir is not None else self.content.source_dir,
                cache_dir=cache_dir if cache_dir is not None else self.content.cache_dir,
                cache_enabled=(
                    cache_enabled if cache_enabled is not None else self.content.cache_enabled
                ),
            )

        build = self.build
        if output_dir is not None:
            build = replace(self.build, output_dir=output_dir)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            content=content,
            build=build,
            live_reload=live_reload,
        )
