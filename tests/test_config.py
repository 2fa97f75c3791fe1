"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest

from portfolio.config import Config, NavItem, SiteConfig


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "portfolio.toml"
        config_file.write_text("""
[server]
host = "0.0.0.0"
port = 3000

[content]
source_dir = "site-content"
cache_dir = ".portfolio-cache"
cache_enabled = false

[build]
output_dir = "public"

[live_reload]
enabled = false
watch_patterns = ["**/*.mdx"]

[pages]
featured_projects = 6
timeline_items = 12
""")

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.content.source_dir == tmp_path / "site-content"
        assert config.content.cache_dir == tmp_path / ".portfolio-cache"
        assert config.content.cache_enabled is False
        assert config.build.output_dir == tmp_path / "public"
        assert config.live_reload.enabled is False
        assert config.live_reload.watch_patterns == ["**/*.mdx"]
        assert config.pages.featured_projects == 6
        assert config.pages.featured_jobs == 3
        assert config.pages.timeline_items == 12
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(self, tmp_path: Path) -> None:
        """Load minimal config with defaults relative to config file."""
        config_file = tmp_path / "portfolio.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.content.source_dir == tmp_path / "content"
        assert config.content.cache_dir == tmp_path / ".cache"
        assert config.build.output_dir == tmp_path / "dist"
        assert config.live_reload.enabled is True
        assert config.pages.featured_projects == 4
        assert config.pages.featured_jobs == 3
        assert config.pages.timeline_items == 8
        assert config.pages.about_jobs == 2
        assert config.site == SiteConfig()

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        """Raise FileNotFoundError for missing explicit config file."""
        config_file = tmp_path / "nonexistent.toml"

        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(config_file)

    def test__no_path_no_discovery__returns_defaults(self) -> None:
        """Return defaults when no config file found."""
        with patch.object(Config, "_discover_config", return_value=None):
            config = Config.load()

        assert config.content.source_dir == Path("content")
        assert config.content.cache_dir == Path(".cache")
        assert config.config_path is None

    def test__invalid_toml__raises_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "portfolio.toml"
        config_file.write_text("[server\nport = ")

        with pytest.raises(ValueError, match="Invalid TOML"):
            Config.load(config_file)


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test__config_in_current_dir__found(self, tmp_path: Path) -> None:
        """Find config in current directory."""
        config_file = tmp_path / "portfolio.toml"
        config_file.write_text("[server]\nport = 9000")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__config_in_parent_dir__found(self, tmp_path: Path) -> None:
        """Find config in parent directory."""
        config_file = tmp_path / "portfolio.toml"
        config_file.write_text("[server]\nport = 9000")
        subdir = tmp_path / "content" / "projects"
        subdir.mkdir(parents=True)

        with patch("pathlib.Path.cwd", return_value=subdir):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__no_config__returns_none(self, tmp_path: Path) -> None:
        """Return None when no config found."""
        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered is None


class TestSectionValidation:
    """Tests for per-key type validation."""

    @pytest.mark.parametrize(
        ("toml", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ('[server]\nport = "8080"', "server.port must be an integer"),
            ("[server]\nport = true", "server.port must be an integer"),
            ("[content]\nsource_dir = 1", "content.source_dir must be a string"),
            ('[content]\ncache_enabled = "no"', "content.cache_enabled must be a boolean"),
            ("[build]\noutput_dir = 1", "build.output_dir must be a string"),
            ('[live_reload]\nwatch_patterns = "*.md"', "live_reload.watch_patterns must be a list"),
            ("[pages]\nfeatured_projects = -1", "pages.featured_projects must be a non-negative"),
            ("[site]\nname = 1", "site.name must be a string"),
            ("[site.social]\ngithub = 1", "site.social.github must be a string"),
            ("[[site.nav]]\nlabel = 'Home'", "site.nav.href must be a string"),
        ],
    )
    def test__invalid_value__raises_value_error(
        self, tmp_path: Path, toml: str, message: str
    ) -> None:
        """Name the offending key in the error."""
        config_file = tmp_path / "portfolio.toml"
        config_file.write_text(toml)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)


class TestSiteConfig:
    """Tests for the [site] section."""

    def test__defaults__match_site_identity(self) -> None:
        """Default identity, social links and nav order."""
        site = SiteConfig()

        assert site.name == "Achal Patel"
        assert site.email == "Achalypatel3403@gmail.com"
        assert site.social.github == "https://github.com/ac-pate"
        assert site.social.twitter is None
        assert [item.label for item in site.nav_items] == [
            "About",
            "Projects",
            "Experience",
            "Extracurricular",
            "Resume",
            "Photography",
        ]
        assert site.resume_url.endswith("/releases/latest/download/resume.pdf")

    def test__site_section__overrides_identity_and_nav(self, tmp_path: Path) -> None:
        """Override site fields and replace the nav in declared order."""
        config_file = tmp_path / "portfolio.toml"
        config_file.write_text("""
[site]
name = "Jane Doe"
email = "jane@example.com"

[site.social]
twitter = "https://twitter.com/jane"

[[site.nav]]
label = "Work"
href = "/projects"

[[site.nav]]
label = "Contact"
href = "#contact"
is_anchor = true
""")

        site = Config.load(config_file).site

        assert site.name == "Jane Doe"
        assert site.email == "jane@example.com"
        assert site.title == SiteConfig().title
        assert site.social.github == "https://github.com/ac-pate"
        assert site.social.twitter == "https://twitter.com/jane"
        assert site.nav_items == (
            NavItem(label="Work", href="/projects"),
            NavItem(label="Contact", href="#contact", is_anchor=True),
        )

    def test__to_dict__uses_camel_case(self) -> None:
        data = SiteConfig().to_dict()

        assert data["navItems"][0] == {"label": "About", "href": "/about", "isAnchor": False}
        assert data["social"]["linkedin"] == "https://linkedin.com/in/achal-patel"
        assert "resumeUrl" in data


class TestWithOverrides:
    """Tests for Config.with_overrides method."""

    def test__no_overrides__returns_same_values(self) -> None:
        """When no overrides are provided, values remain unchanged."""
        original = Config._default()

        result = original.with_overrides()

        assert result == original

    def test__overrides__applied_to_sections(self) -> None:
        """Non-None values replace config values."""
        original = Config._default()

        result = original.with_overrides(
            host="0.0.0.0",
            port=9000,
            source_dir=Path("/srv/content"),
            cache_enabled=False,
            output_dir=Path("/srv/out"),
            live_reload_enabled=False,
        )

        assert result.server.host == "0.0.0.0"
        assert result.server.port == 9000
        assert result.content.source_dir == Path("/srv/content")
        assert result.content.cache_dir == original.content.cache_dir
        assert result.content.cache_enabled is False
        assert result.build.output_dir == Path("/srv/out")
        assert result.live_reload.enabled is False

    def test__original__not_modified(self) -> None:
        """Overrides return a new Config."""
        original = Config._default()

        original.with_overrides(port=9000)

        assert original.server.port == 8080
