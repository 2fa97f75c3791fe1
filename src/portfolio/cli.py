"""CLI interface for the portfolio site.

Command-line tool for serving, building and checking the site.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from portfolio.config import Config
from portfolio.core.content import ContentLoader
from portfolio.core.frontmatter import ContentError
from portfolio.core.types import Category


@click.group()
def cli() -> None:
    """Portfolio - personal site built from Markdown content."""


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover portfolio.toml)",
)

source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Content source directory (overrides config)",
)


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--cache-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Cache directory (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
@click.option(
    "--cache/--no-cache",
    default=None,
    help="Enable/disable caching (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    cache_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
    live_reload: bool | None,
    cache: bool | None,
) -> None:
    """Start the development server."""
    from portfolio.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        source_dir=source_dir,
        cache_dir=cache_dir,
        cache_enabled=cache,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Content directory: {config.content.source_dir}")
    if config.content.cache_enabled:
        click.echo(f"Cache directory: {config.content.cache_dir}")
    else:
        click.echo("Cache: disabled")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config, verbose=verbose)


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def build(
    config_path: Path | None,
    source_dir: Path | None,
    output_dir: Path | None,
    verbose: bool,
) -> None:
    """Export every page of the site to static HTML."""
    from portfolio.export import StaticExporter
    from portfolio.views import create_views

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        source_dir=source_dir,
        output_dir=output_dir,
    )

    click.echo(f"Building {config.content.source_dir} -> {config.build.output_dir}")
    exporter = StaticExporter(create_views(config), config.build.output_dir)
    try:
        written = exporter.export()
    except ContentError as e:
        _fail(str(e))

    click.echo(click.style(f"Wrote {len(written)} pages", fg="green", bold=True))


@cli.command()
@config_option
@source_dir_option
def check(config_path: Path | None, source_dir: Path | None) -> None:
    """Validate every content file and print item counts per category."""
    config = _load_config(config_path).with_overrides(source_dir=source_dir)
    loader = ContentLoader(config.content.source_dir)

    for category in Category:
        try:
            items = loader.get_items(category)
        except ContentError as e:
            _fail(str(e))
        featured = sum(1 for item in items if item.featured)
        click.echo(f"{category.value}: {len(items)} item(s), {featured} featured")

    click.echo(click.style("All content files are valid", fg="green"))
