"""aiohttp server for the portfolio site.

Application factory and route registration for the development server.
"""

import logging

from aiohttp import web

from portfolio.api.config import create_config_routes
from portfolio.api.content import create_content_routes
from portfolio.api.navigation import create_navigation_routes
from portfolio.api.timeline import create_timeline_routes
from portfolio.app_keys import (
    live_reload_enabled_key,
    loader_key,
    renderer_key,
    site_key,
    static_dir_key,
    verbose_key,
    views_key,
)
from portfolio.assets import get_static_dir
from portfolio.config import Config
from portfolio.live import LiveReloadManager, create_live_reload_routes
from portfolio.views import PageNotFound, create_views

logger = logging.getLogger(__name__)

live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)


async def serve_page(request: web.Request) -> web.Response:
    """Render the HTML page for any non-API path.

    Unknown routes and unknown slugs get the not-found page with status 404.
    """
    views = request.app[views_key]
    path = request.match_info["path"]

    try:
        html = views.render(path)
    except PageNotFound as e:
        if request.app[verbose_key]:
            logger.info("404 %s", e.path)
        return web.Response(text=views.render_not_found(path), status=404, content_type="text/html")

    return web.Response(text=html, content_type="text/html")


def create_app(config: Config, *, verbose: bool = False) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        verbose: Enable verbose output (log 404s)

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    views = create_views(config, live_reload=config.live_reload.enabled)

    app[views_key] = views
    app[loader_key] = views.loader
    app[renderer_key] = views.renderer
    app[site_key] = config.site
    app[verbose_key] = verbose
    app[live_reload_enabled_key] = config.live_reload.enabled

    # API routes (must be registered first to take precedence over page routes)
    app.router.add_routes(create_config_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_content_routes())
    app.router.add_routes(create_timeline_routes())

    # Live reload WebSocket endpoint
    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.content.source_dir,
            watch_patterns=config.live_reload.watch_patterns,
            cache=views.renderer.cache,
        )
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    # Static file serving (bundled assets)
    static_dir = get_static_dir()
    app[static_dir_key] = static_dir
    app.router.add_static("/static", static_dir)

    # HTML pages - must be last to catch all non-API routes
    app.router.add_get("/{path:.*}", serve_page)

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_manager_key].stop()


def run_server(config: Config, *, verbose: bool = False) -> None:
    """Run the server.

    Args:
        config: Application configuration
        verbose: Enable verbose output (log 404s)
    """
    app = create_app(config, verbose=verbose)
    web.run_app(app, host=config.server.host, port=config.server.port)
