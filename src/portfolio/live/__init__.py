"""Live reload for the development server."""

from portfolio.live.reload import LiveReloadManager, create_live_reload_routes

__all__ = ["LiveReloadManager", "create_live_reload_routes"]
