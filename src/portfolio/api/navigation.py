"""Navigation API endpoint.

Returns the header menu with the entry matching ``?path=`` marked active.
"""

from aiohttp import web

from portfolio.app_keys import site_key
from portfolio.core.navigation import build_navigation
from portfolio.views import normalize_path


def create_navigation_routes() -> list[web.RouteDef]:
    return [web.get("/api/navigation", get_navigation)]


async def get_navigation(request: web.Request) -> web.Response:
    site = request.app[site_key]
    current_path = normalize_path(request.query.get("path", "/"))
    nav_items = build_navigation(site.nav_items, current_path)
    return web.json_response({"items": [item.to_dict() for item in nav_items]})
