"""Content API endpoints.

Lists content items per category and returns single items with rendered
HTML and ToC.
"""

import json
from datetime import UTC, datetime
from email.utils import formatdate
from hashlib import md5

from aiohttp import web

from portfolio.app_keys import loader_key, renderer_key
from portfolio.core.content import only_featured, take
from portfolio.core.types import Category


def create_content_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/content/{category}", list_items),
        web.get("/api/content/{category}/{slug}", get_item),
    ]


def parse_limit(raw: str | None) -> int | None:
    """Parse a ``limit`` query parameter.

    Raises:
        ValueError: If the value is not a non-negative integer
    """
    if raw is None or raw == "":
        return None
    if not raw.isdigit():
        raise ValueError(f"limit must be a non-negative integer: {raw!r}")
    return int(raw)


def _resolve_category(request: web.Request) -> Category | None:
    try:
        return Category(request.match_info["category"])
    except ValueError:
        return None


async def list_items(request: web.Request) -> web.Response:
    category = _resolve_category(request)
    if category is None:
        return web.json_response(
            {"error": "Unknown category", "category": request.match_info["category"]},
            status=404,
        )

    try:
        limit = parse_limit(request.query.get("limit"))
    except ValueError:
        return web.json_response(
            {"error": "Invalid limit", "limit": request.query["limit"]},
            status=400,
        )

    items = request.app[loader_key].get_items(category)
    if request.query.get("featured") == "true":
        items = only_featured(items)
    if limit is not None:
        items = take(items, limit)

    return web.json_response(
        {
            "category": category.value,
            "items": [item.to_dict() for item in items],
        }
    )


async def get_item(request: web.Request) -> web.Response:
    category = _resolve_category(request)
    slug = request.match_info["slug"]
    if category is None:
        return web.json_response(
            {"error": "Unknown category", "category": request.match_info["category"]},
            status=404,
        )

    item = request.app[loader_key].get_item(category, slug)
    if item is None:
        return web.json_response(
            {"error": "Item not found", "category": category.value, "slug": slug},
            status=404,
        )

    result = request.app[renderer_key].render(item, category)

    source_mtime = item.source_path.stat().st_mtime
    last_modified = datetime.fromtimestamp(source_mtime, tz=UTC)

    frontmatter = item.frontmatter.to_dict()
    etag = _compute_etag(result.html + json.dumps(frontmatter, sort_keys=True, default=str))

    if_none_match = request.headers.get("If-None-Match")
    if if_none_match == etag:
        return web.Response(status=304)

    response_data = {
        "meta": {
            "category": category.value,
            "slug": item.slug,
            "path": f"{category.route}/{item.slug}",
            "source_file": str(item.source_path),
            "last_modified": last_modified.isoformat(),
        },
        "frontmatter": frontmatter,
        "toc": [entry.to_dict() for entry in result.toc],
        "content": result.html,
    }

    return web.json_response(
        response_data,
        headers={
            "ETag": etag,
            "Last-Modified": formatdate(source_mtime, usegmt=True),
            "Cache-Control": "private, max-age=60",
        },
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) of the digest
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
