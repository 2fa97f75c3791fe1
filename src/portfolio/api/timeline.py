"""Timeline API endpoint.

Query parameters:
    limit: Keep the first N items
    type: Keep items of one kind (project, job, education, extracurricular)
    order: "term" (default, oldest term first) or "date" (newest start date first)
    group: "term" to group items by the academic terms their dates span
"""

from aiohttp import web

from portfolio.api.content import parse_limit
from portfolio.app_keys import loader_key
from portfolio.core.content import take
from portfolio.core.terms import filter_items_by_type, group_items_by_term, sort_timeline_items

_ORDERS = ("term", "date")


def create_timeline_routes() -> list[web.RouteDef]:
    return [web.get("/api/timeline", get_timeline)]


async def get_timeline(request: web.Request) -> web.Response:
    try:
        limit = parse_limit(request.query.get("limit"))
    except ValueError:
        return web.json_response(
            {"error": "Invalid limit", "limit": request.query["limit"]},
            status=400,
        )

    order = request.query.get("order", "term")
    if order not in _ORDERS:
        return web.json_response({"error": "Invalid order", "order": order}, status=400)

    items = request.app[loader_key].get_timeline()

    item_type = request.query.get("type")
    if item_type:
        items = filter_items_by_type(items, item_type)
    if order == "date":
        items = sort_timeline_items(items)
    if limit is not None:
        items = take(items, limit)

    if request.query.get("group") == "term":
        groups = group_items_by_term(items)
        return web.json_response(
            {
                "groups": [
                    {"term": term, "items": [item.to_dict() for item in grouped]}
                    for term, grouped in groups.items()
                ]
            }
        )

    return web.json_response({"items": [item.to_dict() for item in items]})
