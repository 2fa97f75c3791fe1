"""WebSocket-based live reload for development mode.

Monitors content files for changes and notifies connected clients
via WebSocket to trigger page reloads.
"""

from __future__ import annotations

import asyncio
import json
import logging
import weakref
from pathlib import Path
from typing import TYPE_CHECKING

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from portfolio.core.types import Category

if TYPE_CHECKING:
    from portfolio.core.cache import FileCache, NullCache

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["**/*.mdx", "**/*.md"]


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload.

    Coordinates between file system watcher and connected WebSocket clients
    to provide automatic page refresh on content file changes.
    """

    def __init__(
        self,
        content_dir: Path,
        watch_patterns: list[str] | None = None,
        *,
        cache: FileCache | NullCache | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            content_dir: Directory to watch for changes
            watch_patterns: Glob patterns to watch (default: ["**/*.mdx", "**/*.md"])
            cache: Render cache to drop entries of deleted files from
        """
        self._content_dir = content_dir.resolve()
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None
        self._cache = cache

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        if not self._content_dir.is_dir():
            logger.warning("Live reload disabled: %s is not a directory", self._content_dir)
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload.

        Args:
            request: aiohttp request

        Returns:
            WebSocket response
        """
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        """Watch for file changes and broadcast reload events."""
        async for changes in awatch(self._content_dir):
            for change_type, path_str in changes:
                path = Path(path_str)
                if not self._matches_patterns(path):
                    continue

                if change_type == Change.deleted:
                    self._invalidate_cache(path)

                route = self._to_route_path(path)
                logger.debug("Content changed (%s): %s -> %s", change_type.name, path, route)
                await self._broadcast_reload(route)

    def _invalidate_cache(self, path: Path) -> None:
        """Drop the cached render of a deleted file.

        Modified files need no explicit invalidation: cache entries are
        checked against the source mtime on every read.
        """
        if self._cache is None:
            return
        relative = path.relative_to(self._content_dir)
        if len(relative.parts) == 2:
            self._cache.invalidate(f"{relative.parts[0]}/{relative.stem}")

    def _matches_patterns(self, path: Path) -> bool:
        """Check if a path matches any watch pattern.

        Args:
            path: Path to check

        Returns:
            True if path matches any pattern
        """
        try:
            relative = path.relative_to(self._content_dir)
        except ValueError:
            return False

        for pattern in self._watch_patterns:
            if relative.match(pattern):
                return True
        return False

    def _to_route_path(self, file_path: Path) -> str:
        """Convert a content file path to the route of its detail page.

        Args:
            file_path: Absolute file path

        Returns:
            Route path (e.g., "/experience/acme" for jobs/acme.mdx), or "/"
            for files outside a category directory
        """
        relative = file_path.relative_to(self._content_dir)
        if len(relative.parts) != 2:
            return "/"

        try:
            category = Category(relative.parts[0])
        except ValueError:
            return "/"

        return f"{category.route}/{relative.stem}"

    async def _broadcast_reload(self, path: str) -> None:
        """Broadcast reload event to all connected clients.

        Args:
            path: Route of the page that changed
        """
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "path": path})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket.

    Args:
        manager: LiveReloadManager instance

    Returns:
        List of route definitions
    """
    return [web.get("/ws/live-reload", manager.handle_websocket)]
