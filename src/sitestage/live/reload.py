"""WebSocket-based live reload for development mode.

Monitors the content directory and notifies connected clients via
WebSocket so open pages reload after content or configuration changes.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from sitestage.config import DEFAULT_WATCH_PATTERNS
from sitestage.core.content import CONTENT_SUFFIXES
from sitestage.core.types import HOME_SLUG

logger = logging.getLogger(__name__)


class LiveReloadManager:
    """Manages WebSocket connections and content watching for live reload."""

    def __init__(
        self,
        content_dir: Path,
        watch_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            content_dir: Directory to watch for changes
            watch_patterns: Glob patterns to watch (default: MDX, markdown and JSON)
        """
        self._content_dir = content_dir
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        if not self._content_dir.is_dir():
            logger.warning(f"Live reload disabled: {self._content_dir} does not exist")
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
        async for changes in awatch(self._content_dir):
            for change_type, path_str in changes:
                if change_type == Change.deleted:
                    continue

                path = Path(path_str)
                if not self.matches_patterns(path):
                    continue

                page_path = self.to_page_path(path)
                logger.debug(f"Content changed: {path} -> {page_path}")
                await self.broadcast_reload(page_path)

    def matches_patterns(self, path: Path) -> bool:
        """Check if a path inside the content directory matches any watch pattern."""
        try:
            relative = path.relative_to(self._content_dir)
        except ValueError:
            return False

        # PurePath.match does not treat "**" as recursive before Python 3.13
        return any(
            relative.match(pattern) or relative.match(pattern.removeprefix("**/"))
            for pattern in self._watch_patterns
        )

    def to_page_path(self, file_path: Path) -> str:
        """Convert a content file path to the URL path it renders at.

        Configuration blobs (header.json, ...) affect every page and map
        to "/".

        Args:
            file_path: Absolute file path

        Returns:
            URL path (e.g., "/projects/leadcms")
        """
        if file_path.suffix not in CONTENT_SUFFIXES:
            return "/"

        slug = file_path.relative_to(self._content_dir).with_suffix("").as_posix()
        if slug == HOME_SLUG:
            return "/"
        return f"/{slug}"

    async def broadcast_reload(self, path: str) -> None:
        """Broadcast a reload event to all connected clients.

        Args:
            path: URL path that changed
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
    return [web.get("/ws/live-reload", manager.handle_websocket)]
