"""Registry of the notification websockets open for each user."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationSocketRegistry:
    """Track open sockets per user and the event loop that serves them.

    Lookups happen from request worker threads and the retry worker, so the
    registry is guarded by a lock; sending always runs on the serving loop.
    """

    def __init__(self) -> None:
        self._sockets: dict[int, set[WebSocket]] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._lock = threading.Lock()

    async def connect(self, user_id: int, websocket: WebSocket) -> None:
        await websocket.accept()
        with self._lock:
            self._loop = asyncio.get_running_loop()
            self._sockets.setdefault(user_id, set()).add(websocket)
            open_sockets = len(self._sockets[user_id])
        logger.debug("User %s now has %s notification sockets", user_id, open_sockets)

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        with self._lock:
            sockets = self._sockets.get(user_id)
            if sockets is None:
                return
            sockets.discard(websocket)
            if not sockets:
                del self._sockets[user_id]

    def delivery_loop(self, user_id: int) -> asyncio.AbstractEventLoop | None:
        """Return the loop to push on, or ``None`` when ``user_id`` is offline."""

        with self._lock:
            if not self._sockets.get(user_id):
                return None
            loop = self._loop
        if loop is None or loop.is_closed():
            return None
        return loop

    async def send_to_user(self, user_id: int, message: dict[str, Any]) -> None:
        with self._lock:
            sockets = list(self._sockets.get(user_id, ()))
        for websocket in sockets:
            try:
                await websocket.send_json(message)
            except Exception:  # pragma: no cover - dropped socket
                logger.debug("Dropping websocket for user %s", user_id, exc_info=True)
                self.disconnect(user_id, websocket)


notification_sockets = NotificationSocketRegistry()


__all__ = ["NotificationSocketRegistry", "notification_sockets"]
