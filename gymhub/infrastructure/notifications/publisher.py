"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from gymhub.domain.entities import Notification

from .sockets import NotificationSocketRegistry, notification_sockets

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery.

    Pushing is best effort: persisted rows remain the source of truth and
    clients resynchronise through the feed endpoints.
    """

    def __init__(self, sockets: NotificationSocketRegistry) -> None:
        self._sockets = sockets

    def dispatch(
        self, notification: Notification, *, unread_count: int | None = None
    ) -> None:
        """Schedule ``notification`` to be delivered to its recipient."""

        message: dict[str, Any] = {
            "type": "notification",
            "data": self._serialize(notification),
        }
        if unread_count is not None:
            message["unread_count"] = unread_count
        self._schedule(notification.recipient_id, message)

    def dispatch_unread_count(self, user_id: int, unread_count: int) -> None:
        self._schedule(user_id, {"type": "unread-count", "data": unread_count})

    def _schedule(self, user_id: int, message: dict[str, Any]) -> None:
        serving_loop = self._sockets.delivery_loop(user_id)
        if serving_loop is None:
            return
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None
        if current_loop is serving_loop:
            current_loop.create_task(self._sockets.send_to_user(user_id, message))
            return
        try:
            from_thread.run(self._sockets.send_to_user, user_id, message)
            return
        except RuntimeError:
            # Not an AnyIO worker thread, e.g. the retry worker.
            logger.debug("Pushing to user %s through the serving loop", user_id)
        asyncio.run_coroutine_threadsafe(
            self._sockets.send_to_user(user_id, message), serving_loop
        )

    @staticmethod
    def _serialize(notification: Notification) -> dict[str, Any]:
        return {
            "id": notification.id,
            "recipient_id": notification.recipient_id,
            "sender_id": notification.sender_id,
            "type": notification.type.value,
            "title": notification.title,
            "message": notification.message,
            "payload": notification.payload or {},
            "link": notification.link,
            "priority": notification.priority,
            "read": notification.read,
            "created_at": notification.created_at.isoformat()
            if notification.created_at
            else None,
            "read_at": notification.read_at.isoformat() if notification.read_at else None,
            "expires_at": notification.expires_at.isoformat()
            if notification.expires_at
            else None,
        }


notification_publisher = NotificationPublisher(notification_sockets)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return NotificationPublisher._serialize(notification)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
