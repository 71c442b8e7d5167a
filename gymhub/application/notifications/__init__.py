"""Notification delivery and the per-user notification feed."""

from .dispatcher import NotificationDispatcher, get_notification_dispatcher
from .feed import NotificationFeed, NotificationPage, decode_cursor, encode_cursor

__all__ = [
    "NotificationDispatcher",
    "NotificationFeed",
    "NotificationPage",
    "decode_cursor",
    "encode_cursor",
    "get_notification_dispatcher",
]
