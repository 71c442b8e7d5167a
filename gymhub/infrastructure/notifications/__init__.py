"""Realtime notification helpers for the infrastructure layer."""

from .publisher import (
    NotificationPublisher,
    notification_publisher,
    serialize_notification,
)
from .retry import NotificationRetryQueue, build_retry_queue, notification_retry_queue
from .sockets import NotificationSocketRegistry, notification_sockets

__all__ = [
    "NotificationSocketRegistry",
    "notification_sockets",
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
    "NotificationRetryQueue",
    "build_retry_queue",
    "notification_retry_queue",
]
