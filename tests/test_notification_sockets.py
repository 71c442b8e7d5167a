"""Tests for the websocket registry and the publisher that pushes through it."""

from __future__ import annotations

import asyncio

from gymhub.domain.entities import Notification, NotificationType
from gymhub.infrastructure.notifications import NotificationPublisher, NotificationSocketRegistry
from gymhub.utils import now_in_app_timezone


class FakeSocket:
    def __init__(self):
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        self.sent.append(message)


def _notification(recipient_id: int) -> Notification:
    return Notification(
        id=1,
        recipient_id=recipient_id,
        type=NotificationType.SYSTEM_ANNOUNCEMENT,
        title="Hello",
        message="Body",
        created_at=now_in_app_timezone(),
    )


def test_delivery_loop_follows_open_sockets():
    registry = NotificationSocketRegistry()
    socket = FakeSocket()

    async def scenario():
        assert registry.delivery_loop(7) is None
        await registry.connect(7, socket)
        assert registry.delivery_loop(7) is asyncio.get_running_loop()
        assert registry.delivery_loop(8) is None
        registry.disconnect(7, socket)
        registry.disconnect(7, socket)
        assert registry.delivery_loop(7) is None

    asyncio.run(scenario())
    assert socket.accepted is True


def test_publisher_pushes_on_the_serving_loop():
    registry = NotificationSocketRegistry()
    publisher = NotificationPublisher(registry)
    socket = FakeSocket()

    async def scenario():
        await registry.connect(3, socket)
        publisher.dispatch(_notification(3), unread_count=4)
        publisher.dispatch_unread_count(3, 2)
        publisher.dispatch(_notification(99))
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert [message["type"] for message in socket.sent] == ["notification", "unread-count"]
    assert socket.sent[0]["unread_count"] == 4
    assert socket.sent[0]["data"]["title"] == "Hello"
    assert socket.sent[1]["data"] == 2


def test_publisher_ignores_offline_users():
    registry = NotificationSocketRegistry()
    publisher = NotificationPublisher(registry)

    publisher.dispatch(_notification(5), unread_count=1)

    assert registry.delivery_loop(5) is None
