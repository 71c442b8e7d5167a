"""Turn notification intents into persisted notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from functools import partial

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gymhub.config import Settings, get_settings
from gymhub.domain.entities import (
    PRIORITY_MEDIUM,
    Notification,
    NotificationIntent,
    NotificationType,
)
from gymhub.domain.errors import DispatchFailed
from gymhub.infrastructure.database import SessionLocal
from gymhub.infrastructure.notifications import (
    NotificationPublisher,
    NotificationRetryQueue,
    notification_publisher,
    notification_retry_queue,
)
from gymhub.infrastructure.repositories import NotificationRepository, UserRepository
from gymhub.utils import add_days, now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Persist one notification per intent in a dedicated session.

    A failure to persist never propagates to the caller: the intent is handed
    to the retry queue instead. Intents for unknown recipients are dropped.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        *,
        publisher: NotificationPublisher | None = notification_publisher,
        retry_queue: NotificationRetryQueue | None = notification_retry_queue,
        settings: Settings | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._publisher = publisher
        self._retry_queue = retry_queue
        self._settings = settings or get_settings()

    def dispatch(self, intents: Iterable[NotificationIntent]) -> list[Notification]:
        created: list[Notification] = []
        for intent in intents:
            try:
                notification = self.deliver(intent)
            except DispatchFailed as exc:
                logger.warning(
                    "Could not store %s notification for user %s: %s",
                    intent.type.value,
                    intent.recipient_id,
                    exc,
                )
                if self._retry_queue is not None:
                    self._retry_queue.enqueue(
                        partial(self.deliver, intent),
                        description=f"{intent.type.value} for user {intent.recipient_id}",
                    )
                continue
            if notification is not None:
                created.append(notification)
        return created

    def deliver(self, intent: NotificationIntent) -> Notification | None:
        """Store a single intent; raise :class:`DispatchFailed` on DB errors."""

        session = self._session_factory()
        try:
            try:
                if not UserRepository(session).exists(intent.recipient_id):
                    logger.warning(
                        "Skipping %s notification for unknown user %s",
                        intent.type.value,
                        intent.recipient_id,
                    )
                    return None
                repository = NotificationRepository(session)
                now = now_in_app_timezone()
                notification = repository.create(
                    Notification(
                        id=None,
                        recipient_id=intent.recipient_id,
                        sender_id=intent.sender_id,
                        type=intent.type,
                        title=intent.title,
                        message=intent.message,
                        payload=dict(intent.payload),
                        link=intent.link,
                        priority=intent.priority,
                        created_at=now,
                        expires_at=add_days(now, self._settings.notification_ttl_days),
                    )
                )
            except SQLAlchemyError as exc:
                session.rollback()
                raise DispatchFailed(str(exc)) from exc

            # The row is committed; a failing count must not trigger a redelivery.
            try:
                unread_count = repository.count_unread(intent.recipient_id, now=now)
            except SQLAlchemyError as exc:
                session.rollback()
                unread_count = None
                logger.warning(
                    "Could not count unread notifications for user %s: %s",
                    intent.recipient_id,
                    exc,
                )
        finally:
            session.close()

        logger.debug(
            "Stored %s notification %s for user %s",
            notification.type.value,
            notification.id,
            notification.recipient_id,
        )
        if self._publisher is not None:
            self._publisher.dispatch(notification, unread_count=unread_count)
        return notification

    def announce(
        self,
        *,
        title: str,
        message: str,
        recipients: Sequence[int] | None = None,
        sender_id: int | None = None,
        priority: str = PRIORITY_MEDIUM,
        link: str | None = None,
    ) -> list[Notification]:
        """Send a system announcement to ``recipients`` or every active user."""

        if recipients is None:
            session = self._session_factory()
            try:
                recipients = UserRepository(session).list_active_ids()
            finally:
                session.close()
        intents = [
            NotificationIntent(
                recipient_id=recipient_id,
                type=NotificationType.SYSTEM_ANNOUNCEMENT,
                title=title,
                message=message,
                sender_id=sender_id,
                link=link,
                priority=priority,
            )
            for recipient_id in dict.fromkeys(recipients)
        ]
        logger.info("Announcing '%s' to %s users", title, len(intents))
        return self.dispatch(intents)


_dispatcher: NotificationDispatcher | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """Return the process-wide dispatcher bound to the application database."""

    global _dispatcher
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher()
    return _dispatcher


__all__ = ["NotificationDispatcher", "get_notification_dispatcher"]
