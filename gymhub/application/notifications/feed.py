"""Per-user notification feed: unread counts, pagination and housekeeping."""

from __future__ import annotations

import base64
import binascii
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from gymhub.config import Settings, get_settings
from gymhub.domain.entities import Notification, User
from gymhub.domain.errors import Forbidden, NotFound, PreconditionFailed
from gymhub.infrastructure.notifications import NotificationPublisher
from gymhub.infrastructure.repositories import NotificationRepository
from gymhub.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


@dataclass
class NotificationPage:
    items: list[Notification] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    current_page: int = 1
    page_size: int = 20
    unread_count: int = 0
    next_cursor: str | None = None
    snapshot: str | None = None


def encode_cursor(notification: Notification) -> str:
    """Encode the ``(created_at, id)`` feed position of ``notification``."""

    raw = f"{notification.created_at.isoformat()}|{notification.id}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> tuple[datetime, int]:
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
        created_at, notification_id = raw.rsplit("|", 1)
        return ensure_app_timezone(datetime.fromisoformat(created_at)), int(
            notification_id
        )
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise PreconditionFailed("Invalid pagination cursor") from exc


class NotificationFeed:
    """Read-side operations over the calling actor's notifications.

    Every mutation is scoped to ``actor``; touching someone else's
    notification raises :class:`Forbidden`.
    """

    def __init__(
        self,
        session: Session,
        *,
        publisher: NotificationPublisher | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self.repository = NotificationRepository(session)
        self._publisher = publisher
        self._settings = settings or get_settings()
        self._clock = clock

    def get_unread_count(self, actor: User) -> int:
        return self.repository.count_unread(actor.id, now=self._clock())

    def list(
        self,
        actor: User,
        *,
        page: int = 1,
        page_size: int | None = None,
        cursor: str | None = None,
        snapshot: str | None = None,
        unread_only: bool = False,
    ) -> NotificationPage:
        """Return a newest-first page of notifications.

        Page 1 returns a ``snapshot`` token naming its newest item. Later
        pages must pass that token back, or the ``cursor`` of the previous
        page; rows created after page 1 are hidden from snapshot pages, so
        inserts in between never shift or repeat items. With ``cursor`` the
        page continues strictly after that position and ``page`` is only
        echoed back.
        """

        if page < 1:
            raise PreconditionFailed("page must be greater than or equal to 1")
        if page > 1 and not cursor and not snapshot:
            raise PreconditionFailed(
                "Pages after the first need the snapshot or cursor returned by page 1"
            )
        size = page_size or self._settings.default_page_size
        if size < 1:
            raise PreconditionFailed("page_size must be greater than or equal to 1")
        size = min(size, self._settings.max_page_size)

        before = decode_cursor(cursor) if cursor else None
        until = decode_cursor(snapshot) if snapshot else None
        now = self._clock()
        rows = self.repository.list_page(
            actor.id,
            now=now,
            limit=size + 1,
            offset=(page - 1) * size,
            before=before,
            until=until,
            unread_only=unread_only,
        )
        items = list(rows[:size])
        has_more = len(rows) > size
        total = self.repository.count(
            actor.id, now=now, unread_only=unread_only, until=until
        )
        unread = self.repository.count_unread(actor.id, now=now)
        if snapshot is None and before is None and items:
            snapshot = encode_cursor(items[0])
        return NotificationPage(
            items=items,
            total_items=total,
            total_pages=math.ceil(total / size),
            current_page=page,
            page_size=size,
            unread_count=unread,
            next_cursor=encode_cursor(items[-1]) if has_more and items else None,
            snapshot=snapshot,
        )

    def mark_read(self, actor: User, notification_id: int) -> Notification:
        self._get_owned(actor, notification_id)
        notification = self.repository.mark_read(notification_id, read_at=self._clock())
        self._push_unread_count(actor)
        return notification

    def mark_all_read(self, actor: User) -> int:
        updated = self.repository.mark_all_read(actor.id, read_at=self._clock())
        logger.info("Marked %s notifications as read for user %s", updated, actor.id)
        self._push_unread_count(actor)
        return updated

    def delete(self, actor: User, notification_id: int) -> None:
        self._get_owned(actor, notification_id)
        self.repository.delete(notification_id)
        self._push_unread_count(actor)

    def delete_all_read(self, actor: User) -> int:
        deleted = self.repository.delete_read(actor.id)
        logger.info("Deleted %s read notifications for user %s", deleted, actor.id)
        return deleted

    def purge_expired(self) -> int:
        """Remove notifications past their ``expires_at`` for every user."""

        deleted = self.repository.delete_expired(now=self._clock())
        if deleted:
            logger.info("Purged %s expired notifications", deleted)
        return deleted

    def _get_owned(self, actor: User, notification_id: int) -> Notification:
        notification = self.repository.get(notification_id)
        if notification is None:
            raise NotFound(f"Notification {notification_id} not found")
        if notification.recipient_id != actor.id:
            raise Forbidden("Notification belongs to another user")
        return notification

    def _push_unread_count(self, actor: User) -> None:
        if self._publisher is not None:
            self._publisher.dispatch_unread_count(actor.id, self.get_unread_count(actor))


__all__ = ["NotificationFeed", "NotificationPage", "decode_cursor", "encode_cursor"]
