"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Query, Session

from gymhub.domain.entities import Notification, NotificationType
from gymhub.infrastructure.models import NotificationModel
from gymhub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


def _position_filter(position: tuple[datetime, int], *, inclusive: bool):
    """Match rows older than ``position`` in ``(created_at, id)`` order.

    With ``inclusive`` the row at ``position`` itself matches too.
    """

    created_at, notification_id = position
    created_at = ensure_app_naive_datetime(created_at)
    same_instant = (
        NotificationModel.id <= notification_id
        if inclusive
        else NotificationModel.id < notification_id
    )
    return or_(
        NotificationModel.created_at < created_at,
        and_(NotificationModel.created_at == created_at, same_instant),
    )


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Unlike the request-side repositories, every write here commits: a
    notification is never part of a decision transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def count(
        self,
        user_id: int,
        *,
        now: datetime,
        unread_only: bool = False,
        until: tuple[datetime, int] | None = None,
    ) -> int:
        query = self._visible(user_id, now=now, unread_only=unread_only)
        if until is not None:
            query = query.filter(_position_filter(until, inclusive=True))
        return query.with_entities(func.count(NotificationModel.id)).scalar() or 0

    def count_unread(self, user_id: int, *, now: datetime) -> int:
        return self.count(user_id, now=now, unread_only=True)

    def list_page(
        self,
        user_id: int,
        *,
        now: datetime,
        limit: int,
        offset: int = 0,
        before: tuple[datetime, int] | None = None,
        until: tuple[datetime, int] | None = None,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        """Return visible notifications ordered newest first.

        ``before`` is a ``(created_at, id)`` keyset position; when given, the
        page starts strictly after it and ``offset`` is ignored. ``until``
        hides rows newer than that position so offsets computed against an
        earlier page stay valid.
        """

        query = self._visible(user_id, now=now, unread_only=unread_only)
        if before is not None:
            query = query.filter(_position_filter(before, inclusive=False))
        if until is not None:
            query = query.filter(_position_filter(until, inclusive=True))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if before is None and offset:
            query = query.offset(offset)
        query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def mark_read(self, notification_id: int, *, read_at: datetime) -> Notification:
        """Stamp ``read_at`` once; later calls keep the first timestamp."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        if model.read_at is None:
            model.read_at = ensure_app_naive_datetime(read_at)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.recipient_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .update(
                {NotificationModel.read_at: ensure_app_naive_datetime(read_at)},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return int(updated or 0)

    def delete(self, notification_id: int) -> None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        self.session.delete(model)
        self.session.commit()

    def delete_read(self, user_id: int) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.recipient_id == user_id,
                NotificationModel.read_at.is_not(None),
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return int(deleted or 0)

    def delete_expired(self, *, now: datetime) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.expires_at.is_not(None),
                NotificationModel.expires_at <= ensure_app_naive_datetime(now),
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return int(deleted or 0)

    def _visible(self, user_id: int, *, now: datetime, unread_only: bool) -> Query:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == user_id)
            .filter(
                or_(
                    NotificationModel.expires_at.is_(None),
                    NotificationModel.expires_at > ensure_app_naive_datetime(now),
                )
            )
        )
        if unread_only:
            query = query.filter(NotificationModel.read_at.is_(None))
        return query

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel,
        notification: Notification,
        *,
        include_creation_fields: bool,
    ) -> None:
        if include_creation_fields:
            model.created_at = ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            )
        model.recipient_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.type = NotificationType(notification.type).value
        model.title = notification.title
        model.message = notification.message
        model.payload = dict(notification.payload or {})
        model.link = notification.link
        model.priority = notification.priority
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            sender_id=model.sender_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            payload=dict(model.payload or {}),
            link=model.link,
            priority=model.priority,
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
            expires_at=ensure_app_timezone(model.expires_at),
        )


__all__ = ["NotificationRepository"]
