"""Endpoints and websocket handler for the notification feed."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from gymhub.application.notifications import NotificationDispatcher, NotificationFeed
from gymhub.domain.entities import Notification, User
from gymhub.domain.errors import RequestLifecycleError
from gymhub.infrastructure.database import SessionLocal
from gymhub.infrastructure.notifications import notification_sockets, serialize_notification
from gymhub.interfaces.api.dependencies import (
    get_current_active_user,
    get_dispatcher,
    get_feed,
    require_admin,
    resolve_current_user,
)
from gymhub.interfaces.api.schemas import (
    AnnouncementCreate,
    ApiResponse,
    CountRead,
    NotificationListResponse,
    NotificationRead,
    UnreadCountRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1),
    cursor: str | None = Query(default=None),
    snapshot: str | None = Query(default=None),
    unread_only: bool = Query(default=False),
    feed: NotificationFeed = Depends(get_feed),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return a newest-first page of the authenticated user's notifications."""

    result = feed.list(
        current_user,
        page=page,
        page_size=page_size,
        cursor=cursor,
        snapshot=snapshot,
        unread_only=unread_only,
    )
    return NotificationListResponse(
        data=[_notification_to_schema(item) for item in result.items],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_items=result.total_items,
        unread_count=result.unread_count,
        next_cursor=result.next_cursor,
        snapshot=result.snapshot,
    )


@router.get("/unread-count", response_model=ApiResponse[UnreadCountRead])
def get_unread_count(
    feed: NotificationFeed = Depends(get_feed),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[UnreadCountRead]:
    return ApiResponse[UnreadCountRead](
        data=UnreadCountRead(unread_count=feed.get_unread_count(current_user))
    )


@router.patch("/read-all", response_model=ApiResponse[CountRead])
def mark_all_read(
    feed: NotificationFeed = Depends(get_feed),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[CountRead]:
    return ApiResponse[CountRead](data=CountRead(count=feed.mark_all_read(current_user)))


@router.patch("/{notification_id}/read", response_model=ApiResponse[NotificationRead])
def mark_read(
    notification_id: int,
    feed: NotificationFeed = Depends(get_feed),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[NotificationRead]:
    notification = feed.mark_read(current_user, notification_id)
    return ApiResponse[NotificationRead](data=_notification_to_schema(notification))


@router.delete("/read", response_model=ApiResponse[CountRead])
def delete_read_notifications(
    feed: NotificationFeed = Depends(get_feed),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[CountRead]:
    return ApiResponse[CountRead](
        data=CountRead(count=feed.delete_all_read(current_user))
    )


@router.delete("/{notification_id}", response_model=ApiResponse[CountRead])
def delete_notification(
    notification_id: int,
    feed: NotificationFeed = Depends(get_feed),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[CountRead]:
    feed.delete(current_user, notification_id)
    return ApiResponse[CountRead](data=CountRead(count=1))


@router.post(
    "/announcements",
    response_model=ApiResponse[CountRead],
    status_code=status.HTTP_201_CREATED,
)
def create_announcement(
    announcement: AnnouncementCreate,
    current_user: User = Depends(require_admin),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ApiResponse[CountRead]:
    """Send a system announcement to the given users or to everyone."""

    created = dispatcher.announce(
        title=announcement.title,
        message=announcement.message,
        recipients=announcement.recipients,
        sender_id=current_user.id,
        priority=announcement.priority,
        link=announcement.link,
    )
    return ApiResponse[CountRead](data=CountRead(count=len(created)))


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        feed = NotificationFeed(session)
        pending = feed.list(user, unread_only=True).items
        unread_count = feed.get_unread_count(user)
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    await notification_sockets.connect(user.id, websocket)
    try:
        await websocket.send_json(
            {
                "type": "init",
                "data": [serialize_notification(item) for item in pending],
                "unread_count": unread_count,
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "ack":
                await websocket.send_json(
                    {"type": "unread-count", "data": _acknowledge(user, message.get("ids"))}
                )
    except WebSocketDisconnect:
        notification_sockets.disconnect(user.id, websocket)
    except Exception:
        notification_sockets.disconnect(user.id, websocket)
        raise


def _acknowledge(user: User, ids) -> int:
    """Mark acknowledged notifications as read and return the unread count."""

    session = SessionLocal()
    try:
        feed = NotificationFeed(session)
        if isinstance(ids, list):
            for notification_id in ids:
                try:
                    feed.mark_read(user, int(notification_id))
                except (TypeError, ValueError, RequestLifecycleError) as exc:
                    logger.debug("Ignoring ack for %r: %s", notification_id, exc)
        return feed.get_unread_count(user)
    finally:
        session.close()
