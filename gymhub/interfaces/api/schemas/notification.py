"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gymhub.domain.entities import PRIORITY_MEDIUM, NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipient_id: int
    sender_id: int | None = None
    type: NotificationType
    title: str
    message: str
    payload: dict[str, Any] = Field(default_factory=dict)
    link: str | None = None
    priority: str = PRIORITY_MEDIUM
    read: bool
    created_at: datetime
    read_at: datetime | None = None
    expires_at: datetime | None = None


class NotificationListResponse(BaseModel):
    success: bool = True
    data: list[NotificationRead]
    current_page: int
    total_pages: int
    total_items: int
    unread_count: int
    next_cursor: str | None = None
    snapshot: str | None = None


class UnreadCountRead(BaseModel):
    unread_count: int


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)
    message: str = Field(..., min_length=1)
    recipients: list[int] | None = Field(
        default=None, description="Recipient user ids; every active user when omitted"
    )
    priority: str = Field(default=PRIORITY_MEDIUM, pattern="^(low|medium|high|urgent)$")
    link: str | None = Field(default=None, max_length=200)


__all__ = [
    "AnnouncementCreate",
    "NotificationListResponse",
    "NotificationRead",
    "UnreadCountRead",
]
