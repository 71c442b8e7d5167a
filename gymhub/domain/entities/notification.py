"""Domain entities representing user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    GYM_REGISTRATION_SUBMITTED = "gym_registration_submitted"
    NEW_GYM_REGISTRATION = "new_gym_registration"
    GYM_REGISTRATION_APPROVED = "gym_registration_approved"
    GYM_REGISTRATION_REJECTED = "gym_registration_rejected"
    INSTRUCTOR_APPLICATION_SUBMITTED = "instructor_application_submitted"
    INSTRUCTOR_APPLICATION_RECEIVED = "instructor_application_received"
    INSTRUCTOR_APPLICATION_APPROVED = "instructor_application_approved"
    INSTRUCTOR_APPLICATION_REJECTED = "instructor_application_rejected"
    COLLABORATION_REQUEST_RECEIVED = "collaboration_request_received"
    COLLABORATION_REQUEST_ACCEPTED = "collaboration_request_accepted"
    COLLABORATION_REQUEST_REJECTED = "collaboration_request_rejected"
    COLLABORATION_REQUEST_CANCELLED = "collaboration_request_cancelled"
    PAYMENT_CONFIRMATION_SUBMITTED = "payment_confirmation_submitted"
    PAYMENT_CONFIRMATION_REJECTED = "payment_confirmation_rejected"
    WELCOME_MESSAGE = "welcome_message"
    ADMIN_ACTION_COMPLETED = "admin_action_completed"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH, PRIORITY_URGENT)


@dataclass(frozen=True)
class NotificationIntent:
    """Declaration of who must be told about an effect.

    Produced by effect handlers and turned into :class:`Notification` rows by
    the dispatcher.
    """

    recipient_id: int
    type: NotificationType
    title: str
    message: str
    sender_id: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    link: str | None = None
    priority: str = PRIORITY_MEDIUM


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    recipient_id: int
    type: NotificationType
    title: str
    message: str
    sender_id: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    link: str | None = None
    priority: str = PRIORITY_MEDIUM
    created_at: datetime | None = None
    read_at: datetime | None = None
    expires_at: datetime | None = None

    @property
    def read(self) -> bool:
        return self.read_at is not None


__all__ = [
    "Notification",
    "NotificationIntent",
    "NotificationType",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
]
