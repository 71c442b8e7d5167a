"""Domain entities exposed by the application."""

from .gym import (
    ENGAGEMENT_FREELANCE,
    ENGAGEMENT_STAFF,
    GYM_STATUS_APPROVED,
    GYM_STATUS_PENDING,
    GYM_STATUS_REJECTED,
    VERIFICATION_PENDING,
    VERIFICATION_REJECTED,
    VERIFICATION_VERIFIED,
    Gym,
    GymInstructor,
)
from .instructor import InstructorProfile
from .member import (
    MEMBER_STATUS_ACTIVE,
    MEMBER_STATUS_INACTIVE,
    PAYMENT_METHOD_CARD,
    PAYMENT_METHOD_MANUAL,
    PAYMENT_STATUS_OVERDUE,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PENDING,
    Member,
)
from .notification import (
    PRIORITIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    Notification,
    NotificationIntent,
    NotificationType,
)
from .request import (
    TERMINAL_STATES,
    Request,
    RequestAction,
    RequestKind,
    RequestState,
)
from .user import (
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_GYM_OWNER,
    ROLE_INSTRUCTOR,
    ROLES,
    User,
)

__all__ = [
    "ENGAGEMENT_FREELANCE",
    "ENGAGEMENT_STAFF",
    "GYM_STATUS_APPROVED",
    "GYM_STATUS_PENDING",
    "GYM_STATUS_REJECTED",
    "Gym",
    "GymInstructor",
    "InstructorProfile",
    "MEMBER_STATUS_ACTIVE",
    "MEMBER_STATUS_INACTIVE",
    "Member",
    "Notification",
    "NotificationIntent",
    "NotificationType",
    "PAYMENT_METHOD_CARD",
    "PAYMENT_METHOD_MANUAL",
    "PAYMENT_STATUS_OVERDUE",
    "PAYMENT_STATUS_PAID",
    "PAYMENT_STATUS_PENDING",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "ROLE_GYM_OWNER",
    "ROLE_INSTRUCTOR",
    "Request",
    "RequestAction",
    "RequestKind",
    "RequestState",
    "TERMINAL_STATES",
    "User",
    "VERIFICATION_PENDING",
    "VERIFICATION_REJECTED",
    "VERIFICATION_VERIFIED",
]
