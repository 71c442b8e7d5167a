from .common import ApiResponse, CountRead
from .directory import FreelanceInstructorRead, RosterEntryRead
from .notification import (
    AnnouncementCreate,
    NotificationListResponse,
    NotificationRead,
    UnreadCountRead,
)
from .request import RequestCreate, RequestDecision, RequestRead

__all__ = [
    "AnnouncementCreate",
    "ApiResponse",
    "CountRead",
    "FreelanceInstructorRead",
    "NotificationListResponse",
    "NotificationRead",
    "RequestCreate",
    "RequestDecision",
    "RequestRead",
    "RosterEntryRead",
    "UnreadCountRead",
]
