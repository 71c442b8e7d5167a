"""Repository implementations backed by SQLAlchemy."""

from .user_repository import UserRepository
from .gym_repository import GymRepository
from .instructor_repository import InstructorRepository
from .member_repository import MemberRepository
from .request_repository import RequestRepository
from .notification_repository import NotificationRepository

__all__ = [
    "GymRepository",
    "InstructorRepository",
    "MemberRepository",
    "NotificationRepository",
    "RequestRepository",
    "UserRepository",
]
