"""ORM models used by the application infrastructure."""

from .user import UserModel
from .gym import GymInstructorModel, GymModel
from .request import RequestModel
from .instructor import InstructorProfileModel
from .member import MemberModel
from .notification import NotificationModel

__all__ = [
    "GymInstructorModel",
    "GymModel",
    "InstructorProfileModel",
    "MemberModel",
    "NotificationModel",
    "RequestModel",
    "UserModel",
]
