"""Domain entity representing a user (an actor of the request workflows)."""

from dataclasses import dataclass
from datetime import datetime

ROLE_CUSTOMER = "customer"
ROLE_INSTRUCTOR = "instructor"
ROLE_GYM_OWNER = "gym_owner"
ROLE_ADMIN = "admin"

ROLES = (ROLE_CUSTOMER, ROLE_INSTRUCTOR, ROLE_GYM_OWNER, ROLE_ADMIN)


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    email: str
    role: str
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role matches ``alias``."""

        return self.role.lower() == alias.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is a platform administrator."""

        return self.has_role(ROLE_ADMIN)


__all__ = [
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "ROLE_GYM_OWNER",
    "ROLE_INSTRUCTOR",
    "User",
]
