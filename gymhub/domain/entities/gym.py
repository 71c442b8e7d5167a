"""Domain entities describing a gym and its instructor roster."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

GYM_STATUS_PENDING = "pending"
GYM_STATUS_APPROVED = "approved"
GYM_STATUS_REJECTED = "rejected"

VERIFICATION_PENDING = "pending"
VERIFICATION_VERIFIED = "verified"
VERIFICATION_REJECTED = "rejected"

ENGAGEMENT_STAFF = "staff"
ENGAGEMENT_FREELANCE = "freelance"


@dataclass
class Gym:
    """A gym registered on the platform by its owner."""

    id: int | None
    owner_id: int
    name: str
    status: str = GYM_STATUS_PENDING
    verification_status: str = VERIFICATION_PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_verified(self) -> bool:
        return self.verification_status == VERIFICATION_VERIFIED


@dataclass
class GymInstructor:
    """Membership of an instructor in a gym's roster."""

    gym_id: int
    instructor_id: int
    engagement: str = ENGAGEMENT_STAFF
    joined_at: datetime | None = None


__all__ = [
    "ENGAGEMENT_FREELANCE",
    "ENGAGEMENT_STAFF",
    "GYM_STATUS_APPROVED",
    "GYM_STATUS_PENDING",
    "GYM_STATUS_REJECTED",
    "Gym",
    "GymInstructor",
    "VERIFICATION_PENDING",
    "VERIFICATION_REJECTED",
    "VERIFICATION_VERIFIED",
]
