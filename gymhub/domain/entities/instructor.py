"""Domain entity for verified instructors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class InstructorProfile:
    """Verified-instructor record created when an application is approved."""

    id: int | None
    user_id: int
    specialization: str
    experience_years: int = 0
    is_freelance: bool = False
    application_id: int | None = None
    verified_at: datetime | None = None


__all__ = ["InstructorProfile"]
