"""Session-bound collaborators shared by guards, effects and submissions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from gymhub.config import Settings, get_settings
from gymhub.infrastructure.repositories import (
    GymRepository,
    InstructorRepository,
    MemberRepository,
    RequestRepository,
    UserRepository,
)
from gymhub.utils import now_in_app_timezone


@dataclass
class LifecycleContext:
    session: Session
    settings: Settings
    now: datetime
    users: UserRepository
    gyms: GymRepository
    members: MemberRepository
    instructors: InstructorRepository
    requests: RequestRepository

    @classmethod
    def from_session(
        cls,
        session: Session,
        *,
        settings: Settings | None = None,
        now: datetime | None = None,
    ) -> "LifecycleContext":
        return cls(
            session=session,
            settings=settings or get_settings(),
            now=now or now_in_app_timezone(),
            users=UserRepository(session),
            gyms=GymRepository(session),
            members=MemberRepository(session),
            instructors=InstructorRepository(session),
            requests=RequestRepository(session),
        )


__all__ = ["LifecycleContext"]
