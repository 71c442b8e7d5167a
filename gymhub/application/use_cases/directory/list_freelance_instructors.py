"""Use case for searching verified freelance instructors."""

from __future__ import annotations

from sqlalchemy.orm import Session

from gymhub.domain.entities import InstructorProfile, User
from gymhub.domain.errors import NotFound
from gymhub.infrastructure.repositories import GymRepository, InstructorRepository


def list_freelance_instructors(
    session: Session, *, gym_id: int | None = None
) -> list[tuple[InstructorProfile, User]]:
    """Return freelance instructors, leaving out those already on ``gym_id``."""

    if gym_id is not None and GymRepository(session).get(gym_id) is None:
        raise NotFound(f"Gym {gym_id} not found")
    return InstructorRepository(session).list_freelance(exclude_gym_id=gym_id)
