"""Use case for listing a gym's instructor roster."""

from sqlalchemy.orm import Session

from gymhub.domain.entities import GymInstructor, User
from gymhub.domain.errors import NotFound
from gymhub.infrastructure.repositories import GymRepository


def list_gym_instructors(session: Session, *, gym_id: int) -> list[tuple[GymInstructor, User]]:
    repository = GymRepository(session)
    if repository.get(gym_id) is None:
        raise NotFound(f"Gym {gym_id} not found")
    return repository.list_roster(gym_id)
