"""Persistence helpers for gyms and their instructor roster."""

from __future__ import annotations

from sqlalchemy.orm import Session

from gymhub.domain.entities import ENGAGEMENT_STAFF, Gym, GymInstructor, User
from gymhub.infrastructure.models import GymInstructorModel, GymModel, UserModel
from gymhub.utils import ensure_app_timezone, now_in_app_naive_datetime

from .user_repository import UserRepository


class GymRepository:
    """Provide typed mutations for :class:`Gym` objects.

    Changes are flushed; the caller commits.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, gym_id: int) -> Gym | None:
        model = self.session.get(GymModel, gym_id)
        return self._to_entity(model) if model else None

    def create(self, gym: Gym) -> Gym:
        model = GymModel(
            owner_id=gym.owner_id,
            name=gym.name,
            status=gym.status,
            verification_status=gym.verification_status,
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def set_verification_status(
        self, gym_id: int, *, status: str, verification_status: str
    ) -> Gym:
        model = self.session.get(GymModel, gym_id)
        if model is None:
            msg = f"Gym with id {gym_id} not found"
            raise ValueError(msg)
        model.status = status
        model.verification_status = verification_status
        model.updated_at = now_in_app_naive_datetime()
        self.session.flush()
        return self._to_entity(model)

    def has_instructor(self, gym_id: int, instructor_id: int) -> bool:
        query = self.session.query(GymInstructorModel.id).filter(
            GymInstructorModel.gym_id == gym_id,
            GymInstructorModel.instructor_id == instructor_id,
        )
        return query.first() is not None

    def add_instructor(
        self, gym_id: int, instructor_id: int, *, engagement: str = ENGAGEMENT_STAFF
    ) -> bool:
        """Add ``instructor_id`` to the roster; return ``False`` if already there."""

        if self.session.get(GymModel, gym_id) is None:
            msg = f"Gym with id {gym_id} not found"
            raise ValueError(msg)
        if self.has_instructor(gym_id, instructor_id):
            return False
        self.session.add(
            GymInstructorModel(
                gym_id=gym_id,
                instructor_id=instructor_id,
                engagement=engagement,
                joined_at=now_in_app_naive_datetime(),
            )
        )
        self.session.flush()
        return True

    def list_roster(self, gym_id: int) -> list[tuple[GymInstructor, User]]:
        query = (
            self.session.query(GymInstructorModel, UserModel)
            .join(UserModel, GymInstructorModel.instructor_id == UserModel.id)
            .filter(GymInstructorModel.gym_id == gym_id)
            .order_by(GymInstructorModel.joined_at, GymInstructorModel.id)
        )
        return [
            (
                GymInstructor(
                    gym_id=entry.gym_id,
                    instructor_id=entry.instructor_id,
                    engagement=entry.engagement,
                    joined_at=ensure_app_timezone(entry.joined_at),
                ),
                UserRepository._to_entity(user),
            )
            for entry, user in query.all()
        ]

    @staticmethod
    def _to_entity(model: GymModel) -> Gym:
        return Gym(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            status=model.status,
            verification_status=model.verification_status,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["GymRepository"]
