"""Persistence helpers for verified instructor profiles."""

from __future__ import annotations

from sqlalchemy import and_, exists
from sqlalchemy.orm import Session

from gymhub.domain.entities import InstructorProfile, User
from gymhub.infrastructure.models import (
    GymInstructorModel,
    InstructorProfileModel,
    UserModel,
)
from gymhub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

from .user_repository import UserRepository


class InstructorRepository:
    """Queries and upserts for :class:`InstructorProfile` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_user(self, user_id: int) -> InstructorProfile | None:
        model = (
            self.session.query(InstructorProfileModel)
            .filter(InstructorProfileModel.user_id == user_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def upsert(self, profile: InstructorProfile) -> InstructorProfile:
        """Create or refresh the verified profile for ``profile.user_id``."""

        model = (
            self.session.query(InstructorProfileModel)
            .filter(InstructorProfileModel.user_id == profile.user_id)
            .first()
        )
        if model is None:
            model = InstructorProfileModel(user_id=profile.user_id)
            self.session.add(model)
        model.specialization = profile.specialization
        model.experience_years = profile.experience_years
        model.is_freelance = profile.is_freelance
        model.application_id = profile.application_id
        model.verified_at = ensure_app_naive_datetime(
            profile.verified_at or now_in_app_timezone()
        )
        self.session.flush()
        return self._to_entity(model)

    def list_freelance(
        self, *, exclude_gym_id: int | None = None
    ) -> list[tuple[InstructorProfile, User]]:
        """Return verified freelance instructors, newest first.

        When ``exclude_gym_id`` is given, instructors already on that gym's
        roster are left out.
        """

        query = (
            self.session.query(InstructorProfileModel, UserModel)
            .join(UserModel, InstructorProfileModel.user_id == UserModel.id)
            .filter(InstructorProfileModel.is_freelance.is_(True))
            .filter(UserModel.is_active.is_(True))
        )
        if exclude_gym_id is not None:
            on_roster = exists().where(
                and_(
                    GymInstructorModel.gym_id == exclude_gym_id,
                    GymInstructorModel.instructor_id == InstructorProfileModel.user_id,
                )
            )
            query = query.filter(~on_roster)
        query = query.order_by(
            InstructorProfileModel.verified_at.desc(), InstructorProfileModel.id.desc()
        )
        return [
            (self._to_entity(profile), UserRepository._to_entity(user))
            for profile, user in query.all()
        ]

    @staticmethod
    def _to_entity(model: InstructorProfileModel) -> InstructorProfile:
        return InstructorProfile(
            id=model.id,
            user_id=model.user_id,
            specialization=model.specialization,
            experience_years=model.experience_years,
            is_freelance=model.is_freelance,
            application_id=model.application_id,
            verified_at=ensure_app_timezone(model.verified_at),
        )


__all__ = ["InstructorRepository"]
