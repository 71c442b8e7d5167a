"""Persistence layer for user data (the identity/actor collaborator)."""

from __future__ import annotations

from sqlalchemy.orm import Session

from gymhub.domain.entities import User
from gymhub.infrastructure.models import UserModel
from gymhub.utils import ensure_app_timezone, now_in_app_naive_datetime


class UserRepository:
    """Provide lookups and role mutation for user entities.

    Mutations are flushed, not committed: the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self.session.query(UserModel).filter_by(email=email).first()
        return self._to_entity(model) if model else None

    def exists(self, user_id: int) -> bool:
        return (
            self.session.query(UserModel.id).filter(UserModel.id == user_id).first()
            is not None
        )

    def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def set_role(self, user_id: int, role: str) -> User:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        if model.role != role:
            model.role = role
            model.updated_at = now_in_app_naive_datetime()
            self.session.flush()
        return self._to_entity(model)

    def list_ids_by_role(self, role: str) -> list[int]:
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.role == role)
            .filter(UserModel.is_active.is_(True))
            .order_by(UserModel.id)
        )
        return [user_id for (user_id,) in query.all()]

    def list_active_ids(self) -> list[int]:
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.is_active.is_(True))
            .order_by(UserModel.id)
        )
        return [user_id for (user_id,) in query.all()]

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            role=model.role,
            is_active=model.is_active,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["UserRepository"]
