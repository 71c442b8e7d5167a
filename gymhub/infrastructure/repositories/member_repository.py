"""Persistence helpers for gym members."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from gymhub.domain.entities import (
    MEMBER_STATUS_ACTIVE,
    PAYMENT_STATUS_PAID,
    Member,
)
from gymhub.infrastructure.models import MemberModel
from gymhub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class MemberRepository:
    """Provide typed mutations for :class:`Member` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, member_id: int) -> Member | None:
        model = self.session.get(MemberModel, member_id)
        return self._to_entity(model) if model else None

    def create(self, member: Member) -> Member:
        model = MemberModel(
            gym_id=member.gym_id,
            user_id=member.user_id,
            membership_plan=member.membership_plan,
            payment_method=member.payment_method,
            status=member.status,
            payment_status=member.payment_status,
            last_payment_date=ensure_app_naive_datetime(member.last_payment_date),
            next_payment_date=ensure_app_naive_datetime(member.next_payment_date),
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def activate(
        self,
        member_id: int,
        *,
        last_payment_date: datetime,
        next_payment_date: datetime,
    ) -> Member:
        """Mark the membership as active and paid for the given period."""

        model = self.session.get(MemberModel, member_id)
        if model is None:
            msg = f"Member with id {member_id} not found"
            raise ValueError(msg)
        model.status = MEMBER_STATUS_ACTIVE
        model.payment_status = PAYMENT_STATUS_PAID
        model.last_payment_date = ensure_app_naive_datetime(last_payment_date)
        model.next_payment_date = ensure_app_naive_datetime(next_payment_date)
        model.updated_at = now_in_app_naive_datetime()
        self.session.flush()
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: MemberModel) -> Member:
        return Member(
            id=model.id,
            gym_id=model.gym_id,
            user_id=model.user_id,
            membership_plan=model.membership_plan,
            payment_method=model.payment_method,
            status=model.status,
            payment_status=model.payment_status,
            last_payment_date=ensure_app_timezone(model.last_payment_date),
            next_payment_date=ensure_app_timezone(model.next_payment_date),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["MemberRepository"]
