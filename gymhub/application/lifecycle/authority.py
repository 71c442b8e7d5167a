"""Authority predicates deciding who may act on a request."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from gymhub.domain.entities import Request, User

from .context import LifecycleContext

AuthorityPredicate = Callable[[LifecycleContext, Request, User], bool]


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def is_admin(ctx: LifecycleContext, request: Request, actor: User) -> bool:
    return actor.is_admin()


def is_submitter(ctx: LifecycleContext, request: Request, actor: User) -> bool:
    return actor.id == request.submitted_by


def is_addressed_instructor(
    ctx: LifecycleContext, request: Request, actor: User
) -> bool:
    """Only the instructor named in the collaboration payload may answer it."""

    instructor_id = _as_int(request.payload.get("instructor_id"))
    return instructor_id is not None and actor.id == instructor_id


def is_member_gym_owner_or_admin(
    ctx: LifecycleContext, request: Request, actor: User
) -> bool:
    if actor.is_admin():
        return True
    member = ctx.members.get(request.subject_id)
    if member is None:
        return False
    gym = ctx.gyms.get(member.gym_id)
    return gym is not None and gym.owner_id == actor.id


__all__ = [
    "AuthorityPredicate",
    "is_addressed_instructor",
    "is_admin",
    "is_member_gym_owner_or_admin",
    "is_submitter",
]
