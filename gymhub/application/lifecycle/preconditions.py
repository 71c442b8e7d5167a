"""Kind-specific checks evaluated after authority and before any write."""

from __future__ import annotations

from collections.abc import Callable

from gymhub.domain.entities import PAYMENT_METHOD_MANUAL, Request
from gymhub.domain.errors import PreconditionFailed

from .context import LifecycleContext

Precondition = Callable[[LifecycleContext, Request, str | None], None]


def require_review_note(
    ctx: LifecycleContext, request: Request, review_note: str | None
) -> None:
    if not review_note or not review_note.strip():
        raise PreconditionFailed("A review note explaining the rejection is required")


def require_manual_payment(
    ctx: LifecycleContext, request: Request, review_note: str | None
) -> None:
    member = ctx.members.get(request.subject_id)
    if member is None:
        raise PreconditionFailed(f"Member {request.subject_id} no longer exists")
    if member.payment_method != PAYMENT_METHOD_MANUAL:
        raise PreconditionFailed(
            "Only members paying manually can have their payment confirmed"
        )


def require_not_expired(
    ctx: LifecycleContext, request: Request, review_note: str | None
) -> None:
    if request.is_expired(ctx.now):
        raise PreconditionFailed(f"Request {request.id} has expired")


__all__ = [
    "Precondition",
    "require_manual_payment",
    "require_not_expired",
    "require_review_note",
]
