"""Domain side effects applied when a request reaches a terminal state.

Each handler receives the decided request plus the session-bound context,
mutates the domain stores through the repositories and returns the
notification intents the dispatcher should deliver after commit. Handlers
never dispatch themselves and must be safe to run more than once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from gymhub.domain.entities import (
    ENGAGEMENT_FREELANCE,
    GYM_STATUS_APPROVED,
    GYM_STATUS_REJECTED,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    ROLE_CUSTOMER,
    ROLE_GYM_OWNER,
    ROLE_INSTRUCTOR,
    VERIFICATION_REJECTED,
    VERIFICATION_VERIFIED,
    InstructorProfile,
    NotificationIntent,
    NotificationType,
    Request,
)
from gymhub.utils import add_days, ensure_app_timezone

from .context import LifecycleContext

logger = logging.getLogger(__name__)

EffectHandler = Callable[[LifecycleContext, Request], list[NotificationIntent]]


def _base_payload(request: Request, **extra) -> dict:
    return {"request_id": request.id, "kind": request.kind.value, **extra}


def _promote(ctx: LifecycleContext, user_id: int, role: str) -> None:
    user = ctx.users.get(user_id)
    if user is None:
        msg = f"User with id {user_id} not found"
        raise ValueError(msg)
    if user.has_role(ROLE_CUSTOMER):
        ctx.users.set_role(user_id, role)
        logger.info("Promoted user %s from %s to %s", user_id, user.role, role)


def _admin_action_completed(request: Request, summary: str) -> NotificationIntent:
    return NotificationIntent(
        recipient_id=request.reviewed_by,
        type=NotificationType.ADMIN_ACTION_COMPLETED,
        title="Action completed",
        message=summary,
        payload=_base_payload(request, subject_id=request.subject_id),
        priority=PRIORITY_LOW,
    )


def _rejection(
    request: Request, notification_type: NotificationType, title: str, **extra
) -> NotificationIntent:
    return NotificationIntent(
        recipient_id=request.submitted_by,
        type=notification_type,
        title=title,
        message=request.review_note or "",
        sender_id=request.reviewed_by,
        payload=_base_payload(request, reason=request.review_note, **extra),
        priority=PRIORITY_HIGH,
    )


def gym_registration_approved(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    _promote(ctx, request.submitted_by, ROLE_GYM_OWNER)
    gym = ctx.gyms.set_verification_status(
        request.subject_id,
        status=GYM_STATUS_APPROVED,
        verification_status=VERIFICATION_VERIFIED,
    )
    intents = [
        NotificationIntent(
            recipient_id=request.submitted_by,
            type=NotificationType.GYM_REGISTRATION_APPROVED,
            title="Gym registration approved",
            message=f"Your gym {gym.name} has been approved and is now verified.",
            sender_id=request.reviewed_by,
            payload=_base_payload(request, gym_id=gym.id),
            link=f"/gyms/{gym.id}",
            priority=PRIORITY_HIGH,
        )
    ]
    if request.reviewed_by is not None:
        intents.append(
            _admin_action_completed(request, f"You approved the registration of {gym.name}.")
        )
    return intents


def gym_registration_rejected(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    gym = ctx.gyms.set_verification_status(
        request.subject_id,
        status=GYM_STATUS_REJECTED,
        verification_status=VERIFICATION_REJECTED,
    )
    intents = [
        _rejection(
            request,
            NotificationType.GYM_REGISTRATION_REJECTED,
            "Gym registration rejected",
            gym_id=gym.id,
        )
    ]
    if request.reviewed_by is not None:
        intents.append(
            _admin_action_completed(request, f"You rejected the registration of {gym.name}.")
        )
    return intents


def instructor_application_approved(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    payload = request.payload
    _promote(ctx, request.subject_id, ROLE_INSTRUCTOR)
    ctx.instructors.upsert(
        InstructorProfile(
            id=None,
            user_id=request.subject_id,
            specialization=str(payload.get("specialization", "")).strip(),
            experience_years=int(payload.get("experience_years") or 0),
            is_freelance=bool(payload.get("is_freelance", False)),
            application_id=request.id,
            verified_at=request.decided_at,
        )
    )
    return [
        NotificationIntent(
            recipient_id=request.subject_id,
            type=NotificationType.INSTRUCTOR_APPLICATION_APPROVED,
            title="Instructor application approved",
            message="Congratulations, you are now a verified instructor.",
            sender_id=request.reviewed_by,
            payload=_base_payload(request),
            link="/instructor/dashboard",
            priority=PRIORITY_HIGH,
        )
    ]


def instructor_application_rejected(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    return [
        _rejection(
            request,
            NotificationType.INSTRUCTOR_APPLICATION_REJECTED,
            "Instructor application rejected",
        )
    ]


def collaboration_request_approved(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    instructor_id = int(request.payload["instructor_id"])
    gym = ctx.gyms.get(request.subject_id)
    if gym is None:
        msg = f"Gym with id {request.subject_id} not found"
        raise ValueError(msg)
    added = ctx.gyms.add_instructor(gym.id, instructor_id, engagement=ENGAGEMENT_FREELANCE)
    if not added:
        logger.info("Instructor %s already on roster of gym %s", instructor_id, gym.id)
    instructor = ctx.users.get(instructor_id)
    name = instructor.name if instructor else f"Instructor {instructor_id}"
    return [
        NotificationIntent(
            recipient_id=gym.owner_id,
            type=NotificationType.COLLABORATION_REQUEST_ACCEPTED,
            title="Collaboration accepted",
            message=f"{name} accepted your collaboration request for {gym.name}.",
            sender_id=instructor_id,
            payload=_base_payload(request, gym_id=gym.id, instructor_id=instructor_id),
            link=f"/gyms/{gym.id}/instructors",
        )
    ]


def collaboration_request_rejected(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    return [
        _rejection(
            request,
            NotificationType.COLLABORATION_REQUEST_REJECTED,
            "Collaboration declined",
            gym_id=request.subject_id,
        )
    ]


def collaboration_request_cancelled(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    instructor_id = int(request.payload["instructor_id"])
    gym = ctx.gyms.get(request.subject_id)
    gym_name = gym.name if gym else f"gym {request.subject_id}"
    return [
        NotificationIntent(
            recipient_id=instructor_id,
            type=NotificationType.COLLABORATION_REQUEST_CANCELLED,
            title="Collaboration request withdrawn",
            message=f"The collaboration request from {gym_name} was cancelled.",
            sender_id=request.submitted_by,
            payload=_base_payload(request, gym_id=request.subject_id),
            priority=PRIORITY_LOW,
        )
    ]


def _paid_at(request: Request) -> datetime:
    raw = request.payload.get("paid_at")
    if raw:
        try:
            return ensure_app_timezone(datetime.fromisoformat(str(raw)))
        except ValueError:
            logger.warning("Ignoring malformed paid_at %r on request %s", raw, request.id)
    return request.decided_at


def payment_confirmation_confirmed(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    last_payment = _paid_at(request)
    next_payment = add_days(last_payment, ctx.settings.membership_cycle_days)
    member = ctx.members.activate(
        request.subject_id,
        last_payment_date=last_payment,
        next_payment_date=next_payment,
    )
    gym = ctx.gyms.get(member.gym_id)
    gym_name = gym.name if gym else "your gym"
    return [
        NotificationIntent(
            recipient_id=member.user_id,
            type=NotificationType.WELCOME_MESSAGE,
            title=f"Welcome to {gym_name}",
            message=(
                f"Your payment was confirmed. Your membership is active until "
                f"{next_payment.date().isoformat()}."
            ),
            sender_id=request.reviewed_by,
            payload=_base_payload(
                request,
                member_id=member.id,
                gym_id=member.gym_id,
                next_payment_date=next_payment.isoformat(),
            ),
            priority=PRIORITY_HIGH,
        )
    ]


def payment_confirmation_rejected(
    ctx: LifecycleContext, request: Request
) -> list[NotificationIntent]:
    return [
        _rejection(
            request,
            NotificationType.PAYMENT_CONFIRMATION_REJECTED,
            "Payment not confirmed",
            member_id=request.subject_id,
        )
    ]


def no_effect(ctx: LifecycleContext, request: Request) -> list[NotificationIntent]:
    return []


__all__ = [
    "EffectHandler",
    "collaboration_request_approved",
    "collaboration_request_cancelled",
    "collaboration_request_rejected",
    "gym_registration_approved",
    "gym_registration_rejected",
    "instructor_application_approved",
    "instructor_application_rejected",
    "no_effect",
    "payment_confirmation_confirmed",
    "payment_confirmation_rejected",
]
