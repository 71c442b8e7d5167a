"""Validation and announcement rules for new requests, one per kind."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from gymhub.domain.entities import (
    PRIORITY_HIGH,
    ROLE_ADMIN,
    ROLE_INSTRUCTOR,
    VERIFICATION_PENDING,
    NotificationIntent,
    NotificationType,
    Request,
    RequestKind,
    RequestState,
    User,
)
from gymhub.domain.errors import Forbidden, NotFound, PreconditionFailed
from gymhub.utils import add_days

from .context import LifecycleContext


@dataclass
class SubmissionPlan:
    """What a validated submission should store beyond the caller's input."""

    addressed_to: int | None = None
    expires_at: datetime | None = None


Validator = Callable[[LifecycleContext, User, int, dict[str, Any]], SubmissionPlan]
Announcer = Callable[[LifecycleContext, Request], list[NotificationIntent]]


@dataclass(frozen=True)
class SubmissionRule:
    validate: Validator
    announce: Announcer


def _require_text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise PreconditionFailed(f"Payload field '{key}' is required")
    return value.strip()


def _ensure_no_pending(
    ctx: LifecycleContext, kind: RequestKind, subject_id: int, **payload_match
) -> None:
    duplicate = ctx.requests.find_pending(
        kind, subject_id=subject_id, payload_match=payload_match or None
    )
    if duplicate is not None:
        raise PreconditionFailed(
            f"A pending {kind.value} request already exists (request {duplicate.id})"
        )


def _admin_intents(
    ctx: LifecycleContext,
    request: Request,
    notification_type: NotificationType,
    title: str,
    message: str,
) -> list[NotificationIntent]:
    return [
        NotificationIntent(
            recipient_id=admin_id,
            type=notification_type,
            title=title,
            message=message,
            sender_id=request.submitted_by,
            payload={"request_id": request.id, "kind": request.kind.value},
            link=f"/requests/{request.id}",
            priority=PRIORITY_HIGH,
        )
        for admin_id in ctx.users.list_ids_by_role(ROLE_ADMIN)
        if admin_id != request.submitted_by
    ]


# gym_registration


def _validate_gym_registration(ctx, actor, subject_id, payload) -> SubmissionPlan:
    gym = ctx.gyms.get(subject_id)
    if gym is None:
        raise NotFound(f"Gym {subject_id} not found")
    if gym.owner_id != actor.id:
        raise Forbidden("Only the gym owner can request its registration")
    if gym.verification_status != VERIFICATION_PENDING:
        raise PreconditionFailed(f"Gym {gym.id} is already {gym.verification_status}")
    _ensure_no_pending(ctx, RequestKind.GYM_REGISTRATION, subject_id)
    return SubmissionPlan()


def _announce_gym_registration(ctx, request) -> list[NotificationIntent]:
    gym = ctx.gyms.get(request.subject_id)
    gym_name = gym.name if gym else f"Gym {request.subject_id}"
    intents = [
        NotificationIntent(
            recipient_id=request.submitted_by,
            type=NotificationType.GYM_REGISTRATION_SUBMITTED,
            title="Gym registration submitted",
            message=f"Your registration for {gym_name} is awaiting review.",
            payload={"request_id": request.id, "gym_id": request.subject_id},
            link=f"/requests/{request.id}",
        )
    ]
    intents.extend(
        _admin_intents(
            ctx,
            request,
            NotificationType.NEW_GYM_REGISTRATION,
            "New gym registration",
            f"{gym_name} is waiting for verification.",
        )
    )
    return intents


# instructor_application


def _require_experience_years(payload: dict[str, Any]) -> int:
    """Return the applicant's experience as a non-negative whole number of years."""

    value = payload.pop("experience", None)
    value = payload.get("experience_years", value)
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise PreconditionFailed("Payload field 'experience_years' must be a whole number")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise PreconditionFailed("Payload field 'experience_years' must be a whole number")
        return int(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise PreconditionFailed(
            "Payload field 'experience_years' must be a non-negative whole number"
        )
    return value


def _validate_instructor_application(ctx, actor, subject_id, payload) -> SubmissionPlan:
    if subject_id != actor.id:
        raise Forbidden("Users can only apply as instructors for themselves")
    if actor.has_role(ROLE_INSTRUCTOR) or ctx.instructors.get_by_user(actor.id):
        raise PreconditionFailed("User is already a verified instructor")
    payload["specialization"] = _require_text(payload, "specialization")
    payload["experience_years"] = _require_experience_years(payload)
    _ensure_no_pending(ctx, RequestKind.INSTRUCTOR_APPLICATION, subject_id)
    return SubmissionPlan()


def _announce_instructor_application(ctx, request) -> list[NotificationIntent]:
    applicant = ctx.users.get(request.submitted_by)
    name = applicant.name if applicant else f"User {request.submitted_by}"
    intents = [
        NotificationIntent(
            recipient_id=request.submitted_by,
            type=NotificationType.INSTRUCTOR_APPLICATION_SUBMITTED,
            title="Application submitted",
            message="Your instructor application is awaiting review.",
            payload={"request_id": request.id},
            link=f"/requests/{request.id}",
        )
    ]
    intents.extend(
        _admin_intents(
            ctx,
            request,
            NotificationType.INSTRUCTOR_APPLICATION_RECEIVED,
            "New instructor application",
            f"{name} applied to become an instructor "
            f"({request.payload.get('specialization')}).",
        )
    )
    return intents


# collaboration_request


def _validate_collaboration_request(ctx, actor, subject_id, payload) -> SubmissionPlan:
    gym = ctx.gyms.get(subject_id)
    if gym is None:
        raise NotFound(f"Gym {subject_id} not found")
    if gym.owner_id != actor.id:
        raise Forbidden("Only the gym owner can invite instructors")
    if not gym.is_verified():
        raise PreconditionFailed("Only verified gyms can send collaboration requests")
    try:
        instructor_id = int(payload.get("instructor_id"))
    except (TypeError, ValueError) as exc:
        raise PreconditionFailed("Payload field 'instructor_id' is required") from exc
    payload["instructor_id"] = instructor_id
    profile = ctx.instructors.get_by_user(instructor_id)
    if profile is None or not profile.is_freelance:
        raise PreconditionFailed(
            f"User {instructor_id} is not a verified freelance instructor"
        )
    if ctx.gyms.has_instructor(gym.id, instructor_id):
        raise PreconditionFailed(f"Instructor {instructor_id} already works with this gym")
    _require_text(payload, "message")
    _ensure_no_pending(
        ctx, RequestKind.COLLABORATION_REQUEST, subject_id, instructor_id=instructor_id
    )
    return SubmissionPlan(
        addressed_to=instructor_id,
        expires_at=add_days(ctx.now, ctx.settings.collaboration_request_ttl_days),
    )


def _announce_collaboration_request(ctx, request) -> list[NotificationIntent]:
    gym = ctx.gyms.get(request.subject_id)
    gym_name = gym.name if gym else f"Gym {request.subject_id}"
    return [
        NotificationIntent(
            recipient_id=request.addressed_to,
            type=NotificationType.COLLABORATION_REQUEST_RECEIVED,
            title="New collaboration request",
            message=f"{gym_name}: {request.payload.get('message', '').strip()}",
            sender_id=request.submitted_by,
            payload={"request_id": request.id, "gym_id": request.subject_id},
            link=f"/requests/{request.id}",
            priority=PRIORITY_HIGH,
        )
    ]


# payment_confirmation


def _validate_payment_confirmation(ctx, actor, subject_id, payload) -> SubmissionPlan:
    member = ctx.members.get(subject_id)
    if member is None:
        raise NotFound(f"Member {subject_id} not found")
    if member.user_id != actor.id:
        raise Forbidden("Members can only confirm their own payments")
    if member.is_paid_up():
        raise PreconditionFailed("Membership is already active and paid")
    paid_at = payload.get("paid_at")
    if paid_at is not None:
        try:
            datetime.fromisoformat(str(paid_at))
        except ValueError as exc:
            raise PreconditionFailed("Payload field 'paid_at' must be an ISO datetime") from exc
    _ensure_no_pending(ctx, RequestKind.PAYMENT_CONFIRMATION, subject_id)
    gym = ctx.gyms.get(member.gym_id)
    return SubmissionPlan(addressed_to=gym.owner_id if gym else None)


def _announce_payment_confirmation(ctx, request) -> list[NotificationIntent]:
    if request.addressed_to is None:
        return _admin_intents(
            ctx,
            request,
            NotificationType.PAYMENT_CONFIRMATION_SUBMITTED,
            "Payment awaiting confirmation",
            f"Member {request.subject_id} reported a manual payment.",
        )
    member_user = ctx.users.get(request.submitted_by)
    name = member_user.name if member_user else f"Member {request.subject_id}"
    return [
        NotificationIntent(
            recipient_id=request.addressed_to,
            type=NotificationType.PAYMENT_CONFIRMATION_SUBMITTED,
            title="Payment awaiting confirmation",
            message=f"{name} reported a manual payment.",
            sender_id=request.submitted_by,
            payload={"request_id": request.id, "member_id": request.subject_id},
            link=f"/requests/{request.id}",
            priority=PRIORITY_HIGH,
        )
    ]


SUBMISSIONS: dict[RequestKind, SubmissionRule] = {
    RequestKind.GYM_REGISTRATION: SubmissionRule(
        _validate_gym_registration, _announce_gym_registration
    ),
    RequestKind.INSTRUCTOR_APPLICATION: SubmissionRule(
        _validate_instructor_application, _announce_instructor_application
    ),
    RequestKind.COLLABORATION_REQUEST: SubmissionRule(
        _validate_collaboration_request, _announce_collaboration_request
    ),
    RequestKind.PAYMENT_CONFIRMATION: SubmissionRule(
        _validate_payment_confirmation, _announce_payment_confirmation
    ),
}


def open_request(
    ctx: LifecycleContext,
    kind: RequestKind,
    actor: User,
    subject_id: int,
    payload: dict[str, Any] | None = None,
) -> tuple[Request, list[NotificationIntent]]:
    """Validate and stage a new pending request; the caller commits."""

    rule = SUBMISSIONS[RequestKind(kind)]
    payload = dict(payload or {})
    plan = rule.validate(ctx, actor, subject_id, payload)
    request = ctx.requests.create(
        Request(
            id=None,
            kind=RequestKind(kind),
            state=RequestState.PENDING,
            submitted_by=actor.id,
            subject_id=subject_id,
            addressed_to=plan.addressed_to,
            payload=payload,
            created_at=ctx.now,
            expires_at=plan.expires_at,
        )
    )
    return request, rule.announce(ctx, request)


__all__ = ["SUBMISSIONS", "SubmissionPlan", "SubmissionRule", "open_request"]
