"""Declarative tables describing every request kind.

``TRANSITIONS`` answers "may this action happen, to which state, and who may
do it"; ``EFFECTS`` maps each terminal state to its side-effect handler.
"""

from __future__ import annotations

from dataclasses import dataclass

from gymhub.domain.entities import RequestAction, RequestKind, RequestState

from . import effects
from .authority import (
    AuthorityPredicate,
    is_addressed_instructor,
    is_admin,
    is_member_gym_owner_or_admin,
    is_submitter,
)
from .effects import EffectHandler
from .preconditions import (
    Precondition,
    require_manual_payment,
    require_not_expired,
    require_review_note,
)


@dataclass(frozen=True)
class TransitionRule:
    target: RequestState
    authority: AuthorityPredicate
    preconditions: tuple[Precondition, ...] = ()
    reviewer_initiated: bool = True


_GYM = RequestKind.GYM_REGISTRATION
_INSTRUCTOR = RequestKind.INSTRUCTOR_APPLICATION
_COLLABORATION = RequestKind.COLLABORATION_REQUEST
_PAYMENT = RequestKind.PAYMENT_CONFIRMATION


def _cancel() -> TransitionRule:
    return TransitionRule(
        target=RequestState.CANCELLED,
        authority=is_submitter,
        reviewer_initiated=False,
    )


TRANSITIONS: dict[tuple[RequestKind, RequestAction], TransitionRule] = {
    (_GYM, RequestAction.APPROVE): TransitionRule(RequestState.APPROVED, is_admin),
    (_GYM, RequestAction.REJECT): TransitionRule(
        RequestState.REJECTED, is_admin, (require_review_note,)
    ),
    (_GYM, RequestAction.CANCEL): _cancel(),
    (_INSTRUCTOR, RequestAction.APPROVE): TransitionRule(
        RequestState.APPROVED, is_admin
    ),
    (_INSTRUCTOR, RequestAction.REJECT): TransitionRule(
        RequestState.REJECTED, is_admin, (require_review_note,)
    ),
    (_INSTRUCTOR, RequestAction.CANCEL): _cancel(),
    (_COLLABORATION, RequestAction.APPROVE): TransitionRule(
        RequestState.APPROVED, is_addressed_instructor, (require_not_expired,)
    ),
    (_COLLABORATION, RequestAction.REJECT): TransitionRule(
        RequestState.REJECTED,
        is_addressed_instructor,
        (require_review_note, require_not_expired),
    ),
    (_COLLABORATION, RequestAction.CANCEL): _cancel(),
    (_PAYMENT, RequestAction.CONFIRM): TransitionRule(
        RequestState.CONFIRMED, is_member_gym_owner_or_admin, (require_manual_payment,)
    ),
    (_PAYMENT, RequestAction.REJECT): TransitionRule(
        RequestState.REJECTED, is_member_gym_owner_or_admin, (require_review_note,)
    ),
    (_PAYMENT, RequestAction.CANCEL): _cancel(),
}

EFFECTS: dict[tuple[RequestKind, RequestState], EffectHandler] = {
    (_GYM, RequestState.APPROVED): effects.gym_registration_approved,
    (_GYM, RequestState.REJECTED): effects.gym_registration_rejected,
    (_INSTRUCTOR, RequestState.APPROVED): effects.instructor_application_approved,
    (_INSTRUCTOR, RequestState.REJECTED): effects.instructor_application_rejected,
    (_COLLABORATION, RequestState.APPROVED): effects.collaboration_request_approved,
    (_COLLABORATION, RequestState.REJECTED): effects.collaboration_request_rejected,
    (_COLLABORATION, RequestState.CANCELLED): effects.collaboration_request_cancelled,
    (_PAYMENT, RequestState.CONFIRMED): effects.payment_confirmation_confirmed,
    (_PAYMENT, RequestState.REJECTED): effects.payment_confirmation_rejected,
}


def get_rule(kind: RequestKind, action: RequestAction) -> TransitionRule | None:
    return TRANSITIONS.get((RequestKind(kind), RequestAction(action)))


def get_effect(kind: RequestKind, state: RequestState) -> EffectHandler:
    return EFFECTS.get((RequestKind(kind), RequestState(state)), effects.no_effect)


def allowed_actions(kind: RequestKind) -> list[RequestAction]:
    """Return the actions that may move a pending ``kind`` request."""

    return [action for (rule_kind, action) in TRANSITIONS if rule_kind == kind]


__all__ = [
    "EFFECTS",
    "TRANSITIONS",
    "TransitionRule",
    "allowed_actions",
    "get_effect",
    "get_rule",
]
