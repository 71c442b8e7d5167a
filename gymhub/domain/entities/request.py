"""Domain entity for reviewable requests and their lifecycle vocabulary."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class RequestKind(str, Enum):
    """Workflows that share the submit/decide lifecycle."""

    GYM_REGISTRATION = "gym_registration"
    INSTRUCTOR_APPLICATION = "instructor_application"
    COLLABORATION_REQUEST = "collaboration_request"
    PAYMENT_CONFIRMATION = "payment_confirmation"


class RequestState(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    CONFIRMED = "confirmed"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestState.PENDING


class RequestAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    CONFIRM = "confirm"


TERMINAL_STATES = frozenset(state for state in RequestState if state.is_terminal)


@dataclass
class Request:
    """An auditable unit of a submit/decide workflow.

    ``payload`` is captured at submission and never modified afterwards.
    ``decided_at`` is stamped on the first terminal transition and
    ``reviewed_by`` only when a reviewer (not the submitter) decided it.
    ``addressed_to`` names the reviewing user for kinds decided by a specific
    party; ``None`` means the administrator queue.
    """

    id: int | None
    kind: RequestKind
    state: RequestState
    submitted_by: int
    subject_id: int
    addressed_to: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    reviewed_by: int | None = None
    review_note: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    decided_at: datetime | None = None
    expires_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


__all__ = [
    "Request",
    "RequestAction",
    "RequestKind",
    "RequestState",
    "TERMINAL_STATES",
]
