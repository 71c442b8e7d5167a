"""Domain entity representing a gym member and their payment details."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

MEMBER_STATUS_INACTIVE = "inactive"
MEMBER_STATUS_ACTIVE = "active"

PAYMENT_METHOD_CARD = "card"
PAYMENT_METHOD_MANUAL = "manual"

PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_PAID = "paid"
PAYMENT_STATUS_OVERDUE = "overdue"


@dataclass
class Member:
    """A user's membership at a specific gym."""

    id: int | None
    gym_id: int
    user_id: int
    membership_plan: str
    payment_method: str = PAYMENT_METHOD_MANUAL
    status: str = MEMBER_STATUS_INACTIVE
    payment_status: str = PAYMENT_STATUS_PENDING
    last_payment_date: datetime | None = None
    next_payment_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_paid_up(self) -> bool:
        return (
            self.status == MEMBER_STATUS_ACTIVE
            and self.payment_status == PAYMENT_STATUS_PAID
        )


__all__ = [
    "MEMBER_STATUS_ACTIVE",
    "MEMBER_STATUS_INACTIVE",
    "Member",
    "PAYMENT_METHOD_CARD",
    "PAYMENT_METHOD_MANUAL",
    "PAYMENT_STATUS_OVERDUE",
    "PAYMENT_STATUS_PAID",
    "PAYMENT_STATUS_PENDING",
]
