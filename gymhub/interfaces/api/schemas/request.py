"""Pydantic models describing request submissions and decisions."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gymhub.domain.entities import RequestAction, RequestKind, RequestState


class RequestCreate(BaseModel):
    kind: RequestKind
    subject_id: int = Field(..., gt=0)
    payload: dict[str, Any] = Field(default_factory=dict)


class RequestDecision(BaseModel):
    action: RequestAction
    review_note: str | None = Field(default=None, max_length=2000)


class RequestRead(BaseModel):
    """Representation of a request returned to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    kind: RequestKind
    state: RequestState
    submitted_by: int
    subject_id: int
    addressed_to: int | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    reviewed_by: int | None = None
    review_note: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    decided_at: datetime | None = None
    expires_at: datetime | None = None


__all__ = ["RequestCreate", "RequestDecision", "RequestRead"]
