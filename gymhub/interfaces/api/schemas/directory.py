"""Pydantic models for the instructor directory endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class FreelanceInstructorRead(BaseModel):
    user_id: int
    name: str
    email: str
    specialization: str
    experience_years: int
    verified_at: datetime | None = None


class RosterEntryRead(BaseModel):
    instructor_id: int
    name: str
    engagement: str
    joined_at: datetime | None = None


__all__ = ["FreelanceInstructorRead", "RosterEntryRead"]
