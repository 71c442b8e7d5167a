"""Endpoints for browsing freelance instructors and gym rosters."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gymhub.application.use_cases.directory import (
    list_freelance_instructors as list_freelance_instructors_uc,
    list_gym_instructors as list_gym_instructors_uc,
)
from gymhub.domain.entities import User
from gymhub.infrastructure.database import get_db
from gymhub.interfaces.api.dependencies import get_current_active_user
from gymhub.interfaces.api.schemas import (
    ApiResponse,
    FreelanceInstructorRead,
    RosterEntryRead,
)

router = APIRouter(tags=["directory"])


@router.get(
    "/instructors/freelance",
    response_model=ApiResponse[list[FreelanceInstructorRead]],
)
def list_freelance_instructors(
    gym_id: int | None = Query(default=None, description="Hide instructors already on this gym"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[list[FreelanceInstructorRead]]:
    entries = list_freelance_instructors_uc(db, gym_id=gym_id)
    return ApiResponse[list[FreelanceInstructorRead]](
        data=[
            FreelanceInstructorRead(
                user_id=user.id,
                name=user.name,
                email=user.email,
                specialization=profile.specialization,
                experience_years=profile.experience_years,
                verified_at=profile.verified_at,
            )
            for profile, user in entries
        ]
    )


@router.get("/gyms/{gym_id}/instructors", response_model=ApiResponse[list[RosterEntryRead]])
def list_gym_instructors(
    gym_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[list[RosterEntryRead]]:
    roster = list_gym_instructors_uc(db, gym_id=gym_id)
    return ApiResponse[list[RosterEntryRead]](
        data=[
            RosterEntryRead(
                instructor_id=entry.instructor_id,
                name=user.name,
                engagement=entry.engagement,
                joined_at=entry.joined_at,
            )
            for entry, user in roster
        ]
    )
