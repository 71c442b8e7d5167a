"""Endpoints for submitting and deciding reviewable requests."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gymhub.application.notifications import NotificationDispatcher
from gymhub.application.use_cases.requests import (
    decide_request as decide_request_uc,
    get_request as get_request_uc,
    list_inbox as list_inbox_uc,
    list_my_requests as list_my_requests_uc,
    submit_request as submit_request_uc,
)
from gymhub.domain.entities import Request, RequestKind, RequestState, User
from gymhub.infrastructure.database import get_db
from gymhub.interfaces.api.dependencies import get_current_active_user, get_dispatcher
from gymhub.interfaces.api.schemas import (
    ApiResponse,
    RequestCreate,
    RequestDecision,
    RequestRead,
)

router = APIRouter(prefix="/requests", tags=["requests"])


def _request_to_schema(request: Request) -> RequestRead:
    return RequestRead.model_validate(request)


@router.post(
    "",
    response_model=ApiResponse[RequestRead],
    status_code=status.HTTP_201_CREATED,
)
def submit_request(
    request_in: RequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ApiResponse[RequestRead]:
    """Open a new pending request on behalf of the authenticated user."""

    request = submit_request_uc(
        db,
        actor=current_user,
        kind=request_in.kind,
        subject_id=request_in.subject_id,
        payload=request_in.payload,
        dispatcher=dispatcher,
    )
    return ApiResponse[RequestRead](data=_request_to_schema(request))


@router.get("/mine", response_model=ApiResponse[list[RequestRead]])
def list_my_requests(
    kind: RequestKind | None = Query(default=None),
    state: RequestState | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[list[RequestRead]]:
    requests = list_my_requests_uc(db, actor=current_user, kind=kind, state=state)
    return ApiResponse[list[RequestRead]](
        data=[_request_to_schema(request) for request in requests]
    )


@router.get("/inbox", response_model=ApiResponse[list[RequestRead]])
def list_inbox(
    kind: RequestKind | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[list[RequestRead]]:
    """Return the pending requests the authenticated user can decide."""

    requests = list_inbox_uc(db, actor=current_user, kind=kind)
    return ApiResponse[list[RequestRead]](
        data=[_request_to_schema(request) for request in requests]
    )


@router.get("/{request_id}", response_model=ApiResponse[RequestRead])
def get_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ApiResponse[RequestRead]:
    request = get_request_uc(db, request_id=request_id, actor=current_user)
    return ApiResponse[RequestRead](data=_request_to_schema(request))


@router.post("/{request_id}/decide", response_model=ApiResponse[RequestRead])
def decide_request(
    request_id: int,
    decision: RequestDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ApiResponse[RequestRead]:
    """Approve, reject, confirm or cancel a pending request."""

    request = decide_request_uc(
        db,
        request_id=request_id,
        action=decision.action,
        actor=current_user,
        review_note=decision.review_note,
        dispatcher=dispatcher,
    )
    return ApiResponse[RequestRead](data=_request_to_schema(request))
