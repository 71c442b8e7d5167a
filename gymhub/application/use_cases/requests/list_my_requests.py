"""Use case for listing the requests an actor has submitted."""

from __future__ import annotations

from sqlalchemy.orm import Session

from gymhub.domain.entities import Request, RequestKind, RequestState, User
from gymhub.infrastructure.repositories import RequestRepository


def list_my_requests(
    session: Session,
    *,
    actor: User,
    kind: RequestKind | None = None,
    state: RequestState | None = None,
) -> list[Request]:
    return RequestRepository(session).list_by_submitter(
        actor.id, kinds=[kind] if kind else None, state=state
    )
