"""Use case for listing the pending requests waiting on an actor."""

from __future__ import annotations

from sqlalchemy.orm import Session

from gymhub.domain.entities import Request, RequestKind, User
from gymhub.infrastructure.repositories import RequestRepository


def list_inbox(
    session: Session, *, actor: User, kind: RequestKind | None = None
) -> list[Request]:
    """Return pending requests addressed to ``actor``, oldest first.

    Administrators also see the shared queue of requests with no specific
    reviewer (gym registrations and instructor applications).
    """

    repository = RequestRepository(session)
    kinds = [kind] if kind else None
    inbox = repository.list_pending_for_reviewer(addressed_to=actor.id, kinds=kinds)
    if actor.is_admin():
        inbox.extend(repository.list_pending_for_reviewer(addressed_to=None, kinds=kinds))
        inbox.sort(key=lambda request: (request.created_at, request.id))
    return inbox
