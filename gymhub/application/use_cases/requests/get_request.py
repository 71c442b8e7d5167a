"""Use case for retrieving a single request."""

from sqlalchemy.orm import Session

from gymhub.domain.entities import Request, User
from gymhub.domain.errors import Forbidden, NotFound
from gymhub.infrastructure.repositories import RequestRepository


def get_request(session: Session, *, request_id: int, actor: User) -> Request:
    """Return the request if ``actor`` submitted, reviews or decided it."""

    request = RequestRepository(session).get(request_id)
    if request is None:
        raise NotFound(f"Request {request_id} not found")
    involved = {request.submitted_by, request.addressed_to, request.reviewed_by}
    if actor.id not in involved and not actor.is_admin():
        raise Forbidden("Request belongs to another user")
    return request
