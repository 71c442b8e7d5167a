"""Use case for approving, rejecting, confirming or cancelling a request."""

from sqlalchemy.orm import Session

from gymhub.application.lifecycle import RequestStateMachine
from gymhub.domain.entities import Request, RequestAction, User


def decide_request(
    session: Session,
    *,
    request_id: int,
    action: RequestAction | str,
    actor: User,
    review_note: str | None = None,
    dispatcher=None,
) -> Request:
    machine = RequestStateMachine(session, dispatcher=dispatcher)
    return machine.transition(request_id, action, actor, review_note)
