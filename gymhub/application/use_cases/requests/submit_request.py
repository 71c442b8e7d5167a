"""Use case for opening a new reviewable request."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from gymhub.application.lifecycle import LifecycleContext, open_request
from gymhub.application.notifications import get_notification_dispatcher
from gymhub.domain.entities import Request, RequestKind, User

logger = logging.getLogger(__name__)


def submit_request(
    session: Session,
    *,
    actor: User,
    kind: RequestKind | str,
    subject_id: int,
    payload: dict[str, Any] | None = None,
    dispatcher=None,
) -> Request:
    """Validate, store and announce a pending request submitted by ``actor``."""

    ctx = LifecycleContext.from_session(session)
    try:
        request, intents = open_request(ctx, RequestKind(kind), actor, subject_id, payload)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(
        "User %s submitted %s request %s for subject %s",
        actor.id,
        request.kind.value,
        request.id,
        request.subject_id,
    )
    (dispatcher or get_notification_dispatcher()).dispatch(intents)
    return request
