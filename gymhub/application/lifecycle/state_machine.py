"""The generic submit/decide state machine shared by every request kind."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from gymhub.config import Settings, get_settings
from gymhub.domain.entities import (
    NotificationIntent,
    Request,
    RequestAction,
    RequestState,
    User,
)
from gymhub.domain.errors import (
    EffectFailed,
    Forbidden,
    InvalidTransition,
    NotFound,
)
from gymhub.infrastructure.locks import KeyedLock, request_locks
from gymhub.utils import now_in_app_timezone

from .context import LifecycleContext
from .registry import TransitionRule, get_effect, get_rule

logger = logging.getLogger(__name__)


class RequestStateMachine:
    """Move requests out of ``pending`` and apply the matching effects.

    Guards run in a fixed order and the first failing one wins: existence,
    terminal state (unless the call replays the stored decision), legality of
    the action for the kind, authority, then kind-specific preconditions.

    The state write and the effect share the caller's session transaction;
    notifications are dispatched only after it commits.
    """

    def __init__(
        self,
        session: Session,
        *,
        dispatcher=None,
        locks: KeyedLock = request_locks,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        if dispatcher is None:
            from gymhub.application.notifications import get_notification_dispatcher

            dispatcher = get_notification_dispatcher()
        self.session = session
        self._dispatcher = dispatcher
        self._locks = locks
        self._settings = settings or get_settings()
        self._clock = clock

    def transition(
        self,
        request_id: int,
        action: RequestAction | str,
        actor: User,
        review_note: str | None = None,
    ) -> Request:
        try:
            action = RequestAction(action)
        except ValueError as exc:
            raise InvalidTransition(f"Unknown action '{action}'") from exc

        with self._locks.hold(request_id):
            request, intents = self._apply(request_id, action, actor, review_note)

        if intents:
            self._dispatcher.dispatch(intents)
        return request

    def _apply(
        self,
        request_id: int,
        action: RequestAction,
        actor: User,
        review_note: str | None,
    ) -> tuple[Request, list[NotificationIntent]]:
        ctx = LifecycleContext.from_session(
            self.session, settings=self._settings, now=self._clock()
        )
        request = ctx.requests.get(request_id)
        if request is None:
            raise NotFound(f"Request {request_id} not found")

        rule = get_rule(request.kind, action)
        if request.is_terminal:
            if self._is_replay(request, rule, actor):
                logger.info(
                    "Replayed %s on request %s by user %s", action.value, request.id, actor.id
                )
                return request, []
            raise InvalidTransition(
                f"Request {request.id} already decided ({request.state.value})"
            )
        if rule is None:
            raise InvalidTransition(
                f"Action '{action.value}' is not allowed for {request.kind.value} requests"
            )
        if not rule.authority(ctx, request, actor):
            raise Forbidden(
                f"User {actor.id} may not {action.value} request {request.id}"
            )

        note = review_note.strip() if review_note and review_note.strip() else None
        for check in rule.preconditions:
            check(ctx, request, note)

        decided: Request | None = None
        intents: list[NotificationIntent] = []
        try:
            decided = ctx.requests.apply_decision(
                request.id,
                expected_state=RequestState.PENDING,
                new_state=rule.target,
                decided_at=ctx.now,
                reviewed_by=actor.id if rule.reviewer_initiated else None,
                review_note=note,
            )
            if decided is not None:
                intents = list(get_effect(decided.kind, decided.state)(ctx, decided))
                self.session.commit()
        except Exception as exc:
            self.session.rollback()
            logger.exception(
                "Effect for %s on request %s failed; transition rolled back",
                action.value,
                request.id,
            )
            raise EffectFailed(
                f"Could not {action.value} request {request.id}: {exc}"
            ) from exc

        if decided is None:
            self.session.rollback()
            raise InvalidTransition(f"Request {request.id} already decided")

        logger.info(
            "Request %s (%s) moved pending -> %s by user %s",
            decided.id,
            decided.kind.value,
            decided.state.value,
            actor.id,
        )
        return decided, intents

    @staticmethod
    def _is_replay(request: Request, rule: TransitionRule | None, actor: User) -> bool:
        if rule is None or request.state != rule.target:
            return False
        if rule.reviewer_initiated:
            return request.reviewed_by == actor.id
        return request.reviewed_by is None and request.submitted_by == actor.id


__all__ = ["RequestStateMachine"]
