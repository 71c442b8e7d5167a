"""Persistence layer for reviewable requests."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from gymhub.domain.entities import Request, RequestKind, RequestState
from gymhub.infrastructure.models import RequestModel
from gymhub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class RequestRepository:
    """Provide persistence operations for :class:`Request` entities.

    Writes are flushed and left for the caller to commit so that a decision
    and its effects land in one transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, request_id: int) -> Request | None:
        model = self.session.get(RequestModel, request_id)
        return self._to_entity(model) if model else None

    def create(self, request: Request) -> Request:
        model = RequestModel()
        self._apply_entity_to_model(model, request)
        model.created_at = ensure_app_naive_datetime(
            request.created_at
        ) or now_in_app_naive_datetime()
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def apply_decision(
        self,
        request_id: int,
        *,
        expected_state: RequestState,
        new_state: RequestState,
        decided_at: datetime,
        reviewed_by: int | None = None,
        review_note: str | None = None,
    ) -> Request | None:
        """Move ``request_id`` out of ``expected_state`` atomically.

        The update only matches while the row is still in ``expected_state``;
        ``None`` is returned when another decision won the race.
        """

        decided = ensure_app_naive_datetime(decided_at)
        statement = (
            update(RequestModel)
            .where(RequestModel.id == request_id)
            .where(RequestModel.state == expected_state.value)
            .values(
                state=new_state.value,
                reviewed_by=reviewed_by,
                review_note=review_note,
                decided_at=decided,
                updated_at=decided,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        if result.rowcount == 0:
            return None
        model = self.session.get(RequestModel, request_id)
        self.session.refresh(model)
        return self._to_entity(model)

    def find_pending(
        self,
        kind: RequestKind,
        *,
        subject_id: int | None = None,
        submitted_by: int | None = None,
        payload_match: dict[str, Any] | None = None,
    ) -> Request | None:
        """Return the first pending request matching the filters, if any."""

        query = (
            self.session.query(RequestModel)
            .filter(RequestModel.kind == kind.value)
            .filter(RequestModel.state == RequestState.PENDING.value)
        )
        if subject_id is not None:
            query = query.filter(RequestModel.subject_id == subject_id)
        if submitted_by is not None:
            query = query.filter(RequestModel.submitted_by == submitted_by)
        for model in query.order_by(RequestModel.id).all():
            payload = model.payload or {}
            if payload_match and any(
                payload.get(key) != value for key, value in payload_match.items()
            ):
                continue
            return self._to_entity(model)
        return None

    def list_by_submitter(
        self,
        user_id: int,
        *,
        kinds: Iterable[RequestKind] | None = None,
        state: RequestState | None = None,
    ) -> list[Request]:
        query = self.session.query(RequestModel).filter(
            RequestModel.submitted_by == user_id
        )
        if kinds:
            query = query.filter(RequestModel.kind.in_([kind.value for kind in kinds]))
        if state is not None:
            query = query.filter(RequestModel.state == state.value)
        query = query.order_by(RequestModel.created_at.desc(), RequestModel.id.desc())
        return [self._to_entity(model) for model in query.all()]

    def list_pending_for_reviewer(
        self,
        *,
        addressed_to: int | None = None,
        kinds: Iterable[RequestKind] | None = None,
    ) -> list[Request]:
        """List pending requests in a review queue, oldest first.

        ``addressed_to=None`` selects the administrator queue.
        """

        query = self.session.query(RequestModel).filter(
            RequestModel.state == RequestState.PENDING.value
        )
        if addressed_to is None:
            query = query.filter(RequestModel.addressed_to.is_(None))
        else:
            query = query.filter(RequestModel.addressed_to == addressed_to)
        if kinds:
            query = query.filter(RequestModel.kind.in_([kind.value for kind in kinds]))
        query = query.order_by(RequestModel.created_at, RequestModel.id)
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: RequestModel) -> Request:
        return Request(
            id=model.id,
            kind=RequestKind(model.kind),
            state=RequestState(model.state),
            submitted_by=model.submitted_by,
            subject_id=model.subject_id,
            addressed_to=model.addressed_to,
            payload=dict(model.payload or {}),
            reviewed_by=model.reviewed_by,
            review_note=model.review_note,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            decided_at=ensure_app_timezone(model.decided_at),
            expires_at=ensure_app_timezone(model.expires_at),
        )

    @staticmethod
    def _apply_entity_to_model(model: RequestModel, request: Request) -> None:
        model.kind = RequestKind(request.kind).value
        model.state = RequestState(request.state).value
        model.submitted_by = request.submitted_by
        model.subject_id = request.subject_id
        model.addressed_to = request.addressed_to
        model.payload = dict(request.payload or {})
        model.reviewed_by = request.reviewed_by
        model.review_note = request.review_note
        model.updated_at = ensure_app_naive_datetime(request.updated_at)
        model.decided_at = ensure_app_naive_datetime(request.decided_at)
        model.expires_at = ensure_app_naive_datetime(request.expires_at)


__all__ = ["RequestRepository"]
