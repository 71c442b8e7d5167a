"""Concurrent decisions on the same request: exactly one writer wins."""

from __future__ import annotations

import threading

import pytest

from gymhub.application.lifecycle import RequestStateMachine
from gymhub.domain.entities import (
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    RequestAction,
    RequestKind,
    RequestState,
)
from gymhub.domain.errors import InvalidTransition
from gymhub.infrastructure import database
from gymhub.infrastructure.locks import KeyedLock
from gymhub.infrastructure.repositories import RequestRepository
from gymhub.utils import now_in_app_timezone


def test_concurrent_decisions_have_single_winner(
    submit, create_user, create_gym, dispatcher, session
):
    owner = create_user(ROLE_CUSTOMER)
    first_admin = create_user(ROLE_ADMIN)
    second_admin = create_user(ROLE_ADMIN)
    gym = create_gym(owner)
    request = submit(owner, RequestKind.GYM_REGISTRATION, gym.id)

    locks = KeyedLock()
    attempts = [
        (first_admin, RequestAction.APPROVE, None),
        (second_admin, RequestAction.REJECT, "Duplicate gym"),
    ]
    barrier = threading.Barrier(len(attempts))
    outcomes: list[object] = [None] * len(attempts)

    def worker(index, actor, action, note):
        worker_session = database.SessionLocal()
        machine = RequestStateMachine(worker_session, dispatcher=dispatcher, locks=locks)
        barrier.wait()
        try:
            outcomes[index] = machine.transition(request.id, action, actor, review_note=note)
        except InvalidTransition as exc:
            outcomes[index] = exc
        finally:
            worker_session.close()

    threads = [
        threading.Thread(target=worker, args=(index, *attempt))
        for index, attempt in enumerate(attempts)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    winners = [outcome for outcome in outcomes if not isinstance(outcome, Exception)]
    losers = [outcome for outcome in outcomes if isinstance(outcome, InvalidTransition)]
    assert len(winners) == 1
    assert len(losers) == 1

    stored = RequestRepository(session).get(request.id)
    assert stored.state is winners[0].state
    assert stored.state in {RequestState.APPROVED, RequestState.REJECTED}


def test_conditional_write_rejects_a_stale_pending_read(
    submit, create_user, create_gym, dispatcher, session, monkeypatch
):
    owner = create_user(ROLE_CUSTOMER)
    first_admin = create_user(ROLE_ADMIN)
    second_admin = create_user(ROLE_ADMIN)
    gym = create_gym(owner)
    request = submit(owner, RequestKind.GYM_REGISTRATION, gym.id)
    stale = RequestRepository(session).get(request.id)

    # Another process decides first; this process never saw its lock.
    RequestStateMachine(session, dispatcher=dispatcher, locks=KeyedLock()).transition(
        request.id, RequestAction.APPROVE, first_admin
    )
    monkeypatch.setattr(RequestRepository, "get", lambda self, request_id: stale)

    loser = RequestStateMachine(session, dispatcher=dispatcher, locks=KeyedLock())
    with pytest.raises(InvalidTransition):
        loser.transition(request.id, RequestAction.REJECT, second_admin, review_note="late")

    monkeypatch.undo()
    stored = RequestRepository(session).get(request.id)
    assert stored.state is RequestState.APPROVED
    assert stored.reviewed_by == first_admin.id


def test_apply_decision_only_matches_expected_state(submit, create_user, create_gym, session):
    owner = create_user(ROLE_CUSTOMER)
    gym = create_gym(owner)
    request = submit(owner, RequestKind.GYM_REGISTRATION, gym.id)
    repository = RequestRepository(session)
    now = now_in_app_timezone()

    first = repository.apply_decision(
        request.id,
        expected_state=RequestState.PENDING,
        new_state=RequestState.CANCELLED,
        decided_at=now,
    )
    second = repository.apply_decision(
        request.id,
        expected_state=RequestState.PENDING,
        new_state=RequestState.APPROVED,
        decided_at=now,
        reviewed_by=owner.id,
    )
    session.commit()

    assert first.state is RequestState.CANCELLED
    assert second is None
    assert repository.get(request.id).state is RequestState.CANCELLED


def test_keyed_lock_releases_entries():
    locks = KeyedLock()
    with locks.hold(1):
        with locks.hold(2):
            assert len(locks) == 2
    assert len(locks) == 0
