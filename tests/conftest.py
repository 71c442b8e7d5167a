"""Shared fixtures: a throwaway SQLite database and small object factories."""

from __future__ import annotations

import itertools
import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_TIMEZONE"] = "UTC"

from gymhub.application.lifecycle import RequestStateMachine  # noqa: E402
from gymhub.application.notifications import NotificationDispatcher  # noqa: E402
from gymhub.application.use_cases.requests import submit_request  # noqa: E402
from gymhub.domain.entities import (  # noqa: E402
    PAYMENT_METHOD_MANUAL,
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_GYM_OWNER,
    ROLE_INSTRUCTOR,
    VERIFICATION_PENDING,
    VERIFICATION_VERIFIED,
    Gym,
    InstructorProfile,
    Member,
    User,
)
from gymhub.infrastructure import database  # noqa: E402
from gymhub.infrastructure.locks import KeyedLock  # noqa: E402
from gymhub.infrastructure.notifications import NotificationRetryQueue  # noqa: E402
from gymhub.infrastructure.repositories import (  # noqa: E402
    GymRepository,
    InstructorRepository,
    MemberRepository,
    NotificationRepository,
    UserRepository,
)
from gymhub.utils import now_in_app_timezone  # noqa: E402


@pytest.fixture(autouse=True)
def setup_database():
    """Prepare a fresh database for every test."""

    database.initialize_database()
    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def retry_queue() -> NotificationRetryQueue:
    return NotificationRetryQueue(max_attempts=3, base_delay=0.0)


@pytest.fixture()
def dispatcher(retry_queue) -> NotificationDispatcher:
    return NotificationDispatcher(
        database.SessionLocal, publisher=None, retry_queue=retry_queue
    )


@pytest.fixture()
def machine(session, dispatcher) -> RequestStateMachine:
    return RequestStateMachine(session, dispatcher=dispatcher, locks=KeyedLock())


@pytest.fixture()
def submit(session, dispatcher):
    def _submit(actor: User, kind, subject_id: int, payload: dict | None = None):
        return submit_request(
            session,
            actor=actor,
            kind=kind,
            subject_id=subject_id,
            payload=payload,
            dispatcher=dispatcher,
        )

    return _submit


@pytest.fixture()
def create_user(session):
    counter = itertools.count(1)

    def _create(role: str = ROLE_CUSTOMER, *, name: str | None = None, is_active: bool = True) -> User:
        number = next(counter)
        user = UserRepository(session).create(
            User(
                id=None,
                name=name or f"{role.title()} {number}",
                email=f"{role}{number}@example.com",
                role=role,
                is_active=is_active,
            )
        )
        session.commit()
        return user

    return _create


@pytest.fixture()
def admin(create_user) -> User:
    return create_user(ROLE_ADMIN, name="Ada Admin")


@pytest.fixture()
def create_gym(session):
    def _create(
        owner: User,
        *,
        name: str = "Iron Temple",
        verification_status: str = VERIFICATION_PENDING,
    ) -> Gym:
        status = "approved" if verification_status == VERIFICATION_VERIFIED else "pending"
        gym = GymRepository(session).create(
            Gym(
                id=None,
                owner_id=owner.id,
                name=name,
                status=status,
                verification_status=verification_status,
            )
        )
        session.commit()
        return gym

    return _create


@pytest.fixture()
def create_member(session):
    def _create(gym: Gym, user: User, *, payment_method: str = PAYMENT_METHOD_MANUAL) -> Member:
        member = MemberRepository(session).create(
            Member(
                id=None,
                gym_id=gym.id,
                user_id=user.id,
                membership_plan="monthly",
                payment_method=payment_method,
            )
        )
        session.commit()
        return member

    return _create


@pytest.fixture()
def create_freelancer(session, create_user):
    def _create(*, name: str | None = None, specialization: str = "yoga") -> User:
        user = create_user(ROLE_INSTRUCTOR, name=name)
        InstructorRepository(session).upsert(
            InstructorProfile(
                id=None,
                user_id=user.id,
                specialization=specialization,
                experience_years=4,
                is_freelance=True,
            )
        )
        session.commit()
        return user

    return _create


@pytest.fixture()
def verified_gym(create_user, create_gym) -> Gym:
    owner = create_user(ROLE_GYM_OWNER, name="Olga Owner")
    return create_gym(owner, verification_status=VERIFICATION_VERIFIED)


@pytest.fixture()
def notifications_for():
    """Return every visible notification of a user, newest first."""

    def _list(user_id: int, *, now: datetime | None = None):
        db = database.SessionLocal()
        try:
            return list(
                NotificationRepository(db).list_page(
                    user_id, now=now or now_in_app_timezone(), limit=1000
                )
            )
        finally:
            db.close()

    return _list
