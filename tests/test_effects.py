"""Scenario tests for the side effects of each request kind."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from gymhub.application.lifecycle import LifecycleContext
from gymhub.application.lifecycle.effects import (
    collaboration_request_approved,
    gym_registration_approved,
)
from gymhub.application.use_cases.directory import (
    list_freelance_instructors,
    list_gym_instructors,
)
from gymhub.domain.entities import (
    ENGAGEMENT_FREELANCE,
    MEMBER_STATUS_ACTIVE,
    PAYMENT_METHOD_CARD,
    PAYMENT_STATUS_PAID,
    ROLE_CUSTOMER,
    ROLE_GYM_OWNER,
    ROLE_INSTRUCTOR,
    VERIFICATION_REJECTED,
    VERIFICATION_VERIFIED,
    NotificationType,
    RequestAction,
    RequestKind,
    RequestState,
)
from gymhub.domain.errors import Forbidden, PreconditionFailed
from gymhub.infrastructure.repositories import (
    GymRepository,
    InstructorRepository,
    MemberRepository,
    RequestRepository,
    UserRepository,
)


def _types(notifications):
    return [notification.type for notification in notifications]


def test_gym_registration_rejection_keeps_role_and_explains_reason(
    machine, submit, create_user, create_gym, admin, session, notifications_for
):
    owner = create_user(ROLE_CUSTOMER)
    gym = create_gym(owner)
    request = submit(owner, RequestKind.GYM_REGISTRATION, gym.id)

    decided = machine.transition(
        request.id, RequestAction.REJECT, admin, review_note="Missing business license"
    )

    assert decided.state is RequestState.REJECTED
    assert decided.review_note == "Missing business license"
    assert UserRepository(session).get(owner.id).role == ROLE_CUSTOMER
    stored_gym = GymRepository(session).get(gym.id)
    assert stored_gym.status == "rejected"
    assert stored_gym.verification_status == VERIFICATION_REJECTED

    rejection = next(
        n
        for n in notifications_for(owner.id)
        if n.type is NotificationType.GYM_REGISTRATION_REJECTED
    )
    assert "Missing business license" in rejection.message
    assert rejection.sender_id == admin.id
    assert NotificationType.ADMIN_ACTION_COMPLETED in _types(notifications_for(admin.id))


def test_gym_registration_approval_promotes_owner(
    machine, submit, create_user, create_gym, admin, session
):
    owner = create_user(ROLE_CUSTOMER)
    gym = create_gym(owner)
    request = submit(owner, RequestKind.GYM_REGISTRATION, gym.id)

    machine.transition(request.id, RequestAction.APPROVE, admin)

    assert UserRepository(session).get(owner.id).role == ROLE_GYM_OWNER
    stored_gym = GymRepository(session).get(gym.id)
    assert stored_gym.status == "approved"
    assert stored_gym.verification_status == VERIFICATION_VERIFIED


def test_gym_registration_effect_is_idempotent(
    machine, submit, create_user, create_gym, admin, session
):
    owner = create_user(ROLE_CUSTOMER)
    gym = create_gym(owner)
    request = submit(owner, RequestKind.GYM_REGISTRATION, gym.id)
    decided = machine.transition(request.id, RequestAction.APPROVE, admin)

    ctx = LifecycleContext.from_session(session)
    intents = gym_registration_approved(ctx, decided)
    session.commit()

    assert len(intents) == 2
    assert UserRepository(session).get(owner.id).role == ROLE_GYM_OWNER
    assert GymRepository(session).get(gym.id).verification_status == VERIFICATION_VERIFIED


def test_instructor_application_creates_verified_profile(
    machine, submit, create_user, admin, session, notifications_for
):
    applicant = create_user(ROLE_CUSTOMER, name="Ines Instructor")
    request = submit(
        applicant,
        RequestKind.INSTRUCTOR_APPLICATION,
        applicant.id,
        {"specialization": "crossfit", "experience_years": 6, "is_freelance": True},
    )
    assert NotificationType.INSTRUCTOR_APPLICATION_RECEIVED in _types(
        notifications_for(admin.id)
    )

    machine.transition(request.id, RequestAction.APPROVE, admin)

    assert UserRepository(session).get(applicant.id).role == ROLE_INSTRUCTOR
    profile = InstructorRepository(session).get_by_user(applicant.id)
    assert profile.specialization == "crossfit"
    assert profile.experience_years == 6
    assert profile.is_freelance is True
    assert profile.application_id == request.id
    assert NotificationType.INSTRUCTOR_APPLICATION_APPROVED in _types(
        notifications_for(applicant.id)
    )


def test_instructor_application_requires_specialization(submit, create_user):
    applicant = create_user(ROLE_CUSTOMER)
    with pytest.raises(PreconditionFailed):
        submit(applicant, RequestKind.INSTRUCTOR_APPLICATION, applicant.id, {})


@pytest.mark.parametrize("experience", ["5 years", -1, True, 2.5, "-3"])
def test_instructor_application_rejects_malformed_experience(
    submit, create_user, session, experience
):
    applicant = create_user(ROLE_CUSTOMER)

    with pytest.raises(PreconditionFailed):
        submit(
            applicant,
            RequestKind.INSTRUCTOR_APPLICATION,
            applicant.id,
            {"specialization": "yoga", "experience_years": experience},
        )

    assert RequestRepository(session).list_by_submitter(applicant.id) == []


def test_instructor_application_normalises_experience(machine, submit, create_user, admin, session):
    applicant = create_user(ROLE_CUSTOMER)
    request = submit(
        applicant,
        RequestKind.INSTRUCTOR_APPLICATION,
        applicant.id,
        {"specialization": " spinning ", "experience": " 7 "},
    )
    assert request.payload["experience_years"] == 7
    assert "experience" not in request.payload

    decided = machine.transition(request.id, RequestAction.APPROVE, admin)

    assert decided.state is RequestState.APPROVED
    profile = InstructorRepository(session).get_by_user(applicant.id)
    assert profile.experience_years == 7
    assert profile.specialization == "spinning"


def test_collaboration_approval_updates_roster_and_search(
    machine, submit, verified_gym, create_freelancer, session, notifications_for
):
    instructor = create_freelancer(name="Ivan Freelance")
    other = create_freelancer(name="Olivia Other")
    owner = UserRepository(session).get(verified_gym.owner_id)

    searchable = {user.id for _profile, user in list_freelance_instructors(session, gym_id=verified_gym.id)}
    assert searchable == {instructor.id, other.id}

    request = submit(
        owner,
        RequestKind.COLLABORATION_REQUEST,
        verified_gym.id,
        {"instructor_id": instructor.id, "message": "Weekend classes?"},
    )
    assert NotificationType.COLLABORATION_REQUEST_RECEIVED in _types(
        notifications_for(instructor.id)
    )

    machine.transition(request.id, RequestAction.APPROVE, instructor)

    searchable = {user.id for _profile, user in list_freelance_instructors(session, gym_id=verified_gym.id)}
    assert searchable == {other.id}
    roster = list_gym_instructors(session, gym_id=verified_gym.id)
    assert [(entry.instructor_id, entry.engagement) for entry, _user in roster] == [
        (instructor.id, ENGAGEMENT_FREELANCE)
    ]
    assert NotificationType.COLLABORATION_REQUEST_ACCEPTED in _types(
        notifications_for(owner.id)
    )


def test_collaboration_effect_does_not_duplicate_roster_entry(
    machine, submit, verified_gym, create_freelancer, session
):
    instructor = create_freelancer()
    owner = UserRepository(session).get(verified_gym.owner_id)
    request = submit(
        owner,
        RequestKind.COLLABORATION_REQUEST,
        verified_gym.id,
        {"instructor_id": instructor.id, "message": "Join us"},
    )
    decided = machine.transition(request.id, RequestAction.APPROVE, instructor)

    collaboration_request_approved(LifecycleContext.from_session(session), decided)
    session.commit()

    assert len(list_gym_instructors(session, gym_id=verified_gym.id)) == 1


def test_only_addressed_instructor_answers_collaboration(
    machine, submit, verified_gym, create_freelancer, session
):
    instructor = create_freelancer()
    stranger = create_freelancer()
    owner = UserRepository(session).get(verified_gym.owner_id)
    request = submit(
        owner,
        RequestKind.COLLABORATION_REQUEST,
        verified_gym.id,
        {"instructor_id": instructor.id, "message": "Join us"},
    )

    with pytest.raises(Forbidden):
        machine.transition(request.id, RequestAction.APPROVE, stranger)
    with pytest.raises(Forbidden):
        machine.transition(request.id, RequestAction.APPROVE, owner)


def test_collaboration_cancel_notifies_instructor(
    machine, submit, verified_gym, create_freelancer, session, notifications_for
):
    instructor = create_freelancer()
    owner = UserRepository(session).get(verified_gym.owner_id)
    request = submit(
        owner,
        RequestKind.COLLABORATION_REQUEST,
        verified_gym.id,
        {"instructor_id": instructor.id, "message": "Join us"},
    )

    machine.transition(request.id, RequestAction.CANCEL, owner)

    assert NotificationType.COLLABORATION_REQUEST_CANCELLED in _types(
        notifications_for(instructor.id)
    )


@pytest.fixture()
def pending_payment(submit, verified_gym, create_user, create_member):
    customer = create_user(ROLE_CUSTOMER, name="Mia Member")
    member = create_member(verified_gym, customer)
    paid_at = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
    request = submit(
        customer,
        RequestKind.PAYMENT_CONFIRMATION,
        member.id,
        {"amount": 45, "paid_at": paid_at.isoformat()},
    )
    return customer, member, request, paid_at


def test_confirmed_payment_activates_member_for_one_cycle(
    machine, pending_payment, verified_gym, session, notifications_for
):
    customer, member, request, paid_at = pending_payment
    owner = UserRepository(session).get(verified_gym.owner_id)
    assert request.addressed_to == owner.id
    assert NotificationType.PAYMENT_CONFIRMATION_SUBMITTED in _types(
        notifications_for(owner.id)
    )

    decided = machine.transition(request.id, RequestAction.CONFIRM, owner)

    assert decided.state is RequestState.CONFIRMED
    stored = MemberRepository(session).get(member.id)
    assert stored.status == MEMBER_STATUS_ACTIVE
    assert stored.payment_status == PAYMENT_STATUS_PAID
    assert stored.last_payment_date == paid_at
    assert stored.next_payment_date == stored.last_payment_date + timedelta(days=30)
    assert NotificationType.WELCOME_MESSAGE in _types(notifications_for(customer.id))


def test_payment_without_paid_at_uses_decision_time(
    machine, submit, verified_gym, create_user, create_member, admin, session
):
    customer = create_user(ROLE_CUSTOMER)
    member = create_member(verified_gym, customer)
    request = submit(customer, RequestKind.PAYMENT_CONFIRMATION, member.id, {"amount": 45})

    decided = machine.transition(request.id, RequestAction.CONFIRM, admin)

    stored = MemberRepository(session).get(member.id)
    assert stored.last_payment_date == decided.decided_at
    assert stored.next_payment_date - stored.last_payment_date == timedelta(days=30)


def test_card_payments_cannot_be_confirmed_manually(
    machine, submit, verified_gym, create_user, create_member, admin
):
    customer = create_user(ROLE_CUSTOMER)
    member = create_member(verified_gym, customer, payment_method=PAYMENT_METHOD_CARD)
    request = submit(customer, RequestKind.PAYMENT_CONFIRMATION, member.id)

    with pytest.raises(PreconditionFailed):
        machine.transition(request.id, RequestAction.CONFIRM, admin)


def test_other_gym_owner_cannot_confirm_payment(
    machine, pending_payment, create_user, create_gym
):
    _customer, _member, request, _paid_at = pending_payment
    rival = create_user(ROLE_GYM_OWNER)
    create_gym(rival, name="Rival Gym", verification_status=VERIFICATION_VERIFIED)

    with pytest.raises(Forbidden):
        machine.transition(request.id, RequestAction.CONFIRM, rival)


def test_rejected_payment_tells_member_why(
    machine, pending_payment, verified_gym, session, notifications_for
):
    customer, member, request, _paid_at = pending_payment
    owner = UserRepository(session).get(verified_gym.owner_id)

    machine.transition(
        request.id, RequestAction.REJECT, owner, review_note="No transfer received"
    )

    rejection = next(
        n
        for n in notifications_for(customer.id)
        if n.type is NotificationType.PAYMENT_CONFIRMATION_REJECTED
    )
    assert rejection.message == "No transfer received"
    assert MemberRepository(session).get(member.id).status != MEMBER_STATUS_ACTIVE


def test_duplicate_pending_submission_is_refused(submit, create_user, create_gym, admin):
    owner = create_user(ROLE_CUSTOMER)
    gym = create_gym(owner)
    submit(owner, RequestKind.GYM_REGISTRATION, gym.id)

    with pytest.raises(PreconditionFailed):
        submit(owner, RequestKind.GYM_REGISTRATION, gym.id)


def test_gym_registration_requires_ownership(submit, create_user, create_gym):
    owner = create_user(ROLE_CUSTOMER)
    intruder = create_user(ROLE_CUSTOMER)
    gym = create_gym(owner)

    with pytest.raises(Forbidden):
        submit(intruder, RequestKind.GYM_REGISTRATION, gym.id)
