"""Tests for the notification feed: counters, pagination and mutations."""

from __future__ import annotations

from datetime import timedelta

import pytest

from gymhub.application.notifications import NotificationFeed, decode_cursor, encode_cursor
from gymhub.domain.entities import (
    ROLE_CUSTOMER,
    Notification,
    NotificationIntent,
    NotificationType,
)
from gymhub.domain.errors import Forbidden, NotFound, PreconditionFailed
from gymhub.infrastructure.repositories import NotificationRepository
from gymhub.utils import now_in_app_timezone


@pytest.fixture()
def feed(session) -> NotificationFeed:
    return NotificationFeed(session)


@pytest.fixture()
def seed(session):
    """Insert notifications with explicit, strictly decreasing timestamps."""

    base = now_in_app_timezone() - timedelta(hours=1)

    def _seed(user, count: int, *, start: int = 0, **overrides):
        repository = NotificationRepository(session)
        created = []
        for index in range(start, start + count):
            fields = {
                "id": None,
                "recipient_id": user.id,
                "type": NotificationType.SYSTEM_ANNOUNCEMENT,
                "title": f"Notice {index}",
                "message": f"Message {index}",
                "created_at": base + timedelta(seconds=index),
                "expires_at": base + timedelta(days=30),
            }
            fields.update(overrides)
            created.append(repository.create(Notification(**fields)))
        return created

    return _seed


def _intent(user, title="Hello") -> NotificationIntent:
    return NotificationIntent(
        recipient_id=user.id,
        type=NotificationType.SYSTEM_ANNOUNCEMENT,
        title=title,
        message="Body",
    )


def test_unread_count_tracks_dispatch_and_mark_read(feed, dispatcher, create_user):
    user = create_user(ROLE_CUSTOMER)
    assert feed.get_unread_count(user) == 0

    created = []
    for expected in (1, 2, 3):
        created.extend(dispatcher.dispatch([_intent(user, f"n{expected}")]))
        assert feed.get_unread_count(user) == expected

    for expected, notification in zip((2, 1, 0), created):
        feed.mark_read(user, notification.id)
        assert feed.get_unread_count(user) == expected


def test_read_flag_is_derived_from_read_at(feed, dispatcher, create_user):
    user = create_user(ROLE_CUSTOMER)
    (notification,) = dispatcher.dispatch([_intent(user)])
    assert notification.read is False
    assert notification.read_at is None

    marked = feed.mark_read(user, notification.id)
    again = feed.mark_read(user, notification.id)

    assert marked.read is True
    assert marked.read_at is not None
    assert again.read_at == marked.read_at
    for item in feed.list(user).items:
        assert item.read is (item.read_at is not None)


def test_mark_read_then_list_shows_read_and_delete_omits(feed, dispatcher, create_user):
    user = create_user(ROLE_CUSTOMER)
    first, second = dispatcher.dispatch([_intent(user, "a"), _intent(user, "b")])

    feed.mark_read(user, first.id)
    listed = {item.id: item for item in feed.list(user).items}
    assert listed[first.id].read is True
    assert listed[second.id].read is False

    feed.delete(user, second.id)
    assert [item.id for item in feed.list(user).items] == [first.id]


def test_mutations_on_foreign_or_missing_notifications(feed, dispatcher, create_user):
    owner = create_user(ROLE_CUSTOMER)
    intruder = create_user(ROLE_CUSTOMER)
    (notification,) = dispatcher.dispatch([_intent(owner)])

    with pytest.raises(Forbidden):
        feed.mark_read(intruder, notification.id)
    with pytest.raises(Forbidden):
        feed.delete(intruder, notification.id)
    with pytest.raises(NotFound):
        feed.mark_read(owner, 12345)
    with pytest.raises(NotFound):
        feed.delete(owner, 12345)
    assert feed.get_unread_count(owner) == 1


def test_mark_all_read_and_delete_all_read(feed, seed, create_user):
    user = create_user(ROLE_CUSTOMER)
    other = create_user(ROLE_CUSTOMER)
    seed(user, 4)
    seed(other, 2)

    assert feed.mark_all_read(user) == 4
    assert feed.mark_all_read(user) == 0
    assert feed.get_unread_count(user) == 0
    assert feed.get_unread_count(other) == 2

    assert feed.delete_all_read(user) == 4
    assert feed.list(user).total_items == 0
    assert feed.list(other).total_items == 2


def test_page_metadata(feed, seed, create_user):
    user = create_user(ROLE_CUSTOMER)
    seed(user, 5)
    first = feed.list(user, page_size=2)
    assert first.snapshot == encode_cursor(first.items[0])

    page = feed.list(user, page=2, page_size=2, snapshot=first.snapshot)

    assert [item.title for item in page.items] == ["Notice 2", "Notice 1"]
    assert page.total_items == 5
    assert page.total_pages == 3
    assert page.current_page == 2
    assert page.unread_count == 5
    assert page.next_cursor is not None
    assert page.snapshot == first.snapshot

    last = feed.list(user, page=3, page_size=2, snapshot=first.snapshot)
    assert [item.title for item in last.items] == ["Notice 0"]
    assert last.next_cursor is None


def test_offset_pages_ignore_notifications_created_after_page_one(feed, seed, create_user):
    user = create_user(ROLE_CUSTOMER)
    seed(user, 20)

    first = feed.list(user, page=1, page_size=10)
    seed(user, 1, start=30)
    second = feed.list(user, page=2, page_size=10, snapshot=first.snapshot)

    first_ids = {item.id for item in first.items}
    second_ids = {item.id for item in second.items}
    assert first_ids.isdisjoint(second_ids)
    assert len(first_ids | second_ids) == 20
    assert [item.title for item in second.items][0] == "Notice 9"
    assert second.total_items == 20
    assert second.unread_count == 21

    fresh = feed.list(user, page=1, page_size=10)
    assert fresh.items[0].title == "Notice 30"


def test_later_pages_require_snapshot_or_cursor(feed, seed, create_user):
    user = create_user(ROLE_CUSTOMER)
    seed(user, 3)

    with pytest.raises(PreconditionFailed):
        feed.list(user, page=2, page_size=2)


def test_cursor_is_stable_across_inserts(feed, seed, create_user):
    user = create_user(ROLE_CUSTOMER)
    seed(user, 5)

    first_page = feed.list(user, page_size=2)
    assert [item.title for item in first_page.items] == ["Notice 4", "Notice 3"]

    seed(user, 3, start=10)

    second_page = feed.list(user, page=2, page_size=2, cursor=first_page.next_cursor)
    third_page = feed.list(user, page=3, page_size=2, cursor=second_page.next_cursor)

    assert [item.title for item in second_page.items] == ["Notice 2", "Notice 1"]
    assert [item.title for item in third_page.items] == ["Notice 0"]
    assert third_page.next_cursor is None
    assert second_page.total_items == 8


def test_unread_only_and_expired_notifications(feed, seed, create_user):
    user = create_user(ROLE_CUSTOMER)
    live = seed(user, 3)
    seed(
        user,
        1,
        start=20,
        created_at=now_in_app_timezone() - timedelta(days=40),
        expires_at=now_in_app_timezone() - timedelta(days=10),
    )
    feed.mark_read(user, live[0].id)

    unread_page = feed.list(user, unread_only=True)
    assert {item.id for item in unread_page.items} == {live[1].id, live[2].id}
    assert unread_page.total_items == 2
    assert feed.get_unread_count(user) == 2
    assert feed.list(user).total_items == 3

    assert feed.purge_expired() == 1


def test_cursor_round_trip_and_validation(seed, create_user, feed):
    user = create_user(ROLE_CUSTOMER)
    (notification,) = seed(user, 1)

    created_at, notification_id = decode_cursor(encode_cursor(notification))
    assert (created_at, notification_id) == (notification.created_at, notification.id)

    with pytest.raises(PreconditionFailed):
        feed.list(user, cursor="not-a-cursor")
    with pytest.raises(PreconditionFailed):
        feed.list(user, page=0)
