"""Tests for the per-user notification use cases."""

import pytest

from board_realtime.application.use_cases.notifications import (
    clear_read_notifications,
    count_unread_notifications,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from board_realtime.domain.entities import Notification
from board_realtime.domain.errors import AuthorizationError, NotFoundError
from board_realtime.infrastructure.repositories import NotificationRepository


@pytest.fixture()
def create(db_session):
    repository = NotificationRepository(db_session)

    def _create(user_id: str, title: str = "T") -> Notification:
        return repository.create(
            Notification(id=None, user_id=user_id, type="comment_added", title=title, message="M")
        )

    return _create


def test_mark_notification_read_twice_keeps_first_read_time(db_session, create):
    notification = create("u1")

    first = mark_notification_read(db_session, notification.id, user_id="u1")
    second = mark_notification_read(db_session, notification.id, user_id="u1")

    assert first.is_read and second.is_read
    assert first.read_at == second.read_at
    assert count_unread_notifications(db_session, user_id="u1") == 0


def test_mark_notification_read_rejects_other_users(db_session, create):
    notification = create("u1")

    with pytest.raises(AuthorizationError):
        mark_notification_read(db_session, notification.id, user_id="intruder")

    assert count_unread_notifications(db_session, user_id="u1") == 1


def test_unknown_notification_raises_not_found(db_session):
    with pytest.raises(NotFoundError):
        mark_notification_read(db_session, 404, user_id="u1")
    with pytest.raises(NotFoundError):
        delete_notification(db_session, 404, user_id="u1")


def test_delete_notification_only_by_owner(db_session, create):
    notification = create("u1")

    with pytest.raises(AuthorizationError):
        delete_notification(db_session, notification.id, user_id="u2")

    delete_notification(db_session, notification.id, user_id="u1")
    assert list_notifications(db_session, user_id="u1") == []


def test_clear_read_example(db_session, create):
    n1 = create("A", "N1")
    n2 = create("A", "N2")
    n3 = create("B", "N3")
    mark_notification_read(db_session, n1.id, user_id="A")
    mark_notification_read(db_session, n3.id, user_id="B")

    assert clear_read_notifications(db_session, user_id="A") == 1

    assert [item.id for item in list_notifications(db_session, user_id="A")] == [n2.id]
    assert [item.id for item in list_notifications(db_session, user_id="B")] == [n3.id]


def test_unread_count_tracks_list(db_session, create):
    for _ in range(3):
        create("u1")

    assert mark_all_notifications_read(db_session, user_id="u1") == 3
    create("u1")

    unread = list_notifications(db_session, user_id="u1", unread_only=True)
    assert count_unread_notifications(db_session, user_id="u1") == len(unread) == 1
