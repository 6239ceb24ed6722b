"""Use case for removing the read notifications of a user."""

from sqlalchemy.orm import Session

from board_realtime.infrastructure.repositories import NotificationRepository


def clear_read_notifications(session: Session, *, user_id: str) -> int:
    """Delete read notifications of ``user_id`` and return how many were removed.

    Unread notifications and other users' notifications are never touched.
    """

    return NotificationRepository(session).delete_read_for_user(user_id)
