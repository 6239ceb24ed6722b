"""Use case for marking every unread notification of a user as read."""

from sqlalchemy.orm import Session

from board_realtime.infrastructure.repositories import NotificationRepository


def mark_all_notifications_read(session: Session, *, user_id: str) -> int:
    """Return the number of notifications that changed state."""

    return NotificationRepository(session).mark_all_as_read(user_id)
