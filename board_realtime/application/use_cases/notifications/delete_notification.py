"""Use case for deleting a notification."""

from sqlalchemy.orm import Session

from board_realtime.infrastructure.repositories import NotificationRepository

from .get_owned_notification import get_owned_notification


def delete_notification(session: Session, notification_id: int, *, user_id: str) -> None:
    """Delete the notification if ``user_id`` owns it."""

    get_owned_notification(session, notification_id, user_id=user_id)
    NotificationRepository(session).delete(notification_id)
