"""Use case for marking a single notification as read."""

from sqlalchemy.orm import Session

from board_realtime.domain.entities import Notification
from board_realtime.infrastructure.repositories import NotificationRepository

from .get_owned_notification import get_owned_notification


def mark_notification_read(
    session: Session, notification_id: int, *, user_id: str
) -> Notification:
    """Mark the notification as read; already read notifications are returned as is."""

    notification = get_owned_notification(session, notification_id, user_id=user_id)
    if notification.is_read:
        return notification
    return NotificationRepository(session).mark_as_read(notification_id)
