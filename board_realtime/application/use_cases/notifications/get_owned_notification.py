"""Use case for loading a notification on behalf of its owner."""

from sqlalchemy.orm import Session

from board_realtime.domain.entities import Notification
from board_realtime.domain.errors import AuthorizationError, NotFoundError
from board_realtime.infrastructure.repositories import NotificationRepository


def get_owned_notification(
    session: Session, notification_id: int, *, user_id: str
) -> Notification:
    """Return the notification or raise when it is missing or owned by someone else."""

    notification = NotificationRepository(session).get(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise AuthorizationError("You can only manage your own notifications")
    return notification
