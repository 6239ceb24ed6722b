"""Use case for listing the notifications of a user."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from board_realtime.domain.entities import Notification
from board_realtime.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session, *, user_id: str, unread_only: bool = False, limit: int = 50
) -> Sequence[Notification]:
    """Return the newest notifications of ``user_id`` first."""

    return NotificationRepository(session).list_for_user(
        user_id, unread_only=unread_only, limit=limit
    )
