"""Use cases for storing, managing and emitting notifications."""

from .clear_read_notifications import clear_read_notifications
from .count_unread_notifications import count_unread_notifications
from .delete_notification import delete_notification
from .events import (
    COMMENT_ADDED,
    TASK_ASSIGNED,
    broadcast_project_update,
    broadcast_task_update,
    notify_comment_added,
    notify_task_assigned,
)
from .get_owned_notification import get_owned_notification
from .list_notifications import list_notifications
from .mark_all_notifications_read import mark_all_notifications_read
from .mark_notification_read import mark_notification_read
from .service import NotificationService

__all__ = [
    "NotificationService",
    "clear_read_notifications",
    "count_unread_notifications",
    "delete_notification",
    "get_owned_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "COMMENT_ADDED",
    "TASK_ASSIGNED",
    "broadcast_project_update",
    "broadcast_task_update",
    "notify_comment_added",
    "notify_task_assigned",
]
