"""Aggregate application use cases."""

from .notifications import (
    NotificationService,
    broadcast_project_update,
    broadcast_task_update,
    notify_comment_added,
    notify_task_assigned,
)

__all__ = [
    "NotificationService",
    "broadcast_project_update",
    "broadcast_task_update",
    "notify_comment_added",
    "notify_task_assigned",
]
