"""Utility helpers to generate and dispatch board notifications.

Task and project CRUD handlers call these after committing a mutation. Tasks
and projects are owned by another part of the system, so they arrive here as
plain mappings.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from board_realtime.domain.entities import Notification
from board_realtime.domain.realtime_events import (
    EVENT_PROJECT_UPDATED,
    EVENT_TASK_UPDATED,
    ProjectMutation,
    TaskMutation,
)

from .service import NotificationService

TASK_ASSIGNED = "task_assigned"
COMMENT_ADDED = "comment_added"


def _task_url(task: Mapping[str, Any]) -> str | None:
    project_id = task.get("projectId")
    task_id = task.get("id")
    if not project_id or not task_id:
        return None
    return f"/projects/{project_id}/board?task={task_id}"


def notify_task_assigned(
    service: NotificationService,
    session: Session,
    *,
    task: Mapping[str, Any],
    assignee_id: str | None,
    assigned_by: str | None = None,
) -> Notification | None:
    """Tell ``assignee_id`` that ``task`` is now theirs.

    Self-assignments and unassigned tasks produce no notification.
    """

    if not assignee_id or assignee_id == assigned_by:
        return None

    task_title = task.get("title") or "a task"
    return service.notify_user(
        session,
        assignee_id,
        type=TASK_ASSIGNED,
        title="Task assigned",
        message=f"You were assigned to '{task_title}'.",
        action_url=_task_url(task),
    )


def notify_comment_added(
    service: NotificationService,
    session: Session,
    *,
    task: Mapping[str, Any],
    recipient_ids: set[str],
    author_id: str,
    author_name: str | None = None,
) -> list[Notification]:
    """Notify everyone following ``task`` except the comment author."""

    task_title = task.get("title") or "a task"
    author = author_name or "Someone"
    notifications: list[Notification] = []
    for recipient_id in sorted(recipient_ids - {author_id}):
        if not recipient_id:
            continue
        notifications.append(
            service.notify_user(
                session,
                recipient_id,
                type=COMMENT_ADDED,
                title="New comment",
                message=f"{author} commented on '{task_title}'.",
                action_url=_task_url(task),
            )
        )
    return notifications


def broadcast_task_update(service: NotificationService, task: Mapping[str, Any]) -> None:
    """Let every open board reconcile ``task``."""

    payload = TaskMutation.model_validate(dict(task))
    service.schedule_broadcast(
        EVENT_TASK_UPDATED, payload.model_dump(by_alias=True, exclude_none=True)
    )


def broadcast_project_update(
    service: NotificationService, project: Mapping[str, Any]
) -> None:
    """Let every open view reconcile ``project``."""

    payload = ProjectMutation.model_validate(dict(project))
    service.schedule_broadcast(
        EVENT_PROJECT_UPDATED, payload.model_dump(by_alias=True, exclude_none=True)
    )


__all__ = [
    "TASK_ASSIGNED",
    "COMMENT_ADDED",
    "notify_task_assigned",
    "notify_comment_added",
    "broadcast_task_update",
    "broadcast_project_update",
]
