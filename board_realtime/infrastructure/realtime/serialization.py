"""Wire representation of notifications and realtime payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from board_realtime.domain.entities import Notification


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON payload shared by the HTTP API and the websocket."""

    return {
        "id": notification.id,
        "userId": notification.user_id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "content": notification.content,
        "actionUrl": notification.action_url,
        "isRead": notification.is_read,
        "readAt": _isoformat(notification.read_at),
        "createdAt": _isoformat(notification.created_at),
    }


def normalize_payload(data: Any) -> Any:
    """Return a copy of ``data`` with nested ``datetime`` values as ISO strings."""

    if isinstance(data, datetime):
        return data.isoformat()
    if isinstance(data, dict):
        return {key: normalize_payload(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [normalize_payload(item) for item in data]
    return data


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


__all__ = ["serialize_notification", "normalize_payload"]
