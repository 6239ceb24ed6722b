"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: str
    type: str
    title: str | None
    message: str | None
    content: str = ""
    action_url: str | None = None
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime | None = None

    @staticmethod
    def derive_content(title: str | None, message: str | None) -> str:
        """Return the unified display text: message, then title, then ``""``."""

        return message or title or ""


__all__ = ["Notification"]
