"""SQLAlchemy models registered on the declarative base."""

from .notification import NotificationModel

__all__ = ["NotificationModel"]
