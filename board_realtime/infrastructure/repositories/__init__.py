"""Repository implementations backed by SQLAlchemy."""

from .notification_repository import NotificationRepository

__all__ = ["NotificationRepository"]
