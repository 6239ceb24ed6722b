"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from board_realtime.domain.entities import Notification
from board_realtime.infrastructure.models import NotificationModel
from board_realtime.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .scalar()
            or 0
        )

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            content=Notification.derive_content(notification.title, notification.message),
            action_url=notification.action_url,
            is_read=False,
            read_at=None,
            created_at=ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int) -> Notification:
        """Flag a notification as read; calling it again changes nothing."""

        model = self._get_model_or_raise(notification_id)
        if not model.is_read:
            model.is_read = True
            model.read_at = ensure_app_naive_datetime(now_in_app_timezone())
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self, user_id: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    ),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def delete(self, notification_id: int) -> None:
        model = self._get_model_or_raise(notification_id)
        self.session.delete(model)
        self.session.commit()

    def delete_read_for_user(self, user_id: str) -> int:
        """Remove the read notifications of ``user_id``; unread rows stay."""

        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(True))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _get_model_or_raise(self, notification_id: int) -> NotificationModel:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        return model

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            message=model.message,
            content=model.content or "",
            action_url=model.action_url,
            is_read=bool(model.is_read),
            read_at=ensure_app_timezone(model.read_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
