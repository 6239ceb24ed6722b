"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import expression

from board_realtime.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_read", "user_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=True)
    message = Column(Text, nullable=True)
    content = Column(Text, nullable=False, default="")
    action_url = Column(String(500), nullable=True)
    is_read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    read_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False)


__all__ = ["NotificationModel"]
