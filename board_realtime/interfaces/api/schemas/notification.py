"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationCreateRequest(_CamelModel):
    """Payload used by services and administrators to notify a user."""

    user_id: str = Field(..., min_length=1, max_length=64)
    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    action_url: str | None = Field(default=None, max_length=500)


class NotificationRead(_CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: str
    type: str
    title: str | None = None
    message: str | None = None
    content: str = ""
    action_url: str | None = None
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime


class UnreadCountRead(BaseModel):
    count: int


class BulkUpdateRead(BaseModel):
    updated: int


class BulkDeleteRead(BaseModel):
    deleted: int


__all__ = [
    "NotificationCreateRequest",
    "NotificationRead",
    "UnreadCountRead",
    "BulkUpdateRead",
    "BulkDeleteRead",
]
