"""Endpoints for listing and managing the notifications of the current user."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from board_realtime.application.use_cases.notifications import (
    NotificationService,
    clear_read_notifications,
    count_unread_notifications,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from board_realtime.config import get_settings
from board_realtime.domain.entities import Notification, TokenClaims
from board_realtime.infrastructure.database import get_db
from board_realtime.interfaces.api.dependencies import (
    get_current_claims,
    get_notification_service,
)
from board_realtime.interfaces.api.schemas import (
    ApiResponse,
    BulkDeleteRead,
    BulkUpdateRead,
    NotificationCreateRequest,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.user_id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        content=notification.content,
        action_url=notification.action_url,
        is_read=notification.is_read,
        read_at=notification.read_at,
        created_at=notification.created_at,
    )


@router.get("", response_model=ApiResponse[list[NotificationRead]])
def get_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    claims: TokenClaims = Depends(get_current_claims),
) -> ApiResponse[list[NotificationRead]]:
    """Return the most recent notifications of the authenticated user."""

    notifications = list_notifications(
        db,
        user_id=claims.user_id,
        unread_only=unread_only,
        limit=get_settings().notifications_page_size,
    )
    return ApiResponse(
        success=True, data=[_notification_to_schema(item) for item in notifications]
    )


@router.get("/unread-count", response_model=ApiResponse[UnreadCountRead])
def get_unread_count(
    db: Session = Depends(get_db),
    claims: TokenClaims = Depends(get_current_claims),
) -> ApiResponse[UnreadCountRead]:
    count = count_unread_notifications(db, user_id=claims.user_id)
    return ApiResponse(success=True, data=UnreadCountRead(count=count))


@router.post(
    "",
    response_model=ApiResponse[NotificationRead],
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    payload: NotificationCreateRequest,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(get_current_claims),
    service: NotificationService = Depends(get_notification_service),
) -> ApiResponse[NotificationRead]:
    """Store a notification for ``userId`` and push it to their open sessions."""

    notification = service.notify_user(
        db,
        payload.user_id,
        type=payload.type,
        title=payload.title,
        message=payload.message,
        action_url=payload.action_url,
    )
    return ApiResponse(success=True, data=_notification_to_schema(notification))


@router.patch("/{notification_id}/read", response_model=ApiResponse[NotificationRead])
def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    claims: TokenClaims = Depends(get_current_claims),
) -> ApiResponse[NotificationRead]:
    notification = mark_notification_read(db, notification_id, user_id=claims.user_id)
    return ApiResponse(success=True, data=_notification_to_schema(notification))


@router.post("/mark-all-read", response_model=ApiResponse[BulkUpdateRead])
def read_all_notifications(
    db: Session = Depends(get_db),
    claims: TokenClaims = Depends(get_current_claims),
) -> ApiResponse[BulkUpdateRead]:
    updated = mark_all_notifications_read(db, user_id=claims.user_id)
    return ApiResponse(success=True, data=BulkUpdateRead(updated=updated))


# Declared before ``/{notification_id}`` so the literal path wins.
@router.delete("/clear-read", response_model=ApiResponse[BulkDeleteRead])
def clear_read(
    db: Session = Depends(get_db),
    claims: TokenClaims = Depends(get_current_claims),
) -> ApiResponse[BulkDeleteRead]:
    """Remove the read notifications of the authenticated user."""

    deleted = clear_read_notifications(db, user_id=claims.user_id)
    return ApiResponse(success=True, data=BulkDeleteRead(deleted=deleted))


@router.delete("/{notification_id}", response_model=ApiResponse[Any])
def remove_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    claims: TokenClaims = Depends(get_current_claims),
) -> ApiResponse[Any]:
    delete_notification(db, notification_id, user_id=claims.user_id)
    return ApiResponse(success=True)
