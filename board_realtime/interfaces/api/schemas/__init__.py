from .envelope import ApiError, ApiResponse
from .health import HealthRead
from .notification import (
    BulkDeleteRead,
    BulkUpdateRead,
    NotificationCreateRequest,
    NotificationRead,
    UnreadCountRead,
)

__all__ = [
    "ApiError",
    "ApiResponse",
    "HealthRead",
    "BulkDeleteRead",
    "BulkUpdateRead",
    "NotificationCreateRequest",
    "NotificationRead",
    "UnreadCountRead",
]
