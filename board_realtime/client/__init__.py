"""Python client for the realtime board: HTTP API, live session and transport."""

from .api import ApiRequestError, NotificationApiClient
from .events import LocalEventBus
from .session import (
    NotificationItem,
    NotificationState,
    RealtimeSession,
    RequestFailure,
    SessionState,
)
from .transport import WebsocketConnector, WebsocketTransport, open_session, websocket_url

__all__ = [
    "ApiRequestError",
    "NotificationApiClient",
    "LocalEventBus",
    "NotificationItem",
    "NotificationState",
    "RealtimeSession",
    "RequestFailure",
    "SessionState",
    "WebsocketConnector",
    "WebsocketTransport",
    "open_session",
    "websocket_url",
]
