"""Client-side realtime session: live connection plus local notification state.

One :class:`RealtimeSession` stands for one browser tab or client process. It
owns at most one transport at a time, keeps the newest-first notification
list with its unread counter, and repairs that list from the HTTP API every
time the server confirms a (re)connection, because anything pushed while the
transport was down is never replayed.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from board_realtime.domain.realtime_events import (
    CLIENT_EVENT_PROJECT_UPDATE,
    CLIENT_EVENT_TASK_UPDATE,
    EVENT_CONNECTED,
    EVENT_ERROR,
    EVENT_NOTIFICATION_NEW,
    EVENT_PROJECT_UPDATED,
    EVENT_TASK_UPDATED,
)

from .api import ApiRequestError, NotificationApiClient
from .events import LocalEventBus

logger = logging.getLogger(__name__)

# Local event names emitted on the session bus.
LOCAL_CONNECTED = "connected"
LOCAL_DISCONNECTED = "disconnected"
LOCAL_NOTIFICATION = "notification:new"
LOCAL_NOTIFICATIONS_CHANGED = "notifications:changed"
LOCAL_REQUEST_FAILED = "request:failed"
LOCAL_SERVER_ERROR = "server:error"


class SessionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class NotificationItem:
    """Notification as held by the client."""

    id: int
    user_id: str
    type: str
    title: str | None = None
    message: str | None = None
    content: str = ""
    action_url: str | None = None
    is_read: bool = False
    created_at: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "NotificationItem":
        return cls(
            id=payload["id"],
            user_id=payload["userId"],
            type=payload.get("type") or "",
            title=payload.get("title"),
            message=payload.get("message"),
            content=payload.get("content") or "",
            action_url=payload.get("actionUrl"),
            is_read=bool(payload.get("isRead")),
            created_at=payload.get("createdAt"),
        )


@dataclass(frozen=True)
class NotificationState:
    """Snapshot of the local list; the counter is derived from the list itself."""

    notifications: tuple[NotificationItem, ...] = ()

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self.notifications if not item.is_read)


@dataclass(frozen=True)
class RequestFailure:
    """Last optimistic request that the server did not confirm."""

    operation: str
    error: ApiRequestError


class TransportHandle(Protocol):
    def send(self, event: str, data: Any) -> None: ...

    def close(self) -> None: ...


class TransportListener(Protocol):
    def transport_connecting(self) -> None: ...

    def transport_message(self, message: Any) -> None: ...

    def transport_closed(self) -> None: ...


class Connector(Protocol):
    def open(self, token: str, listener: TransportListener) -> TransportHandle: ...


ApiFactory = Callable[[str], NotificationApiClient]


class _BoundListener:
    """Routes transport callbacks to the session, tagged with a generation.

    Callbacks from a transport that was already torn down carry an old
    generation and are ignored.
    """

    def __init__(self, session: "RealtimeSession", generation: int) -> None:
        self._session = session
        self._generation = generation

    def transport_connecting(self) -> None:
        self._session._on_connecting(self._generation)

    def transport_message(self, message: Any) -> None:
        self._session._on_message(self._generation, message)

    def transport_closed(self) -> None:
        self._session._on_closed(self._generation)


class RealtimeSession:
    """Live notification channel for one authenticated client."""

    def __init__(
        self,
        connector: Connector,
        api_factory: ApiFactory,
        *,
        events: LocalEventBus | None = None,
    ) -> None:
        self._connector = connector
        self._api_factory = api_factory
        self.events = events or LocalEventBus()

        self._lock = threading.RLock()
        self._state = SessionState.DISCONNECTED
        self._snapshot = NotificationState()
        self._token: str | None = None
        self._user_id: str | None = None
        self._transport: TransportHandle | None = None
        self._generation = 0
        self._last_error: RequestFailure | None = None

    # -- read side -------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def snapshot(self) -> NotificationState:
        return self._snapshot

    @property
    def notifications(self) -> tuple[NotificationItem, ...]:
        return self._snapshot.notifications

    @property
    def unread_count(self) -> int:
        return self._snapshot.unread_count

    @property
    def last_error(self) -> RequestFailure | None:
        return self._last_error

    def dismiss_error(self) -> None:
        self._last_error = None

    # -- connection lifecycle -------------------------------------------

    def set_credentials(self, token: str | None, user_id: str | None) -> None:
        """Apply a login, logout or token refresh.

        Any change closes the current transport first. A new transport is
        opened only when both the token and the user id are present.
        """

        with self._lock:
            if (token, user_id) == (self._token, self._user_id):
                return
            previous, was_active = self._detach_locked()
            self._token, self._user_id = token, user_id
            connect = bool(token and user_id)
            if connect:
                self._state = SessionState.CONNECTING
            generation = self._generation

        if previous is not None:
            previous.close()
        if was_active:
            self.events.emit(LOCAL_DISCONNECTED, None)
        if not connect:
            return

        handle = self._connector.open(token, _BoundListener(self, generation))
        with self._lock:
            if generation == self._generation:
                self._transport = handle
                return
        # Credentials changed while the transport was opening.
        handle.close()

    def disconnect(self) -> None:
        """Drop credentials and the transport; local notifications are kept."""

        self.set_credentials(None, None)

    def _detach_locked(self) -> tuple[TransportHandle | None, bool]:
        self._generation += 1
        transport, self._transport = self._transport, None
        was_active = self._state is not SessionState.DISCONNECTED
        self._state = SessionState.DISCONNECTED
        return transport, was_active

    def _on_connecting(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._state = SessionState.CONNECTING

    def _on_closed(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._state = SessionState.DISCONNECTED
        logger.info("Realtime connection lost")
        self.events.emit(LOCAL_DISCONNECTED, None)

    def _on_message(self, generation: int, message: Any) -> None:
        if generation != self._generation or not isinstance(message, dict):
            return

        event = message.get("type")
        data = message.get("data")
        if event == EVENT_CONNECTED:
            with self._lock:
                if generation != self._generation:
                    return
                self._state = SessionState.CONNECTED
            logger.info("Realtime connection established")
            self.events.emit(LOCAL_CONNECTED, data)
            self.reconcile(generation=generation)
        elif event == EVENT_NOTIFICATION_NEW and isinstance(data, dict):
            self._receive_notification(generation, NotificationItem.from_payload(data))
        elif event in (EVENT_TASK_UPDATED, EVENT_PROJECT_UPDATED):
            self.events.emit(event, data)
        elif event == EVENT_ERROR:
            logger.warning("Realtime server reported an error: %s", data)
            self.events.emit(LOCAL_SERVER_ERROR, data)

    # -- notification state ---------------------------------------------

    def _replace(
        self,
        update: Callable[[tuple[NotificationItem, ...]], tuple[NotificationItem, ...] | None],
        *,
        generation: int | None = None,
    ) -> NotificationState | None:
        """Apply ``update`` to the list; ``None`` from it means no change.

        With ``generation`` set, nothing is applied once the session has moved
        on to other credentials.
        """

        with self._lock:
            if generation is not None and generation != self._generation:
                return None
            notifications = update(self._snapshot.notifications)
            if notifications is None:
                return None
            self._snapshot = NotificationState(notifications)
            snapshot = self._snapshot
        self.events.emit(LOCAL_NOTIFICATIONS_CHANGED, snapshot)
        return snapshot

    def _receive_notification(self, generation: int, item: NotificationItem) -> None:
        def prepend(items: tuple[NotificationItem, ...]) -> tuple[NotificationItem, ...] | None:
            # Already fetched by the reconciliation that raced with the push.
            if any(existing.id == item.id for existing in items):
                return None
            return (item, *items)

        if self._replace(prepend, generation=generation) is not None:
            self.events.emit(LOCAL_NOTIFICATION, item)

    def reconcile(self, *, generation: int | None = None) -> bool:
        """Replace the local list with the server's; returns ``False`` on failure.

        The fetched list is dropped if the credentials changed while the
        request was in flight.
        """

        with self._lock:
            if generation is None:
                generation = self._generation
            elif generation != self._generation:
                return False
            token = self._token
        if not token:
            return False
        try:
            payloads = self._api_factory(token).list()
        except ApiRequestError as exc:
            if generation == self._generation:
                self._record_failure("reconcile", exc)
            return False
        items = tuple(NotificationItem.from_payload(payload) for payload in payloads)
        if self._replace(lambda _: items, generation=generation) is None:
            logger.debug("Discarded notification list fetched for previous credentials")
            return False
        return True

    def mark_as_read(self, notification_id: int) -> bool:
        self._replace(
            lambda items: tuple(
                dataclasses.replace(item, is_read=True) if item.id == notification_id else item
                for item in items
            )
        )
        return self._request("mark_as_read", lambda api: api.mark_as_read(notification_id))

    def mark_all_as_read(self) -> bool:
        self._replace(
            lambda items: tuple(dataclasses.replace(item, is_read=True) for item in items)
        )
        return self._request("mark_all_as_read", lambda api: api.mark_all_as_read())

    def delete(self, notification_id: int) -> bool:
        self._replace(lambda items: tuple(item for item in items if item.id != notification_id))
        return self._request("delete", lambda api: api.delete(notification_id))

    def clear_read(self) -> bool:
        self._replace(lambda items: tuple(item for item in items if not item.is_read))
        return self._request("clear_read", lambda api: api.clear_read())

    def _request(self, operation: str, call: Callable[[NotificationApiClient], Any]) -> bool:
        """Confirm an optimistic change with the server.

        Local state is not rolled back on failure; the failure is exposed via
        :attr:`last_error` and the ``request:failed`` event, and the next
        reconciliation restores the server's view.
        """

        api = self._api()
        if api is None:
            self._record_failure(
                operation, ApiRequestError("Not authenticated", status_code=401, code="UNAUTHORIZED")
            )
            return False
        try:
            call(api)
        except ApiRequestError as exc:
            self._record_failure(operation, exc)
            return False
        return True

    def _record_failure(self, operation: str, error: ApiRequestError) -> None:
        logger.warning("Notification %s failed: %s", operation, error.message)
        failure = RequestFailure(operation=operation, error=error)
        self._last_error = failure
        self.events.emit(LOCAL_REQUEST_FAILED, failure)

    def _api(self) -> NotificationApiClient | None:
        token = self._token
        return self._api_factory(token) if token else None

    # -- outbound events -------------------------------------------------

    def emit_task_update(self, task: dict[str, Any]) -> bool:
        """Announce a local task mutation to every other open board."""

        return self._send(CLIENT_EVENT_TASK_UPDATE, task)

    def emit_project_update(self, project: dict[str, Any]) -> bool:
        return self._send(CLIENT_EVENT_PROJECT_UPDATE, project)

    def _send(self, event: str, data: Any) -> bool:
        with self._lock:
            transport = self._transport
            connected = self._state is SessionState.CONNECTED
        if transport is None or not connected:
            logger.debug("Dropped %s while disconnected", event)
            return False
        transport.send(event, data)
        return True


__all__ = [
    "SessionState",
    "NotificationItem",
    "NotificationState",
    "RequestFailure",
    "RealtimeSession",
    "Connector",
    "TransportHandle",
    "TransportListener",
    "LOCAL_CONNECTED",
    "LOCAL_DISCONNECTED",
    "LOCAL_NOTIFICATION",
    "LOCAL_NOTIFICATIONS_CHANGED",
    "LOCAL_REQUEST_FAILED",
    "LOCAL_SERVER_ERROR",
]
