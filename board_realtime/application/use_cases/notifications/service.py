"""Persist notifications and fan them out to live sessions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from anyio import from_thread
from sqlalchemy.orm import Session

from board_realtime.domain.entities import Notification
from board_realtime.domain.errors import DeliveryError, ValidationError
from board_realtime.domain.realtime_events import EVENT_NOTIFICATION_NEW
from board_realtime.infrastructure.realtime import (
    ConnectionRegistry,
    RealtimeConnection,
    normalize_payload,
    serialize_notification,
)
from board_realtime.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[Session], NotificationRepository]


class NotificationService:
    """Create notifications and deliver realtime payloads.

    Live delivery is best-effort and at-most-once: sessions that are not
    connected when a payload is sent never see it, and failed sends are not
    retried. Clients recover by fetching the stored notifications when they
    (re)connect, which is why :meth:`notify_user` always persists first.

    The service only reads the registry; registering and unregistering
    sessions belongs to the websocket gateway.
    """

    def __init__(
        self,
        registry: ConnectionRegistry[RealtimeConnection],
        *,
        repository_factory: RepositoryFactory = NotificationRepository,
    ) -> None:
        self._registry = registry
        self._repository_factory = repository_factory
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def registry(self) -> ConnectionRegistry[RealtimeConnection]:
        return self._registry

    async def push_to_user(self, user_id: str, event: str, data: Any) -> int:
        """Send ``event`` to every session of ``user_id``.

        Returns the number of sessions that accepted the payload. A user
        without sessions is not an error.
        """

        sessions = self._registry.sessions_for(user_id)
        if not sessions:
            logger.debug("User %s has no live sessions; %s not delivered", user_id, event)
            return 0
        delivered = await self._deliver(sessions, event, data)
        logger.info("Pushed %s to user %s (%d/%d sessions)", event, user_id, delivered, len(sessions))
        return delivered

    async def broadcast_all(self, event: str, data: Any) -> int:
        """Send ``event`` to every connected session regardless of owner."""

        sessions = self._registry.all_sessions()
        if not sessions:
            return 0
        delivered = await self._deliver(sessions, event, data)
        logger.info("Broadcast %s to %d/%d sessions", event, delivered, len(sessions))
        return delivered

    def notify_user(
        self,
        db: Session,
        user_id: str,
        *,
        type: str,
        title: str | None = None,
        message: str | None = None,
        action_url: str | None = None,
    ) -> Notification:
        """Persist a notification for ``user_id`` and then push it live.

        Errors raised while storing propagate and nothing is pushed. Once the
        row is committed the push is scheduled; delivery problems are only
        logged.
        """

        if not user_id:
            raise ValidationError("userId is required")
        if not type:
            raise ValidationError("type is required")
        if not (title or message):
            raise ValidationError("title or message is required")

        saved = self._repository_factory(db).create(
            Notification(
                id=None,
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                action_url=action_url,
            )
        )
        self._schedule(self.push_to_user, user_id, EVENT_NOTIFICATION_NEW, serialize_notification(saved))
        return saved

    def schedule_push(self, user_id: str, event: str, data: Any) -> None:
        """Sync entry point for :meth:`push_to_user`."""

        self._schedule(self.push_to_user, user_id, event, normalize_payload(data))

    def schedule_broadcast(self, event: str, data: Any) -> None:
        """Sync entry point for :meth:`broadcast_all` used by CRUD handlers."""

        self._schedule(self.broadcast_all, event, normalize_payload(data))

    async def wait_for_deliveries(self) -> None:
        """Wait until every delivery scheduled from the event loop finished."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _deliver(
        self, sessions: Iterable[RealtimeConnection], event: str, data: Any
    ) -> int:
        targets = list(sessions)
        results = await asyncio.gather(
            *(connection.send(event, data) for connection in targets),
            return_exceptions=True,
        )
        delivered = 0
        for connection, result in zip(targets, results):
            if isinstance(result, BaseException):
                error = DeliveryError(
                    f"Failed to deliver {event} to session {connection.id} of user {connection.user_id}"
                )
                logger.warning("%s: %r", error.message, result)
                continue
            delivered += 1
        return delivered

    def _schedule(self, func: Callable[..., Awaitable[int]], *args: Any) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                # Only the task creation runs on the loop; the caller does not
                # wait for the sends.
                from_thread.run_sync(self._start_delivery, func, *args)
            except RuntimeError:
                # Neither on the loop nor in one of its worker threads, so no
                # session can be registered in this context.
                logger.warning("No running event loop; skipped live delivery")
        else:
            self._start_delivery(func, *args)

    def _start_delivery(self, func: Callable[..., Awaitable[int]], *args: Any) -> None:
        task = asyncio.get_running_loop().create_task(func(*args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


__all__ = ["NotificationService"]
