"""In-memory registry of live realtime sessions grouped by user."""

from __future__ import annotations

import logging
import threading
from typing import Generic, Hashable, TypeVar

from board_realtime.domain.errors import SessionLimitExceeded

logger = logging.getLogger(__name__)

H = TypeVar("H", bound=Hashable)


class ConnectionRegistry(Generic[H]):
    """Track which session handles are open for every user.

    A user id is present in the map only while it has at least one session,
    so presence checks reduce to key membership. The per-user set doubles as
    the user's delivery group: pushing to a user reads exactly this set.

    All operations take a single lock; sync route handlers read the registry
    from worker threads while the event loop registers and unregisters.
    """

    def __init__(self, *, max_sessions_per_user: int | None = None) -> None:
        self._sessions: dict[str, set[H]] = {}
        self._lock = threading.Lock()
        self._max_sessions_per_user = max_sessions_per_user

    def register(self, user_id: str, handle: H) -> None:
        """Add ``handle`` to the sessions of ``user_id``; idempotent."""

        with self._lock:
            sessions = self._sessions.get(user_id, set())
            if handle in sessions:
                return
            if (
                self._max_sessions_per_user is not None
                and len(sessions) >= self._max_sessions_per_user
            ):
                raise SessionLimitExceeded(
                    f"User {user_id} already has {len(sessions)} open sessions"
                )
            self._sessions.setdefault(user_id, set()).add(handle)
        logger.debug("Registered session for user %s", user_id)

    def unregister(self, user_id: str, handle: H) -> None:
        """Remove ``handle``; unknown users or handles are ignored."""

        with self._lock:
            sessions = self._sessions.get(user_id)
            if sessions is None:
                return
            sessions.discard(handle)
            if not sessions:
                del self._sessions[user_id]
        logger.debug("Unregistered session for user %s", user_id)

    def sessions_for(self, user_id: str) -> frozenset[H]:
        with self._lock:
            return frozenset(self._sessions.get(user_id, ()))

    def all_sessions(self) -> list[H]:
        """Return a snapshot of every registered handle."""

        with self._lock:
            return [handle for sessions in self._sessions.values() for handle in sessions]

    def is_online(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._sessions

    def connected_user_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def session_count(self) -> int:
        with self._lock:
            return sum(len(sessions) for sessions in self._sessions.values())


__all__ = ["ConnectionRegistry"]
