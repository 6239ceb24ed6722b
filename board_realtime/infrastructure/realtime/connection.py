"""Session handle wrapping one accepted websocket."""

from __future__ import annotations

import asyncio
from typing import Any
from uuid import uuid4

from fastapi import WebSocket

from board_realtime.domain.entities import TokenClaims


class RealtimeConnection:
    """One open tab or device of an authenticated user."""

    def __init__(self, websocket: WebSocket, claims: TokenClaims) -> None:
        self.id = uuid4().hex
        self.claims = claims
        self._websocket = websocket
        # asyncio.Lock wakes waiters in FIFO order, which keeps sends ordered.
        self._send_lock = asyncio.Lock()

    @property
    def user_id(self) -> str:
        return self.claims.user_id

    async def send(self, event: str, data: Any = None) -> None:
        """Send ``{"type": event, "data": data}`` down this connection."""

        message: dict[str, Any] = {"type": event}
        if data is not None:
            message["data"] = data
        async with self._send_lock:
            await self._websocket.send_json(message)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        await self._websocket.close(code=code, reason=reason)

    def __repr__(self) -> str:
        return f"RealtimeConnection(id={self.id!r}, user_id={self.user_id!r})"


__all__ = ["RealtimeConnection"]
