"""Websocket transport for :class:`~board_realtime.client.session.RealtimeSession`.

Each transport runs its own asyncio loop on a daemon thread and reconnects
with backoff until it is closed or the server rejects the credentials.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import logging
import threading
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import httpx
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed

from board_realtime.domain.realtime_events import CLIENT_EVENT_AUTH

from .api import NotificationApiClient
from .events import LocalEventBus
from .session import RealtimeSession, TransportListener

logger = logging.getLogger(__name__)

# Close codes after which reconnecting with the same token is pointless.
_TERMINAL_CLOSE_CODES = {1008}

WEBSOCKET_PATH = "/api/realtime/ws"


def websocket_url(base_url: str) -> str:
    """Return the realtime endpoint for an ``http(s)://`` server URL."""

    parts = urlsplit(base_url)
    scheme = {"http": "ws", "https": "wss"}.get(parts.scheme, parts.scheme)
    path = parts.path.rstrip("/") + WEBSOCKET_PATH
    return urlunsplit((scheme, parts.netloc, path, "", ""))


class WebsocketTransport:
    """One live connection attempt loop bound to a single token."""

    def __init__(
        self, url: str, token: str, listener: TransportListener, *, open_timeout: float
    ) -> None:
        self._url = url
        self._token = token
        self._listener = listener
        self._open_timeout = open_timeout
        self._loop = asyncio.new_event_loop()
        self._websocket: ClientConnection | None = None
        self._task: asyncio.Task | None = None
        self._closing = False
        self._thread = threading.Thread(
            target=self._run, name="board-realtime-transport", daemon=True
        )

    def start(self) -> "WebsocketTransport":
        self._thread.start()
        return self

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._task = self._loop.create_task(self._connect_forever())
        try:
            self._loop.run_until_complete(self._task)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Realtime transport stopped")
            self._listener.transport_closed()
        finally:
            self._loop.close()

    async def _connect_forever(self) -> None:
        self._listener.transport_connecting()
        async for websocket in connect(self._url, open_timeout=self._open_timeout):
            if self._closing:
                await websocket.close()
                return
            self._websocket = websocket
            try:
                await websocket.send(json.dumps({"type": CLIENT_EVENT_AUTH, "token": self._token}))
                async for raw in websocket:
                    await self._deliver(raw)
            except ConnectionClosed:
                pass
            finally:
                self._websocket = None

            self._listener.transport_closed()
            code = websocket.close_code
            if self._closing or code in _TERMINAL_CLOSE_CODES:
                if code in _TERMINAL_CLOSE_CODES:
                    logger.warning("Realtime server rejected the session (code %s)", code)
                return
            logger.info("Realtime connection dropped (code %s); reconnecting", code)
            self._listener.transport_connecting()

    async def _deliver(self, raw: str | bytes) -> None:
        # Listeners may block on HTTP calls; frames keep their arrival order.
        await self._loop.run_in_executor(None, self._dispatch, raw)

    def _dispatch(self, raw: str | bytes) -> None:
        try:
            message = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring non-JSON realtime frame")
            return
        self._listener.transport_message(message)

    def send(self, event: str, data: Any) -> None:
        frame = json.dumps({"type": event, "data": data})

        async def _send() -> None:
            websocket = self._websocket
            if websocket is None:
                logger.debug("Dropped %s: transport is reconnecting", event)
                return
            try:
                await websocket.send(frame)
            except ConnectionClosed:
                logger.debug("Dropped %s: connection closed", event)

        if not self._loop.is_closed():
            asyncio.run_coroutine_threadsafe(_send(), self._loop)

    def close(self) -> None:
        self._closing = True

        async def _shutdown() -> None:
            websocket = self._websocket
            if websocket is not None:
                await websocket.close()
            if self._task is not None:
                self._task.cancel()

        if self._loop.is_closed() or not self._loop.is_running():
            return
        future = asyncio.run_coroutine_threadsafe(_shutdown(), self._loop)
        if threading.current_thread() is not self._thread:
            try:
                future.result(timeout=self._open_timeout)
            except (concurrent.futures.CancelledError, concurrent.futures.TimeoutError) as exc:
                logger.debug("Transport shutdown did not finish cleanly: %r", exc)


class WebsocketConnector:
    """Open :class:`WebsocketTransport` instances against ``url``."""

    def __init__(self, url: str, *, open_timeout: float = 10.0) -> None:
        self.url = url
        self.open_timeout = open_timeout

    def open(self, token: str, listener: TransportListener) -> WebsocketTransport:
        return WebsocketTransport(
            self.url, token, listener, open_timeout=self.open_timeout
        ).start()


def open_session(
    base_url: str,
    *,
    http: httpx.Client | None = None,
    events: LocalEventBus | None = None,
    open_timeout: float = 10.0,
) -> RealtimeSession:
    """Build a :class:`RealtimeSession` talking to the server at ``base_url``.

    The session stays disconnected until
    :meth:`~RealtimeSession.set_credentials` is called.
    """

    http = http or httpx.Client(base_url=base_url)
    return RealtimeSession(
        WebsocketConnector(websocket_url(base_url), open_timeout=open_timeout),
        lambda token: NotificationApiClient(http, token),
        events=events,
    )


__all__ = ["WebsocketConnector", "WebsocketTransport", "open_session", "websocket_url"]
