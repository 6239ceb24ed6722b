"""Websocket gateway streaming notifications and board updates."""

from __future__ import annotations

import json
import logging
from typing import Any

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError as PayloadValidationError

from board_realtime.application.use_cases.notifications import NotificationService
from board_realtime.config import get_settings
from board_realtime.domain.entities import TokenClaims
from board_realtime.domain.errors import AuthenticationError, SessionLimitExceeded
from board_realtime.domain.realtime_events import (
    BROADCAST_EVENTS,
    CLIENT_EVENT_PING,
    EVENT_CONNECTED,
    EVENT_ERROR,
    EVENT_PONG,
    AuthFrame,
    PingEvent,
    client_event_adapter,
    mutation_payload,
)
from board_realtime.infrastructure.realtime import ConnectionRegistry, RealtimeConnection
from board_realtime.infrastructure.security import TokenVerifier

router = APIRouter(prefix="/api/realtime", tags=["realtime"])
logger = logging.getLogger(__name__)

_KNOWN_CLIENT_EVENTS = {*BROADCAST_EVENTS, CLIENT_EVENT_PING}


class _MalformedFrame(ValueError):
    """The frame is not a JSON document."""


async def _receive_frame(websocket: WebSocket) -> Any:
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
    raw = message.get("text")
    if raw is None:
        raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise _MalformedFrame("Frame is not valid JSON") from exc


async def _authenticate(
    websocket: WebSocket, verifier: TokenVerifier, timeout: float | None
) -> TokenClaims:
    """Read the handshake frame and verify its token."""

    try:
        with anyio.fail_after(timeout):
            frame = await _receive_frame(websocket)
    except TimeoutError as exc:
        raise AuthenticationError("Authentication timed out") from exc
    except _MalformedFrame as exc:
        raise AuthenticationError("Malformed handshake") from exc

    try:
        handshake = AuthFrame.model_validate(frame)
    except PayloadValidationError as exc:
        raise AuthenticationError("No token provided") from exc
    return verifier.verify(handshake.token)


async def _handle_client_event(
    connection: RealtimeConnection, service: NotificationService, frame: Any
) -> None:
    frame_type = frame.get("type") if isinstance(frame, dict) else None
    if not isinstance(frame_type, str) or frame_type not in _KNOWN_CLIENT_EVENTS:
        await connection.send(
            EVENT_ERROR,
            {"code": "UNKNOWN_EVENT", "message": f"Unsupported event {frame_type!r}"},
        )
        return

    try:
        event = client_event_adapter.validate_python(frame)
    except PayloadValidationError as exc:
        logger.info("Invalid %s payload from user %s", frame_type, connection.user_id)
        await connection.send(
            EVENT_ERROR,
            {
                "code": "VALIDATION_ERROR",
                "message": "; ".join(error["msg"] for error in exc.errors()),
                "event": frame_type,
            },
        )
        return

    if isinstance(event, PingEvent):
        await connection.send(EVENT_PONG)
        return

    await service.broadcast_all(BROADCAST_EVENTS[event.type], mutation_payload(event))


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Authenticate the socket, register it and relay board mutations."""

    state = websocket.app.state
    registry: ConnectionRegistry[RealtimeConnection] = state.connection_registry
    service: NotificationService = state.notification_service
    verifier: TokenVerifier = state.token_verifier

    await websocket.accept()
    try:
        claims = await _authenticate(
            websocket, verifier, get_settings().realtime_auth_timeout_seconds
        )
    except WebSocketDisconnect:
        return
    except AuthenticationError as exc:
        logger.info("Rejected realtime connection: %s", exc.message)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=exc.message)
        return

    connection = RealtimeConnection(websocket, claims)
    try:
        registry.register(claims.user_id, connection)
    except SessionLimitExceeded as exc:
        logger.warning("Rejected realtime connection: %s", exc.message)
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER, reason=exc.message)
        return

    logger.info("User %s connected (session %s)", claims.user_id, connection.id)
    try:
        await connection.send(
            EVENT_CONNECTED, {"userId": claims.user_id, "sessionId": connection.id}
        )
        while True:
            try:
                frame = await _receive_frame(websocket)
            except _MalformedFrame as exc:
                await connection.send(EVENT_ERROR, {"code": "INVALID_JSON", "message": str(exc)})
                continue
            await _handle_client_event(connection, service, frame)
    except WebSocketDisconnect:
        pass
    except (RuntimeError, ConnectionError) as exc:
        logger.warning("Realtime connection %s dropped: %s", connection.id, exc)
    finally:
        registry.unregister(claims.user_id, connection)
        logger.info("User %s disconnected (session %s)", claims.user_id, connection.id)
