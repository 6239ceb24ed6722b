"""Integration tests for the realtime websocket gateway."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from board_realtime.application.use_cases.notifications import NotificationService
from board_realtime.infrastructure.realtime import ConnectionRegistry

WS_PATH = "/api/realtime/ws"


def _open(client: TestClient, token: str):
    """Connect and complete the handshake; returns the session and its ``connected`` data."""

    websocket = client.websocket_connect(WS_PATH).__enter__()
    websocket.send_json({"type": "auth", "token": token})
    greeting = websocket.receive_json()
    assert greeting["type"] == "connected"
    return websocket, greeting["data"]


@pytest.mark.parametrize(
    "frame",
    [
        {"type": "auth"},
        {"type": "auth", "token": ""},
        {"type": "auth", "token": "forged"},
        {"type": "ping"},
    ],
)
def test_connection_without_valid_token_is_closed(app, client: TestClient, frame) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        websocket.send_json(frame)
        with pytest.raises(WebSocketDisconnect) as excinfo:
            websocket.receive_json()

    assert excinfo.value.code == 1008
    assert app.state.connection_registry.session_count() == 0


def test_non_json_handshake_is_closed(client: TestClient) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        websocket.send_text("hello")
        with pytest.raises(WebSocketDisconnect) as excinfo:
            websocket.receive_json()

    assert excinfo.value.code == 1008


def test_connected_session_is_registered_until_disconnect(
    app, client: TestClient, make_token
) -> None:
    registry = app.state.connection_registry

    with client.websocket_connect(WS_PATH) as websocket:
        websocket.send_json({"type": "auth", "token": make_token("u1")})
        greeting = websocket.receive_json()
        assert greeting["data"]["userId"] == "u1"
        assert greeting["data"]["sessionId"]
        assert registry.is_online("u1")
        assert client.get("/health").json()["data"]["sessions"] == 1

    assert not registry.is_online("u1")


def test_ping_gets_pong(client: TestClient, make_token) -> None:
    websocket, _ = _open(client, make_token("u1"))
    try:
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}
    finally:
        websocket.__exit__(None, None, None)


def test_task_update_is_broadcast_to_all_sessions(client: TestClient, make_token) -> None:
    sender, _ = _open(client, make_token("u1"))
    viewer, _ = _open(client, make_token("u2"))
    try:
        sender.send_json(
            {"type": "task:update", "data": {"id": "t1", "projectId": "p1", "status": "done", "points": 3}}
        )
        expected = {
            "type": "task:updated",
            "data": {"id": "t1", "projectId": "p1", "status": "done", "points": 3},
        }
        assert viewer.receive_json() == expected
        assert sender.receive_json() == expected

        sender.send_json({"type": "project:update", "data": {"id": 4, "name": "Roadmap"}})
        assert viewer.receive_json() == {
            "type": "project:updated",
            "data": {"id": 4, "name": "Roadmap"},
        }
    finally:
        sender.__exit__(None, None, None)
        viewer.__exit__(None, None, None)


@pytest.mark.parametrize(
    ("frame", "code"),
    [
        ({"type": "task:update", "data": {"title": "missing id"}}, "VALIDATION_ERROR"),
        ({"type": "task:update"}, "VALIDATION_ERROR"),
        ({"type": "project:update", "data": {"id": ""}}, "VALIDATION_ERROR"),
        ({"type": "comment:update", "data": {"id": 1}}, "UNKNOWN_EVENT"),
        (["not", "an", "object"], "UNKNOWN_EVENT"),
    ],
)
def test_invalid_client_events_get_error_frames(client: TestClient, make_token, frame, code) -> None:
    sender, _ = _open(client, make_token("u1"))
    try:
        sender.send_json(frame)
        reply = sender.receive_json()
        assert reply["type"] == "error"
        assert reply["data"]["code"] == code

        # The connection survives a bad frame.
        sender.send_json({"type": "ping"})
        assert sender.receive_json() == {"type": "pong"}
    finally:
        sender.__exit__(None, None, None)


def test_non_json_frame_after_handshake(client: TestClient, make_token) -> None:
    sender, _ = _open(client, make_token("u1"))
    try:
        sender.send_text("{broken")
        reply = sender.receive_json()
        assert reply["type"] == "error"
        assert reply["data"]["code"] == "INVALID_JSON"
    finally:
        sender.__exit__(None, None, None)


def test_created_notification_reaches_every_tab_of_its_owner(
    client: TestClient, make_token, auth_headers
) -> None:
    tab_a, _ = _open(client, make_token("u1"))
    tab_b, _ = _open(client, make_token("u1"))
    other, _ = _open(client, make_token("u2"))
    try:
        response = client.post(
            "/api/notifications",
            json={"userId": "u1", "type": "task_assigned", "title": "T", "message": "M"},
            headers=auth_headers("admin"),
        )
        created = response.json()["data"]

        for tab in (tab_a, tab_b):
            pushed = tab.receive_json()
            assert pushed["type"] == "notification:new"
            assert pushed["data"]["id"] == created["id"]
            assert pushed["data"]["isRead"] is False

        other.send_json({"type": "ping"})
        assert other.receive_json() == {"type": "pong"}
    finally:
        for websocket in (tab_a, tab_b, other):
            websocket.__exit__(None, None, None)


def test_session_limit_closes_extra_connection(app, make_token) -> None:
    registry = ConnectionRegistry(max_sessions_per_user=1)
    app.state.connection_registry = registry
    app.state.notification_service = NotificationService(registry)

    with TestClient(app) as client:
        first, _ = _open(client, make_token("u1"))
        try:
            with client.websocket_connect(WS_PATH) as second:
                second.send_json({"type": "auth", "token": make_token("u1")})
                with pytest.raises(WebSocketDisconnect) as excinfo:
                    second.receive_json()
            assert excinfo.value.code == 1013
            assert registry.session_count() == 1
        finally:
            first.__exit__(None, None, None)
