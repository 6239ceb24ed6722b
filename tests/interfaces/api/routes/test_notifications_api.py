"""Integration tests for the notification HTTP endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from board_realtime.domain.entities import TokenClaims
from board_realtime.infrastructure.security import issue_token

BASE = "/api/notifications"


def _create(client: TestClient, headers, user_id: str, title: str = "T", message: str = "M"):
    response = client.post(
        BASE,
        json={"userId": user_id, "type": "task_assigned", "title": title, "message": message},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_notification_lifecycle(client: TestClient, auth_headers) -> None:
    """Create, list, read and delete notifications through the envelope."""

    headers = auth_headers("u1")
    created = _create(client, headers, "u1", title="Assigned", message="You got a task")
    assert created["userId"] == "u1"
    assert created["isRead"] is False
    assert created["content"] == "You got a task"

    listing = client.get(BASE, headers=headers)
    assert listing.status_code == 200
    body = listing.json()
    assert body["success"] is True
    assert [item["id"] for item in body["data"]] == [created["id"]]

    count = client.get(f"{BASE}/unread-count", headers=headers).json()
    assert count == {"success": True, "data": {"count": 1}, "error": None}

    read = client.patch(f"{BASE}/{created['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["data"]["isRead"] is True
    assert read.json()["data"]["readAt"] is not None

    again = client.patch(f"{BASE}/{created['id']}/read", headers=headers)
    assert again.json()["data"]["readAt"] == read.json()["data"]["readAt"]

    assert client.get(f"{BASE}/unread-count", headers=headers).json()["data"]["count"] == 0

    deleted = client.delete(f"{BASE}/{created['id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json()["success"] is True
    assert client.get(BASE, headers=headers).json()["data"] == []


def test_unread_only_filter(client: TestClient, auth_headers) -> None:
    headers = auth_headers("u1")
    first = _create(client, headers, "u1")
    second = _create(client, headers, "u1")
    client.patch(f"{BASE}/{first['id']}/read", headers=headers)

    unread = client.get(BASE, params={"unreadOnly": "true"}, headers=headers).json()["data"]

    assert [item["id"] for item in unread] == [second["id"]]


def test_mark_all_read_and_clear_read(client: TestClient, auth_headers) -> None:
    headers_a = auth_headers("A")
    headers_b = auth_headers("B")
    n1 = _create(client, headers_a, "A", title="N1")
    n2 = _create(client, headers_a, "A", title="N2")
    n3 = _create(client, headers_b, "B", title="N3")
    client.patch(f"{BASE}/{n1['id']}/read", headers=headers_a)
    client.patch(f"{BASE}/{n3['id']}/read", headers=headers_b)

    cleared = client.delete(f"{BASE}/clear-read", headers=headers_a)
    assert cleared.status_code == 200
    assert cleared.json()["data"] == {"deleted": 1}

    assert [item["id"] for item in client.get(BASE, headers=headers_a).json()["data"]] == [n2["id"]]
    assert [item["id"] for item in client.get(BASE, headers=headers_b).json()["data"]] == [n3["id"]]

    marked = client.post(f"{BASE}/mark-all-read", headers=headers_a)
    assert marked.json()["data"] == {"updated": 1}
    assert client.get(f"{BASE}/unread-count", headers=headers_a).json()["data"]["count"] == 0


def test_requests_without_token_are_rejected(client: TestClient) -> None:
    response = client.get(BASE)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json() == {
        "success": False,
        "data": None,
        "error": {"code": "UNAUTHORIZED", "message": "No token provided"},
    }


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        issue_token(TokenClaims("u1", None, None), expires_delta=timedelta(minutes=-5)),
    ],
)
def test_invalid_or_expired_token(client: TestClient, token: str) -> None:
    response = client.get(BASE, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


def test_other_users_notification_is_forbidden(client: TestClient, auth_headers) -> None:
    created = _create(client, auth_headers("u1"), "u1")
    intruder = auth_headers("u2")

    assert client.patch(f"{BASE}/{created['id']}/read", headers=intruder).status_code == 403
    response = client.delete(f"{BASE}/{created['id']}", headers=intruder)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_unknown_notification_is_not_found(client: TestClient, auth_headers) -> None:
    response = client.patch(f"{BASE}/12345/read", headers=auth_headers("u1"))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "task_assigned", "title": "T", "message": "M"},
        {"userId": "u1", "title": "T", "message": "M"},
        {"userId": "u1", "type": "task_assigned", "message": "M"},
        {"userId": "u1", "type": "task_assigned", "title": "T", "message": ""},
    ],
)
def test_create_requires_all_fields(client: TestClient, auth_headers, payload) -> None:
    response = client.post(BASE, json=payload, headers=auth_headers("admin"))

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_health_reports_presence(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ok"
    assert data["connectedUsers"] == 0
    assert data["sessions"] == 0
