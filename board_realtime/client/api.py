"""HTTP client for the notification endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiRequestError(Exception):
    """A notification request failed or returned ``success: false``."""

    def __init__(
        self, message: str, *, status_code: int | None = None, code: str = "REQUEST_FAILED"
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class NotificationApiClient:
    """Call the notification API on behalf of one authenticated user.

    ``http`` is any :class:`httpx.Client` whose ``base_url`` points at the
    server, including FastAPI's ``TestClient``.
    """

    BASE_PATH = "/api/notifications"

    def __init__(self, http: httpx.Client, token: str) -> None:
        self._http = http
        self._token = token

    def list(self, *, unread_only: bool = False) -> list[dict[str, Any]]:
        params = {"unreadOnly": "true"} if unread_only else None
        return self._request("GET", "", params=params) or []

    def unread_count(self) -> int:
        return int(self._request("GET", "/unread-count")["count"])

    def create(
        self,
        *,
        user_id: str,
        type: str,
        title: str,
        message: str,
        action_url: str | None = None,
    ) -> dict[str, Any]:
        payload = {"userId": user_id, "type": type, "title": title, "message": message}
        if action_url:
            payload["actionUrl"] = action_url
        return self._request("POST", "", json=payload)

    def mark_as_read(self, notification_id: int) -> dict[str, Any]:
        return self._request("PATCH", f"/{notification_id}/read")

    def mark_all_as_read(self) -> int:
        return int(self._request("POST", "/mark-all-read")["updated"])

    def delete(self, notification_id: int) -> None:
        self._request("DELETE", f"/{notification_id}")

    def clear_read(self) -> int:
        return int(self._request("DELETE", "/clear-read")["deleted"])

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            response = self._http.request(
                method, f"{self.BASE_PATH}{path}", headers=headers, **kwargs
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path or "/", exc)
            raise ApiRequestError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success or not isinstance(body, dict) or not body.get("success"):
            error = (body or {}).get("error") if isinstance(body, dict) else None
            error = error or {}
            raise ApiRequestError(
                error.get("message") or f"HTTP {response.status_code}",
                status_code=response.status_code,
                code=error.get("code") or "HTTP_ERROR",
            )
        return body.get("data")


__all__ = ["ApiRequestError", "NotificationApiClient"]
