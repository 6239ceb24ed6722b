"""Error taxonomy shared by the HTTP surface and the realtime channel."""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map onto the response envelope."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class AuthenticationError(AppError):
    """Missing, malformed or expired credential."""

    code = "UNAUTHORIZED"
    status_code = 401


class AuthorizationError(AppError):
    """Valid identity acting on a resource it does not own."""

    code = "FORBIDDEN"
    status_code = 403


class ValidationError(AppError):
    """Required fields are missing or malformed."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(AppError):
    """The requested entity does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class DeliveryError(AppError):
    """A push to a live connection failed.

    Only ever logged: the notification is already persisted when this happens.
    """

    code = "DELIVERY_FAILED"


class SessionLimitExceeded(AppError):
    """The user already holds the maximum number of realtime sessions."""

    code = "SESSION_LIMIT"
    status_code = 429


__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "ValidationError",
    "NotFoundError",
    "DeliveryError",
    "SessionLimitExceeded",
]
