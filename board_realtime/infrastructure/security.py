"""Helpers for issuing and verifying bearer tokens."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from board_realtime.config import get_settings
from board_realtime.domain.entities import TokenClaims
from board_realtime.domain.errors import AuthenticationError

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def issue_token(claims: TokenClaims, expires_delta: timedelta | None = None) -> str:
    """Encode ``claims`` into a signed access token."""

    data = {"sub": claims.user_id, "role_id": claims.role_id, "email": claims.email}
    return create_access_token(data, expires_delta)


class TokenVerifier:
    """Turn bearer credentials into :class:`TokenClaims`.

    Shared by the HTTP dependencies and the websocket handshake so both
    surfaces accept exactly the same tokens.
    """

    def verify(self, token: str | None) -> TokenClaims:
        if not token:
            raise AuthenticationError("No token provided")
        try:
            payload = decode_access_token(token)
        except ValueError as exc:
            raise AuthenticationError(
                "Invalid or expired token", code="INVALID_TOKEN"
            ) from exc

        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN")
        return TokenClaims(
            user_id=str(user_id),
            role_id=payload.get("role_id"),
            email=payload.get("email"),
        )


__all__ = [
    "create_access_token",
    "decode_access_token",
    "issue_token",
    "TokenVerifier",
]
