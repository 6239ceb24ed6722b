"""Identity decoded from a bearer credential."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by an access token."""

    user_id: str
    role_id: str | None
    email: str | None
