"""FastAPI dependency utilities."""

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from board_realtime.application.use_cases.notifications import NotificationService
from board_realtime.domain.entities import TokenClaims
from board_realtime.infrastructure.security import TokenVerifier

# Tokens are issued by the authentication service; this API only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


def get_current_claims(
    token: str | None = Depends(oauth2_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> TokenClaims:
    """Return the identity behind the bearer token or raise ``AuthenticationError``."""

    return verifier.verify(token)
