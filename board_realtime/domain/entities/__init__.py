"""Domain entities exposed by the application."""

from .notification import Notification
from .token_claims import TokenClaims

__all__ = [
    "Notification",
    "TokenClaims",
]
