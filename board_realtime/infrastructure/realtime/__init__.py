"""Realtime connection helpers for the infrastructure layer."""

from .connection import RealtimeConnection
from .registry import ConnectionRegistry
from .serialization import normalize_payload, serialize_notification

__all__ = [
    "ConnectionRegistry",
    "RealtimeConnection",
    "normalize_payload",
    "serialize_notification",
]
