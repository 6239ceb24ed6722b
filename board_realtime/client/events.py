"""In-process event bus used to fan realtime updates out to UI components."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, DefaultDict

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class LocalEventBus:
    """Minimal publish/subscribe hub keyed by event name."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        with self._lock:
            self._listeners[event].append(listener)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(event)
                if listeners and listener in listeners:
                    listeners.remove(listener)
                if listeners is not None and not listeners:
                    self._listeners.pop(event, None)

        return unsubscribe

    def emit(self, event: str, data: Any = None) -> None:
        with self._lock:
            listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            try:
                listener(data)
            except Exception:
                # One failing component must not starve the others.
                logger.exception("Listener for %s raised", event)


__all__ = ["LocalEventBus", "Listener"]
