"""
In-process change feed for feature toggles.

Listeners run after every successful toggle write, including an emergency
shutdown and a reset to defaults.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class FeatureToggleEvents:
    """Subscribe/notify registry for toggle changes."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Feature toggle listener %r failed", listener)

    def __len__(self) -> int:
        return len(self._listeners)


feature_toggle_events = FeatureToggleEvents()
