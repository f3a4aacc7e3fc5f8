"""
Ordered callback lists notified when new features are detected.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, List

logger = logging.getLogger(__name__)


class CallbackRegistry:
    """Callbacks subscribed to one feature category.

    Registration is append-only. A failing callback is logged and skipped;
    it never stops the remaining callbacks or items from being notified.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._callbacks: List[Callable] = []
        self._lock = threading.Lock()

    def register(self, callback: Callable) -> None:
        if not callable(callback):
            raise TypeError(f"Callback must be callable, got {type(callback).__name__}")
        with self._lock:
            self._callbacks.append(callback)

    def notify(self, items: Iterable) -> int:
        """
        Call every callback once per item.

        Items are visited in order; for each item the callbacks run in
        registration order. Callbacks run without any lock held.

        Returns:
            int: Number of callback invocations that raised
        """
        with self._lock:
            callbacks = list(self._callbacks)

        failures = 0
        for item in items:
            for callback in callbacks:
                try:
                    callback(item)
                except Exception:
                    failures += 1
                    logger.exception(
                        "%s callback %r failed for %r",
                        self.name or "feature",
                        callback,
                        item,
                    )
        return failures

    def clear(self) -> None:
        with self._lock:
            self._callbacks.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)
