"""
In-process publish/subscribe transport.

Delivers messages synchronously on the publisher's thread. Useful for
embedding the listener next to the perception code in one process, for
replaying recorded snapshots, and for tests.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List, Protocol

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by ``subscribe``; call ``shutdown()`` to stop delivery."""

    def __init__(
        self,
        transport: "LocalTransport",
        topic: str,
        callback: Callable,
        queue_size: int = 1,
    ):
        self.topic = topic
        self.callback = callback
        self.queue_size = queue_size
        self._transport = transport
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def shutdown(self) -> None:
        if not self._active:
            return
        self._active = False
        self._transport._remove(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "shut down"
        return f"<Subscription {self.topic} {state}>"


class Transport(Protocol):
    """What HRIListener and the entity records need from a transport."""

    def subscribe(
        self, topic: str, callback: Callable[[Any], None], queue_size: int = 1
    ) -> Subscription:
        """Deliver every message published on ``topic`` to ``callback``."""


class LocalTransport:
    """Thread-safe in-process topic bus."""

    def __init__(self):
        self._subs: Dict[str, List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(
        self, topic: str, callback: Callable[[Any], None], queue_size: int = 1
    ) -> Subscription:
        sub = Subscription(self, topic, callback, queue_size)
        with self._lock:
            self._subs[topic].append(sub)
        logger.debug("Subscribed to %s", topic)
        return sub

    def publish(self, topic: str, message: Any) -> int:
        """
        Deliver ``message`` to the current subscribers of ``topic``.

        A subscriber that raises is logged and does not affect the others.

        Returns:
            int: Number of subscribers the message was handed to
        """
        with self._lock:
            subs = list(self._subs.get(topic, ()))

        delivered = 0
        for sub in subs:
            if not sub.active:
                continue
            delivered += 1
            try:
                sub.callback(message)
            except Exception:
                logger.exception("Subscriber of %s failed", topic)
        return delivered

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subs.get(topic, ()))

    def topics(self) -> List[str]:
        with self._lock:
            return sorted(t for t, subs in self._subs.items() if subs)

    def close(self) -> None:
        with self._lock:
            subs = [s for topic_subs in self._subs.values() for s in topic_subs]
        for sub in subs:
            sub.shutdown()

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            topic_subs = self._subs.get(sub.topic)
            if topic_subs and sub in topic_subs:
                topic_subs.remove(sub)
            if not topic_subs:
                self._subs.pop(sub.topic, None)
        logger.debug("Unsubscribed from %s", sub.topic)
