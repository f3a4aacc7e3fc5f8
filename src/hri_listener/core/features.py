"""
Feature categories, the common base of per-entity records, and the
non-owning views handed out to application code.
"""

from __future__ import annotations

import logging
import weakref
from enum import Enum
from typing import Callable, List, Optional, Union

from .ids import ID

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "/humans"

_PLURALS = {"face": "faces", "body": "bodies", "voice": "voices", "person": "persons"}


class FeatureType(Enum):
    """The four human feature categories tracked by the listener."""

    FACE = "face"
    BODY = "body"
    VOICE = "voice"
    PERSON = "person"

    @property
    def plural(self) -> str:
        # Topic segment used by the perception pipeline, e.g. /humans/bodies
        return _PLURALS[self.value]

    @classmethod
    def parse(cls, value: Union["FeatureType", str]) -> "FeatureType":
        """Accept a FeatureType, its value ("face") or its plural ("faces")."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        for feature in cls:
            if name in (feature.value, feature.plural):
                return feature
        raise ValueError(f"Unknown feature type: {value!r}")


class FeatureTracker:
    """
    Base class for one tracked entity (a face, a body, a voice or a person).

    Records are created and owned by a FeatureRegistry. The registry calls
    ``init()`` once right after construction and ``close()`` when the ID
    drops out of a snapshot. Subclasses hold feature-specific state that the
    perception side updates during the record's lifetime.

    Args:
        id: Identifier of the entity within its category.
        transport: Optional transport used by subclasses to follow
            per-entity topics under ``ns``.
        namespace: Topic root shared by all categories.
    """

    feature: FeatureType

    def __init__(self, id, transport=None, namespace: str = DEFAULT_NAMESPACE):
        self.id = ID.coerce(id)
        self.transport = transport
        self.ns = f"{namespace.rstrip('/')}/{self.feature.plural}/{self.id}"
        self.closed = False
        self._subscriptions: List[object] = []

    def init(self) -> None:
        """Lifecycle hook run before the record is registered or exposed."""
        logger.debug("Initialised %s %s", self.feature.value, self.id)

    def close(self) -> None:
        """Release per-entity subscriptions and mark the record as gone."""
        if self.closed:
            return
        self.closed = True
        for sub in self._subscriptions:
            try:
                sub.shutdown()
            except Exception:
                logger.debug(
                    "Subscription shutdown failed for %s", self.ns, exc_info=True
                )
        self._subscriptions.clear()
        logger.debug("Closed %s %s", self.feature.value, self.id)

    def _subscribe(self, suffix: str, callback: Callable[[object], None]):
        if self.transport is None:
            return None
        sub = self.transport.subscribe(f"{self.ns}/{suffix}", callback)
        self._subscriptions.append(sub)
        return sub

    def __repr__(self) -> str:
        state = " closed" if self.closed else ""
        return f"<{type(self).__name__} {self.id}{state}>"


class FeatureView:
    """
    Non-owning handle to a record held by a registry.

    The view does not keep the record alive. Once the registry drops the
    record the view expires and ``get()`` returns None, so callers must
    check the result before each use.
    """

    __slots__ = ("id", "feature", "_ref")

    def __init__(self, record: FeatureTracker):
        self.id = record.id
        self.feature = record.feature
        self._ref = weakref.ref(record)

    def get(self) -> Optional[FeatureTracker]:
        record = self._ref()
        if record is None or record.closed:
            return None
        return record

    @property
    def expired(self) -> bool:
        return self.get() is None

    def __repr__(self) -> str:
        state = "expired" if self.expired else "live"
        return f"<FeatureView {self.feature.value} {self.id} ({state})>"
