"""
HRIListener: the entry point tying the four feature registries together.

Example:
    transport = LocalTransport()
    listener = HRIListener(transport)
    listener.on_face(lambda view: print("new face", view.id))

    transport.publish("/humans/faces/tracked", ["f1", "f2"])

    for face_id, view in listener.get_faces().items():
        face = view.get()
        if face is not None:
            print(face_id, face.roi)
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .callbacks import CallbackRegistry
from .config import ListenerConfig
from .entities import Body, Face, Person, Voice
from .features import FeatureTracker, FeatureType, FeatureView
from .ids import ID
from .registry import FeatureRegistry

logger = logging.getLogger(__name__)


def _parse_ids(message) -> List[ID]:
    # Accept a bare sequence of tokens or a message exposing them as .ids
    tokens = getattr(message, "ids", message) or ()
    if isinstance(tokens, str):
        tokens = [tokens]
    ids = []
    for token in tokens:
        if isinstance(token, ID):
            ids.append(token)
            continue
        token = str(token).strip()
        if not token:
            logger.debug("Dropping empty id token")
            continue
        ids.append(ID(token))
    return ids


class HRIListener:
    """
    Live view of the faces, bodies, voices and persons currently tracked.

    Each category has its own FeatureRegistry and CallbackRegistry. Snapshot
    updates may arrive from any thread, concurrently across categories but
    serialized within one. Getters can be called from any thread and return
    point-in-time copies.

    Faces, bodies and voices are handed out as FeatureView objects that may
    expire at any point. Persons are handed out directly; a person removed by
    a later snapshot is closed and its relations resolve to None.

    Args:
        transport: Optional transport. When given, the listener subscribes to
            the tracked-ids topic of every category.
        config: Topic layout; defaults to ListenerConfig().
    """

    def __init__(self, transport=None, config: Optional[ListenerConfig] = None):
        self.transport = transport
        self.config = config or ListenerConfig()
        self._closed = False
        self._close_lock = threading.Lock()

        factories = {
            FeatureType.FACE: lambda id_: Face(id_, transport, self.config.namespace),
            FeatureType.BODY: lambda id_: Body(id_, transport, self.config.namespace),
            FeatureType.VOICE: lambda id_: Voice(id_, transport, self.config.namespace),
            FeatureType.PERSON: self._make_person,
        }
        self._registries: Dict[FeatureType, FeatureRegistry] = {
            feature: FeatureRegistry(feature, factory)
            for feature, factory in factories.items()
        }
        self._callbacks: Dict[FeatureType, CallbackRegistry] = {
            feature: CallbackRegistry(feature.value) for feature in FeatureType
        }
        self._subscriptions = []
        self.init()

    def init(self) -> None:
        logger.debug("Initialising the HRI listener")
        if self.transport is None:
            return
        for feature in FeatureType:
            topic = self.config.tracked_topic(feature)
            sub = self.transport.subscribe(
                topic,
                lambda message, feature=feature: self.on_snapshot_update(
                    feature, message
                ),
                self.config.queue_size,
            )
            self._subscriptions.append(sub)

    def _make_person(self, id_: ID) -> Person:
        return Person(
            id_,
            listener=self,
            transport=self.transport,
            namespace=self.config.namespace,
            follow_relations=self.config.subscribe_person_relations,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def on_snapshot_update(
        self, feature, ids: Iterable
    ) -> Tuple[FrozenSet[ID], FrozenSet[ID]]:
        """
        Apply a fresh tracked-ids snapshot for one category.

        Removed records are closed, new ones are built and initialised, then
        the category's callbacks fire once per new record in ascending ID
        order. Removals fire no callback.

        Returns:
            tuple: (added, removed) sets of IDs
        """
        feature = FeatureType.parse(feature)
        if self._closed:
            logger.warning("Ignoring %s snapshot received after close", feature.value)
            return frozenset(), frozenset()

        registry = self._registries[feature]
        added, removed = registry.reconcile(_parse_ids(ids))
        if added:
            if feature is FeatureType.PERSON:
                persons = registry.records()
                new_items = [persons[i] for i in sorted(added) if i in persons]
            else:
                new_items = registry.views(sorted(added))
            self._callbacks[feature].notify(new_items)
        return added, removed

    def lookup(self, feature, id_) -> Optional[FeatureTracker]:
        """Return the record currently tracked under ``id_``, if any."""
        return self._registries[FeatureType.parse(feature)].get(id_)

    def get_faces(self) -> Dict[ID, FeatureView]:
        return self._registries[FeatureType.FACE].snapshot()

    def get_bodies(self) -> Dict[ID, FeatureView]:
        return self._registries[FeatureType.BODY].snapshot()

    def get_voices(self) -> Dict[ID, FeatureView]:
        return self._registries[FeatureType.VOICE].snapshot()

    def get_persons(self) -> Dict[ID, Person]:
        return self._registries[FeatureType.PERSON].records()

    def on_face(self, callback: Callable[[FeatureView], None]) -> None:
        """Call ``callback`` with a view of every newly detected face."""
        self._callbacks[FeatureType.FACE].register(callback)

    def on_body(self, callback: Callable[[FeatureView], None]) -> None:
        self._callbacks[FeatureType.BODY].register(callback)

    def on_voice(self, callback: Callable[[FeatureView], None]) -> None:
        self._callbacks[FeatureType.VOICE].register(callback)

    def on_person(self, callback: Callable[[Person], None]) -> None:
        """Call ``callback`` with every newly detected person."""
        self._callbacks[FeatureType.PERSON].register(callback)

    def close(self) -> None:
        """Stop listening and release every tracked record."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        logger.debug("Closing the HRI listener")

        for sub in self._subscriptions:
            try:
                sub.shutdown()
            except Exception:
                logger.debug("Failed to shut down subscription %r", sub, exc_info=True)
        self._subscriptions.clear()

        for registry in self._registries.values():
            registry.close()
        for callbacks in self._callbacks.values():
            callbacks.clear()

    def __enter__(self) -> "HRIListener":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
