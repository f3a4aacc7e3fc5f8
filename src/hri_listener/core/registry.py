"""
Per-category registry reconciling tracked IDs against incoming snapshots.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .features import FeatureTracker, FeatureType, FeatureView
from .ids import ID

logger = logging.getLogger(__name__)


def _close_all(records: Dict[ID, FeatureTracker]) -> None:
    for id_ in sorted(records):
        records[id_].close()


class FeatureRegistry:
    """
    Owns the records of one feature category, keyed by ID.

    The registry is the sole owner of its records. Readers get copies of the
    mapping (``snapshot()`` for weak views, ``records()`` for the records
    themselves) and never see a half-applied reconciliation: the new mapping
    is built aside and swapped in under the lock.

    Reconciliation for one category is expected to be serialized by the
    caller; reads may happen from any thread at any time.
    """

    def __init__(self, feature: FeatureType, factory: Callable[[ID], FeatureTracker]):
        self.feature = feature
        self._factory = factory
        self._records: Dict[ID, FeatureTracker] = {}
        self._lock = threading.Lock()
        self._closed = False

    def reconcile(self, new_ids: Iterable) -> Tuple[FrozenSet[ID], FrozenSet[ID]]:
        """
        Bring the registry in line with a complete snapshot of tracked IDs.

        Returns:
            tuple: (added, removed) sets of IDs
        """
        wanted = frozenset(ID.coerce(i) for i in new_ids)
        with self._lock:
            current = self._records

        current_ids = frozenset(current)
        added = wanted - current_ids
        removed = current_ids - wanted

        if not added and not removed:
            return added, removed

        # Build outside the lock; init() must run before anyone can see it.
        created = {}
        try:
            for id_ in sorted(added):
                record = self._factory(id_)
                created[id_] = record
                record.init()
        except BaseException:
            _close_all(created)
            raise

        updated = {k: v for k, v in current.items() if k not in removed}
        updated.update(created)
        with self._lock:
            closed = self._closed
            if not closed:
                self._records = updated

        if closed:
            # close() ran while records were being built; nothing may outlive it.
            logger.debug("%s registry closed during reconcile", self.feature.value)
            _close_all(created)
            return frozenset(), frozenset()

        for id_ in sorted(removed):
            current[id_].close()

        logger.debug(
            "%s registry: +%d -%d (now %d)",
            self.feature.value,
            len(added),
            len(removed),
            len(updated),
        )
        return added, removed

    def snapshot(self) -> Dict[ID, FeatureView]:
        with self._lock:
            records = self._records
        return {id_: FeatureView(record) for id_, record in records.items()}

    def records(self) -> Dict[ID, FeatureTracker]:
        with self._lock:
            return dict(self._records)

    def views(self, ids: Iterable[ID]) -> List[FeatureView]:
        """Views for ``ids`` in the given order, skipping IDs no longer held."""
        with self._lock:
            records = self._records
        return [FeatureView(records[i]) for i in ids if i in records]

    def get(self, id_) -> Optional[FeatureTracker]:
        with self._lock:
            return self._records.get(ID.coerce(id_))

    def ids(self) -> FrozenSet[ID]:
        with self._lock:
            return frozenset(self._records)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            records, self._records = self._records, {}
        _close_all(records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, id_) -> bool:
        return self.get(id_) is not None
