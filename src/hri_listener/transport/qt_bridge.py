"""
Qt signal bridge for feeding snapshots from worker threads.

Perception code running in a QThread emits ``snapshot_received`` with the
category name and the tracked id tokens. Qt queues the emission onto the
thread the bridge lives in, so the listener is updated there; emissions on
the bridge's own thread are delivered directly.
"""

import logging

from PySide6.QtCore import QObject, Signal, Slot

from hri_listener.core.features import FeatureType

logger = logging.getLogger(__name__)


class QtSnapshotBridge(QObject):
    """Routes ``snapshot_received(feature, ids)`` signals into an HRIListener."""

    snapshot_received = Signal(str, list)
    snapshot_applied = Signal(str, list, list)  # (feature, added ids, removed ids)

    def __init__(self, listener, parent=None):
        super().__init__(parent)
        self.listener = listener
        self.snapshot_received.connect(self._on_snapshot)

    @Slot(str, list)
    def _on_snapshot(self, feature, ids):
        if self.listener.closed:
            logger.debug("Dropping %s snapshot, listener closed", feature)
            return
        try:
            feature_type = FeatureType.parse(feature)
        except ValueError:
            logger.error("Rejected snapshot for unknown feature %r", feature)
            return
        added, removed = self.listener.on_snapshot_update(feature_type, ids)
        self.snapshot_applied.emit(
            feature, [str(i) for i in sorted(added)], [str(i) for i in sorted(removed)]
        )
