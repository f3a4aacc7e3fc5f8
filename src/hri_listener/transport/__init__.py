"""Transports delivering tracked-ids snapshots to the listener.

The Qt bridge is imported lazily (``hri_listener.transport.qt_bridge``) so
that headless users do not need a Qt runtime just to import the package.
"""

from .local import LocalTransport, Subscription, Transport

__all__ = ["LocalTransport", "Subscription", "Transport"]
