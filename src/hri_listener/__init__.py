"""
HRI Listener Package

Keeps a live registry of the human features (faces, bodies, voices and
persons) reported by a perception pipeline as lists of tracked IDs.

Key Features:
- Per-category reconciliation of tracked-ids snapshots (added / removed)
- Non-owning views of faces, bodies and voices that expire on removal
- Persons resolving their matched face, body and voice
- Callbacks fired once per newly detected feature, with failure isolation
- Thread-safe point-in-time getters
- In-process and Qt signal transports
- Replay tool for recorded snapshot scripts
"""

__version__ = "1.0.0"

from .app.launcher import main, parse_arguments, setup_logging
from .core import (
    ID,
    Body,
    Face,
    FeatureType,
    FeatureView,
    HRIListener,
    ListenerConfig,
    Person,
    Voice,
)
from .transport import LocalTransport

__all__ = [
    "main",
    "parse_arguments",
    "setup_logging",
    "ID",
    "FeatureType",
    "FeatureView",
    "Face",
    "Body",
    "Voice",
    "Person",
    "HRIListener",
    "ListenerConfig",
    "LocalTransport",
]
