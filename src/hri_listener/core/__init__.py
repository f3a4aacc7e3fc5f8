"""
Core components of the HRI listener.

This package contains the identifier type, the per-entity feature records,
the per-category registries and callback lists, and the HRIListener facade
that reconciles tracked-ids snapshots against them.
"""
from .callbacks import CallbackRegistry
from .config import ListenerConfig
from .entities import Body, Face, Person, Voice
from .features import FeatureTracker, FeatureType, FeatureView
from .ids import ID
from .listener import HRIListener
from .registry import FeatureRegistry


__all__ = [
    "ID",
    "FeatureType",
    "FeatureTracker",
    "FeatureView",
    "Face",
    "Body",
    "Voice",
    "Person",
    "FeatureRegistry",
    "CallbackRegistry",
    "ListenerConfig",
    "HRIListener",
]
