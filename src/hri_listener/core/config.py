"""
Configuration of the HRI listener topics.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from .features import DEFAULT_NAMESPACE, FeatureType
from .ids import ID


@dataclass
class ListenerConfig:
    """Topic layout and subscription settings for an HRIListener."""

    namespace: str = DEFAULT_NAMESPACE  # Root of every human-feature topic
    tracked_suffix: str = "tracked"  # Topic carrying the tracked-ids snapshot
    queue_size: int = 1  # Snapshots supersede each other; keep the latest only
    subscribe_person_relations: bool = True  # Follow <person>/face_id etc.

    def __post_init__(self):
        if not isinstance(self.namespace, str) or not self.namespace.startswith("/"):
            raise ValueError(
                f"namespace must be an absolute topic, got {self.namespace!r}"
            )
        if not isinstance(self.tracked_suffix, str) or not self.tracked_suffix:
            raise ValueError("tracked_suffix must be a non-empty string")
        if isinstance(self.queue_size, bool) or not isinstance(self.queue_size, int):
            raise ValueError(f"queue_size must be an int, got {self.queue_size!r}")
        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")
        self.namespace = self.namespace.rstrip("/")
        self.subscribe_person_relations = bool(self.subscribe_person_relations)

    def tracked_topic(self, feature) -> str:
        feature = FeatureType.parse(feature)
        return f"{self.namespace}/{feature.plural}/{self.tracked_suffix}"

    def entity_namespace(self, feature, id_) -> str:
        feature = FeatureType.parse(feature)
        return f"{self.namespace}/{feature.plural}/{ID.coerce(id_)}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ListenerConfig":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(
                f"Listener config must be a mapping, got {type(data).__name__}"
            )
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown listener config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path) -> "ListenerConfig":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        return cls.from_dict(data)
