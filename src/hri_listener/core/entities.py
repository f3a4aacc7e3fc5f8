"""
Per-category entity records: faces, bodies, voices and persons.

Records only store what the perception side hands them. Decoding the
upstream messages is left to the caller.
"""

from __future__ import annotations

import weakref
from typing import Optional

import numpy as np

from .features import DEFAULT_NAMESPACE, FeatureTracker, FeatureType, FeatureView
from .ids import ID


class Face(FeatureTracker):
    """A detected face."""

    feature = FeatureType.FACE

    def __init__(self, id, transport=None, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(id, transport, namespace)
        self.roi: Optional[np.ndarray] = None
        self.landmarks: Optional[np.ndarray] = None

    def update_roi(self, values) -> None:
        """Store the face bounding box as ``[x, y, w, h]``."""
        roi = np.asarray(values, dtype=np.float32).reshape(-1)
        if roi.size != 4:
            raise ValueError(f"Face ROI needs 4 values, got {roi.size}")
        self.roi = roi

    def update_landmarks(self, points) -> None:
        """Store facial landmarks as an (N, 2) array of image coordinates."""
        arr = np.asarray(points, dtype=np.float32)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise ValueError(f"Face landmarks must be (N, 2), got {arr.shape}")
        self.landmarks = arr


class Body(FeatureTracker):
    """A detected body."""

    feature = FeatureType.BODY

    def __init__(self, id, transport=None, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(id, transport, namespace)
        self.skeleton: Optional[np.ndarray] = None

    def update_skeleton(self, points) -> None:
        """Store 2D keypoints with confidence as an (N, 3) array."""
        arr = np.asarray(points, dtype=np.float32)
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError(f"Body skeleton must be (N, 3), got {arr.shape}")
        self.skeleton = arr


class Voice(FeatureTracker):
    """A detected voice."""

    feature = FeatureType.VOICE

    def __init__(self, id, transport=None, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(id, transport, namespace)
        self.is_speaking = False
        self.speech = ""

    def update_speech(self, text: str, is_speaking: Optional[bool] = None) -> None:
        self.speech = str(text)
        if is_speaking is not None:
            self.is_speaking = bool(is_speaking)


def _relation_id(message) -> Optional[ID]:
    # Relation topics carry a bare token, either as a str or wrapped in .data
    token = getattr(message, "data", message)
    token = str(token or "").strip()
    return ID(token) if token else None


def _as_flag(message) -> bool:
    value = getattr(message, "data", message)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


class Person(FeatureTracker):
    """
    A person, possibly matched to a face, a body and a voice.

    The person keeps only a weak reference to the listener that created it
    and uses it to look up its matched features. The listener is expected to
    outlive its persons; if it does not, every relation resolves to None.

    Args:
        id: Person identifier.
        listener: The HRIListener owning this record.
        transport: Optional transport; when given, ``init()`` follows the
            ``face_id``, ``body_id``, ``voice_id`` and ``anonymous`` topics
            under the person's namespace.
        namespace: Topic root.
        follow_relations: Set to False to skip the relation subscriptions.
    """

    feature = FeatureType.PERSON

    def __init__(
        self,
        id,
        listener=None,
        transport=None,
        namespace: str = DEFAULT_NAMESPACE,
        follow_relations: bool = True,
    ):
        super().__init__(id, transport, namespace)
        self._listener = weakref.ref(listener) if listener is not None else None
        self.follow_relations = follow_relations
        self.face_id: Optional[ID] = None
        self.body_id: Optional[ID] = None
        self.voice_id: Optional[ID] = None
        self.anonymous = False

    def init(self) -> None:
        super().init()
        if not self.follow_relations:
            return
        self._subscribe("face_id", self._on_face_id)
        self._subscribe("body_id", self._on_body_id)
        self._subscribe("voice_id", self._on_voice_id)
        self._subscribe("anonymous", self._on_anonymous)

    @property
    def listener(self):
        return self._listener() if self._listener is not None else None

    @property
    def face(self) -> Optional[FeatureView]:
        return self._resolve(FeatureType.FACE, self.face_id)

    @property
    def body(self) -> Optional[FeatureView]:
        return self._resolve(FeatureType.BODY, self.body_id)

    @property
    def voice(self) -> Optional[FeatureView]:
        return self._resolve(FeatureType.VOICE, self.voice_id)

    def _resolve(
        self, feature: FeatureType, rel_id: Optional[ID]
    ) -> Optional[FeatureView]:
        if self.closed or rel_id is None:
            return None
        listener = self.listener
        if listener is None:
            return None
        record = listener.lookup(feature, rel_id)
        return FeatureView(record) if record is not None else None

    def _on_face_id(self, message) -> None:
        self.face_id = _relation_id(message)

    def _on_body_id(self, message) -> None:
        self.body_id = _relation_id(message)

    def _on_voice_id(self, message) -> None:
        self.voice_id = _relation_id(message)

    def _on_anonymous(self, message) -> None:
        self.anonymous = _as_flag(message)
