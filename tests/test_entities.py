from __future__ import annotations

import gc

import numpy as np
import pytest

from hri_listener.core.entities import Body, Face, Person, Voice
from hri_listener.core.features import FeatureView
from hri_listener.core.ids import ID
from hri_listener.core.listener import HRIListener


def test_record_namespace_and_repr() -> None:
    face = Face("f1")
    assert face.id == ID("f1")
    assert face.ns == "/humans/faces/f1"
    assert Body("b1", namespace="/robot/humans/").ns == "/robot/humans/bodies/b1"
    assert "f1" in repr(face)

    face.close()
    assert "closed" in repr(face)


def test_face_roi_and_landmarks() -> None:
    face = Face("f1")
    assert face.roi is None

    face.update_roi([10, 20, 30, 40])
    assert face.roi.dtype == np.float32
    np.testing.assert_allclose(face.roi, [10, 20, 30, 40])

    face.update_landmarks([[1, 2], [3, 4], [5, 6]])
    assert face.landmarks.shape == (3, 2)

    with pytest.raises(ValueError):
        face.update_roi([1, 2, 3])
    with pytest.raises(ValueError):
        face.update_landmarks([1, 2, 3])


def test_body_skeleton_shape_is_checked() -> None:
    body = Body("b1")
    body.update_skeleton(np.zeros((17, 3)))
    assert body.skeleton.shape == (17, 3)
    with pytest.raises(ValueError):
        body.update_skeleton(np.zeros((17, 2)))


def test_voice_speech_state() -> None:
    voice = Voice("v1")
    assert voice.speech == "" and voice.is_speaking is False
    voice.update_speech("hello", is_speaking=True)
    assert voice.speech == "hello" and voice.is_speaking is True
    voice.update_speech("bye")
    assert voice.is_speaking is True


def test_view_does_not_keep_record_alive() -> None:
    face = Face("f1")
    view = FeatureView(face)
    assert view.get() is face

    del face
    gc.collect()

    assert view.get() is None
    assert view.expired
    assert "expired" in repr(view)


def test_person_without_listener_resolves_nothing() -> None:
    person = Person("p1")
    person.face_id = ID("f1")
    assert person.listener is None
    assert person.face is None


def test_person_relations_after_listener_is_gone() -> None:
    listener = HRIListener()
    listener.on_snapshot_update("face", ["f1"])
    person = Person("p1", listener=listener)
    person.face_id = ID("f1")
    assert person.face is not None

    listener.close()
    del listener
    gc.collect()

    assert person.listener is None
    assert person.face is None


def test_person_without_relation_following(transport) -> None:
    person = Person("p1", transport=transport, follow_relations=False)
    person.init()
    assert transport.topics() == []


def test_person_reads_wrapped_relation_messages(transport) -> None:
    class String:
        def __init__(self, data):
            self.data = data

    person = Person("p1", transport=transport)
    person.init()

    transport.publish("/humans/persons/p1/voice_id", String("v7"))
    transport.publish("/humans/persons/p1/anonymous", String(True))

    assert person.voice_id == ID("v7")
    assert person.anonymous is True

    person.close()
    assert transport.topics() == []


@pytest.mark.parametrize(
    "message, expected",
    [
        ("false", False),
        ("False", False),
        ("0", False),
        ("", False),
        ("true", True),
        (" TRUE ", True),
        (False, False),
        (1, True),
    ],
)
def test_person_anonymous_flag_parsing(transport, message, expected) -> None:
    class String:
        def __init__(self, data):
            self.data = data

    person = Person("p1", transport=transport)
    person.init()

    transport.publish("/humans/persons/p1/anonymous", message)
    assert person.anonymous is expected

    transport.publish("/humans/persons/p1/anonymous", String(message))
    assert person.anonymous is expected

    person.close()
