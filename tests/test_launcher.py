from __future__ import annotations

from pathlib import Path

import pytest

from hri_listener.app import launcher
from hri_listener.core.config import ListenerConfig
from hri_listener.core.features import FeatureType


@pytest.fixture(autouse=True)
def _no_global_logging(monkeypatch):
    # main() reconfigures the root logger; keep that out of the test session.
    monkeypatch.setattr(launcher, "setup_logging", lambda log_level=None: None)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_script_parses_steps(tmp_path: Path) -> None:
    script = _write(
        tmp_path / "session.yaml",
        "- {feature: face, ids: [f1, f2]}\n"
        "- {feature: persons, ids: [p1]}\n"
        "- {feature: body}\n",
    )

    steps = launcher.load_script(script)

    assert steps == [
        (FeatureType.FACE, ["f1", "f2"]),
        (FeatureType.PERSON, ["p1"]),
        (FeatureType.BODY, []),
    ]


@pytest.mark.parametrize(
    "text",
    [
        "feature: face\n",
        "- {ids: [a]}\n",
        "- {feature: hand, ids: [a]}\n",
        "- {feature: face, ids: a}\n",
    ],
)
def test_load_script_rejects_bad_content(tmp_path: Path, text: str) -> None:
    with pytest.raises(ValueError):
        launcher.load_script(_write(tmp_path / "bad.yaml", text))


def test_replay_returns_final_state() -> None:
    steps = [
        (FeatureType.FACE, ["a", "b"]),
        (FeatureType.FACE, ["b", "c"]),
        (FeatureType.VOICE, ["v1"]),
        (FeatureType.PERSON, ["p1", "p2"]),
        (FeatureType.PERSON, ["p2"]),
    ]

    tracked = launcher.replay(steps, ListenerConfig(namespace="/test"))

    assert tracked == {
        "face": ["b", "c"],
        "body": [],
        "voice": ["v1"],
        "person": ["p2"],
    }


def test_main_prints_tracked_ids(tmp_path: Path, capsys) -> None:
    script = _write(
        tmp_path / "session.yaml",
        "- {feature: body, ids: [b1, b2]}\n- {feature: body, ids: [b2]}\n",
    )

    code = launcher.main([str(script), "--log-level", "WARNING"])

    out = capsys.readouterr().out
    assert code == 0
    assert "body: b2" in out
    assert "face: -" in out


def test_main_uses_config_file(tmp_path: Path, capsys) -> None:
    script = _write(tmp_path / "session.yaml", "- {feature: voice, ids: [v1]}\n")
    config = _write(tmp_path / "listener.yaml", "namespace: /robot\n")

    code = launcher.main([str(script), "--config", str(config), "--log-level", "ERROR"])

    assert code == 0
    assert "voice: v1" in capsys.readouterr().out


def test_main_reports_bad_inputs(tmp_path: Path, capsys) -> None:
    script = _write(tmp_path / "session.yaml", "- {feature: face, ids: [a]}\n")

    assert launcher.main([str(tmp_path / "missing.yaml"), "--log-level", "ERROR"]) == 1
    assert launcher.main(
        [str(script), "--config", str(_write(tmp_path / "c.yaml", "bogus: 1\n"))]
    ) == 1
    assert "Error:" in capsys.readouterr().out
