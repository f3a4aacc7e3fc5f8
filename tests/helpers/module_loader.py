from __future__ import annotations

import importlib.util
import sys
import types
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict

REPO_ROOT = Path(__file__).resolve().parents[2]
SRC_ROOT = REPO_ROOT / "src"


@contextmanager
def _patched_modules(stubs: Dict[str, Any] | None):
    if not stubs:
        yield
        return

    sentinel = object()
    original = {}
    try:
        for name, stub in stubs.items():
            original[name] = sys.modules.get(name, sentinel)
            sys.modules[name] = stub
        yield
    finally:
        for name, old in original.items():
            if old is sentinel:
                sys.modules.pop(name, None)
            else:
                sys.modules[name] = old


def load_src_module(
    src_relative_path: str,
    module_name: str,
    stubs: Dict[str, Any] | None = None,
):
    """
    Load a module from `src/` by file path, bypassing package side effects.
    """
    module_path = SRC_ROOT / src_relative_path
    if not module_path.exists():
        raise FileNotFoundError(f"Module path does not exist: {module_path}")

    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Unable to create spec for module: {module_path}")

    module = importlib.util.module_from_spec(spec)

    with _patched_modules(stubs):
        spec.loader.exec_module(module)

    return module


class _BoundSignal:
    def __init__(self):
        self.slots = []
        self.emissions = []

    def connect(self, slot):
        self.slots.append(slot)

    def emit(self, *args):
        self.emissions.append(args)
        for slot in list(self.slots):
            slot(*args)


def make_pyside_stubs() -> Dict[str, types.ModuleType]:
    """
    Minimal PySide6.QtCore stand-in delivering signals directly, as Qt does
    for emissions on the receiver's own thread.
    """

    class Signal:
        def __init__(self, *types_):
            self.types = types_
            self.name = None

        def __set_name__(self, owner, name):
            self.name = name

        def __get__(self, instance, owner=None):
            if instance is None:
                return self
            bound = instance.__dict__.get(self.name)
            if bound is None:
                bound = instance.__dict__[self.name] = _BoundSignal()
            return bound

    class QObject:
        def __init__(self, parent=None):
            self._parent = parent

        def parent(self):
            return self._parent

    def Slot(*args, **kwargs):
        def deco(fn):
            return fn

        return deco

    qtcore = types.ModuleType("PySide6.QtCore")
    qtcore.Signal = Signal
    qtcore.QObject = QObject
    qtcore.Slot = Slot

    pyside = types.ModuleType("PySide6")
    pyside.QtCore = qtcore
    return {"PySide6": pyside, "PySide6.QtCore": qtcore}
