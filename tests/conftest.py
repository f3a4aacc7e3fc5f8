import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"

# Add both src and repo root to path for imports
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def transport():
    from hri_listener.transport.local import LocalTransport

    bus = LocalTransport()
    yield bus
    bus.close()


@pytest.fixture
def listener(transport):
    from hri_listener.core.listener import HRIListener

    hri = HRIListener(transport)
    yield hri
    hri.close()
