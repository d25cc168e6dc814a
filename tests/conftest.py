import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from treasure_hunt.geometry import Dimension  # noqa: E402
from treasure_hunt.models import World  # noqa: E402


@pytest.fixture
def empty_world() -> World:
    return World(dimension=Dimension(5, 4))


@pytest.fixture
def sample_lines():
    return [
        "C - 5 - 4",
        "M - 1 - 1",
        "T - 2 - 2 - 2",
        "A - Lara - 3 - 3 - E - AADADAGGA",
    ]
