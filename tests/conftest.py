"""Pytest configuration and fixtures for isomap tests."""

import sys
import threading
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from tiles.dirty_queue import DirtyQueue  # noqa: E402
from tiles.projection import CoordinateProjector  # noqa: E402
from tiles.store import TileStore  # noqa: E402


@pytest.fixture
def lock():
    """Shared scheduler lock."""
    return threading.RLock()


@pytest.fixture
def projector():
    """Projector with the default anchor (0, 127, 0) and 128px tiles."""
    return CoordinateProjector()


@pytest.fixture
def store(projector, lock):
    return TileStore(projector.column_for, lock=lock)


@pytest.fixture
def queue(lock):
    return DirtyQueue(lock=lock)
