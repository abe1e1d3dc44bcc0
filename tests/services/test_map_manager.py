"""Tests for services.map_manager module."""

from __future__ import annotations

import threading
import time
from unittest.mock import MagicMock

import pytest

from domain.models import MapSettings
from services.map_manager import MapManager, MapStartupError
from tiles.store import TileKey

COLOR_ROW = '1\t' + '\t'.join(['10'] * 16)


class FakeRenderer:
    def __init__(self):
        self.rendered = []
        self.event = threading.Event()

    def render(self, tile):
        self.rendered.append(tile)
        self.event.set()


class FlatWorld:
    """Non-empty only for |x|, |z| < radius."""

    def __init__(self, radius=200):
        self.radius = radius

    def height_at(self, x, z):
        return 64 if abs(x) < self.radius and abs(z) < self.radius else 0


class FakePlayer:
    def __init__(self, name):
        self.name = name
        self.messages = []

    def send_message(self, text):
        self.messages.append(text)

    def teleport_to(self, x, y, z, rotation, pitch):
        pass


@pytest.fixture
def settings(tmp_path):
    colors = tmp_path / 'colors.txt'
    colors.write_text(COLOR_ROW + '\n', encoding='utf-8')
    return MapSettings(
        colorset_path=str(colors),
        marker_path=str(tmp_path / 'markers.csv'),
        warps_path=str(tmp_path / 'warps.txt'),
        render_wait_ms=10,
        idle_wait_ms=50,
    )


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def manager(settings, renderer):
    m = MapManager(settings, renderer=renderer, world=FlatWorld())
    yield m
    m.stop()


class TestLifecycle:
    """Tests for start/stop."""

    def test_start_loads_colors_and_runs(self, manager):
        manager.start()
        assert manager.is_running()
        assert manager.colors[1] == ((10, 10, 10, 10),) * 4

        manager.stop()
        assert not manager.is_running()

    def test_missing_colorset_aborts_startup(self, settings, renderer, tmp_path):
        settings = settings.model_copy(update={'colorset_path': str(tmp_path / 'none.txt')})
        manager = MapManager(settings, renderer=renderer, world=FlatWorld())

        with pytest.raises(MapStartupError):
            manager.start()
        assert not manager.is_running()
        assert manager.colors is None

    def test_broken_markers_abort_startup(self, manager, settings):
        with open(settings.marker_path, 'w', encoding='utf-8') as f:
            f.write('broken\n')
        with pytest.raises(MapStartupError):
            manager.start()
        assert not manager.is_running()
        assert manager.colors is None

    def test_context_manager(self, settings, renderer):
        with MapManager(settings, renderer=renderer, world=FlatWorld()) as manager:
            assert manager.is_running()
        assert not manager.is_running()

    def test_stop_when_not_started(self, manager):
        manager.stop()
        assert not manager.is_running()


class TestScheduling:
    """Tests for touch/regenerate and status queries."""

    def test_touch_then_render(self, manager, renderer):
        assert manager.touch(64, 127, 0) is True
        assert manager.stale_count() == 1

        manager.start()
        assert renderer.event.wait(timeout=5.0)
        deadline = time.monotonic() + 5.0
        while manager.recent_update_count() == 0 and time.monotonic() < deadline:
            time.sleep(0.01)

        assert manager.stale_count() == 0
        assert manager.recent_update_count() == 1
        assert manager.recent_updates()[0].tile.key == TileKey(0, 0)

    def test_touch_many(self, manager):
        assert manager.touch_many([(64, 127, 0), (64, 127, 0)]) == 1

    def test_regenerate(self, manager):
        marked = manager.regenerate(64, 127, 0)
        assert marked > 1
        assert manager.stale_count() == marked

    def test_updates_since(self, manager):
        tile = manager.store.get_or_create(0, 0)
        manager.history.record(tile, at=1000)
        manager.history.record(manager.store.get_or_create(128, 0), at=2000)
        assert [r.at for r in manager.updates_since(1500)] == [2000]

    def test_status(self, manager):
        # Projects to (2, 64): own tile plus the left neighbour
        manager.touch(2, 65, 0)
        status = manager.status()
        assert status['stale'] == 2
        assert status['tiles'] == 2
        assert status['recent_updates'] == 0
        assert status['running'] is False
        assert status['renderer_rendered'] == 0

    def test_shared_lock(self, manager):
        assert manager.store.lock is manager.lock
        assert manager.queue.lock is manager.lock
        assert manager.history.lock is manager.lock


class TestDebugChannel:
    """Tests for the debug notification channel."""

    def test_no_debug_player(self, settings, renderer):
        notifier = MagicMock()
        manager = MapManager(settings, renderer=renderer, world=FlatWorld(), notifier=notifier)
        manager.touch(64, 127, 0)
        notifier.send_message.assert_not_called()

    def test_stale_messages(self, settings, renderer):
        notifier = MagicMock()
        settings = settings.model_copy(update={'debug_player': 'op'})
        manager = MapManager(settings, renderer=renderer, world=FlatWorld(), notifier=notifier)
        manager.touch(64, 127, 0)
        notifier.send_message.assert_called_once_with('op', 'Map> MapTile(0,0) is now stale')

    def test_failing_notifier_does_not_break_touch(self, settings, renderer):
        notifier = MagicMock()
        notifier.send_message.side_effect = RuntimeError('player offline')
        settings = settings.model_copy(update={'debug_player': 'op'})
        manager = MapManager(settings, renderer=renderer, world=FlatWorld(), notifier=notifier)
        assert manager.touch(64, 127, 0) is True


class TestMarkersAndWarps:
    def test_marker_roundtrip(self, manager):
        manager.start()
        alice = FakePlayer('Alice')
        assert manager.add_marker(alice, 'home', 1.0, 2.0, 3.0) is True
        assert [m.name for m in manager.list_markers()] == ['home']
        assert manager.remove_marker(alice, 'home') is True
        assert manager.teleport_to_marker(alice, 'home') is False

    def test_load_warps(self, manager, settings):
        with open(settings.warps_path, 'w', encoding='utf-8') as f:
            f.write('spawn:0:64:0:0:0\n')
        assert [w.name for w in manager.load_warps()] == ['spawn']
