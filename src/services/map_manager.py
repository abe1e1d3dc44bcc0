"""Controller facade of the dynamic map.

MapManager wires the tile scheduler together, owns the lock shared by the
tile store, the stale queue and the update history, and exposes the
operations world-change callbacks and commands call into.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from services.color_table import ColorTable, load_color_table
from services.markers import MarkerStore
from services.warps import load_warps
from shared.constants import MESSAGE_PREFIX
from shared.diagnostics import log_comprehensive_diagnostics, log_thread_status
from tiles.dirty_queue import DirtyQueue
from tiles.history import UpdateHistory, UpdateRecord
from tiles.invalidator import RegionInvalidator
from tiles.projection import CoordinateProjector
from tiles.store import TileStore
from tiles.walker import RegionWalker
from tiles.worker import RenderWorker

if TYPE_CHECKING:
    from collections.abc import Iterable

    from domain.interfaces import (
        MarkerPlayer,
        NotificationSink,
        TileRenderer,
        WorldHeightSource,
    )
    from domain.models import MapMarker, MapSettings, Warp
    from tiles.store import TileRecord

logger = logging.getLogger(__name__)


class MapStartupError(RuntimeError):
    """Required map resources could not be loaded; the renderer was not started."""


class MapManager:
    """Keeps the isometric map up to date with the world.

    Usage:
        manager = MapManager(settings, renderer=renderer, world=world)
        manager.start()              # Fails fast, then spawns the renderer
        manager.touch(x, y, z)       # From block-change callbacks
        manager.regenerate(x, y, z)  # Full-region rebuild
        manager.stop()               # Waits for the renderer to exit
    """

    def __init__(
        self,
        settings: MapSettings,
        renderer: TileRenderer,
        world: WorldHeightSource,
        notifier: NotificationSink | None = None,
    ) -> None:
        self.settings = settings
        self.notifier = notifier
        self.lock = threading.RLock()

        self.projector = CoordinateProjector(anchor=settings.anchor)
        self.store = TileStore(self.projector.column_for, lock=self.lock)
        self.queue = DirtyQueue(lock=self.lock, on_push=self._on_stale)
        self.history = UpdateHistory(lock=self.lock, max_age_ms=settings.max_tile_age_ms)
        self.invalidator = RegionInvalidator(
            self.projector,
            self.store,
            self.queue,
            margin=settings.edge_margin,
        )
        self.walker = RegionWalker(self.projector, self.store, self.queue, world)
        self.worker = RenderWorker(
            self.queue,
            self.history,
            renderer,
            render_wait=settings.render_wait_s,
            idle_wait=settings.idle_wait_s,
            max_retries=settings.max_render_retries,
        )
        self.markers = MarkerStore(settings.marker_path)
        self.colors: ColorTable | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Load the color table and markers, then start the renderer.

        Raises:
            MapStartupError: If a required resource cannot be loaded. No
                renderer is running and no state was changed.
        """
        if self.worker.is_running():
            return

        path = self.settings.colorset_path
        try:
            colors = load_color_table(path)
        except (OSError, ValueError) as e:
            logger.exception('Failed to load colorset: %s', path)
            msg = f'Failed to load colorset: {path}'
            raise MapStartupError(msg) from e

        try:
            self.markers.load()
        except (OSError, ValueError) as e:
            logger.exception('Failed to load markers: %s', self.markers.path)
            msg = f'Failed to load markers: {self.markers.path}'
            raise MapStartupError(msg) from e

        self.colors = colors
        self.worker.start()
        log_thread_status('map renderer started')

    def stop(self) -> None:
        """Stop the renderer and wait for its thread to exit."""
        if not self.worker.is_running():
            return
        self.worker.stop()
        log_comprehensive_diagnostics('map renderer stopped', self.status())

    def is_running(self) -> bool:
        return self.worker.is_running()

    def __enter__(self) -> MapManager:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def touch(self, x: int, y: int, z: int) -> bool:
        """A block changed: mark the tiles showing it stale."""
        return self.invalidator.touch(x, y, z)

    def touch_many(self, points: Iterable[tuple[int, int, int]]) -> int:
        return self.invalidator.touch_many(points)

    def regenerate(self, x: int, y: int, z: int) -> int:
        """Mark every reachable non-empty tile around (x, y, z) stale."""
        return self.walker.regenerate(x, y, z)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def stale_count(self) -> int:
        return len(self.queue)

    def recent_update_count(self) -> int:
        return len(self.history)

    def recent_updates(self) -> list[UpdateRecord]:
        return self.history.entries()

    def updates_since(self, timestamp_ms: int) -> list[UpdateRecord]:
        """Renders completed after ``timestamp_ms``, for delta polling."""
        return self.history.since(timestamp_ms)

    def status(self) -> dict[str, Any]:
        return {
            'tiles': len(self.store),
            'stale': self.stale_count(),
            'recent_updates': self.recent_update_count(),
            'running': self.is_running(),
            **{f'renderer_{k}': v for k, v in self.worker.stats.items() if k != 'running'},
        }

    # ------------------------------------------------------------------
    # Markers and warps
    # ------------------------------------------------------------------

    def add_marker(
        self,
        player: MarkerPlayer,
        name: str,
        x: float,
        y: float,
        z: float,
    ) -> bool:
        return self.markers.add(player, name, x, y, z)

    def remove_marker(self, player: MarkerPlayer, name: str) -> bool:
        return self.markers.remove(player, name)

    def teleport_to_marker(self, player: MarkerPlayer, name: str) -> bool:
        return self.markers.teleport(player, name)

    def list_markers(self) -> list[MapMarker]:
        return self.markers.all()

    def load_warps(self) -> list[Warp]:
        return load_warps(self.settings.warps_path)

    # ------------------------------------------------------------------
    # Debug channel
    # ------------------------------------------------------------------

    def debug(self, msg: str) -> None:
        """Send a trace message to the configured debug player, if any."""
        recipient = self.settings.debug_player
        if recipient is None or self.notifier is None:
            return
        try:
            self.notifier.send_message(recipient, MESSAGE_PREFIX + msg)
        except Exception:
            logger.warning('Could not deliver debug message to %s', recipient, exc_info=True)

    def _on_stale(self, tile: TileRecord) -> None:
        self.debug(f'{tile} is now stale')
