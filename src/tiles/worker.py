"""Background render thread for stale tiles.

This module provides RenderWorker, which drains the DirtyQueue one tile at
a time, calls the external renderer, and records each completion in the
UpdateHistory.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from shared.constants import (
    IDLE_WAIT_MS,
    MAX_RENDER_RETRIES,
    RENDER_THREAD_NAME,
    RENDER_WAIT_MS,
)

if TYPE_CHECKING:
    from domain.interfaces import TileRenderer
    from tiles.dirty_queue import DirtyQueue
    from tiles.history import UpdateHistory
    from tiles.store import TileRecord

logger = logging.getLogger(__name__)


class RenderWorker:
    """Single background loop that renders stale tiles.

    Each iteration pops one tile, renders it outside the scheduler lock,
    records the completion and then waits ``render_wait`` seconds to
    throttle load. With nothing to do it blocks on the queue for up to
    ``idle_wait`` seconds.

    Stopping is cooperative: stop() sets an event and wakes the queue, so
    the thread exits right after the render in progress (if any). There is
    no mid-render cancellation; a hanging renderer blocks stop().

    Failed renders are re-queued at the tail until they have failed more
    than ``max_retries`` times, then dropped.

    Usage:
        worker = RenderWorker(queue, history, renderer)
        worker.start()
        ...
        worker.stop()  # Waits for the thread to exit
    """

    def __init__(
        self,
        queue: DirtyQueue,
        history: UpdateHistory,
        renderer: TileRenderer,
        render_wait: float = RENDER_WAIT_MS / 1000.0,
        idle_wait: float = IDLE_WAIT_MS / 1000.0,
        max_retries: int = MAX_RENDER_RETRIES,
    ) -> None:
        """Initialize render worker.

        Args:
            queue: Queue of stale tiles to drain.
            history: History receiving completed renders.
            renderer: External render operation.
            render_wait: Pause after each render, seconds.
            idle_wait: Longest wait on an empty queue, seconds.
            max_retries: Re-queues allowed for a tile whose render fails.
        """
        self.queue = queue
        self.history = history
        self.renderer = renderer
        self.render_wait = render_wait
        self.idle_wait = idle_wait
        self.max_retries = max_retries
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._stats_rendered = 0
        self._stats_failed = 0
        self._stats_dropped = 0

    def start(self) -> None:
        """Start the background render thread."""
        if self.is_running():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._render_loop,
            name=RENDER_THREAD_NAME,
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Ask the thread to exit and wait for it.

        Args:
            timeout: Maximum time to wait. None waits until the thread has
                exited.
        """
        if self._thread is None:
            return
        logger.info('Stopping map renderer...')
        self._stop_event.set()
        self.queue.wake()

        if self._thread.is_alive():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning('Map renderer did not stop within %.1fs', timeout)
                return
        self._thread = None

    def is_running(self) -> bool:
        """Check if the render thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def stats(self) -> dict:
        """Get worker statistics."""
        return {
            'rendered': self._stats_rendered,
            'failed': self._stats_failed,
            'dropped': self._stats_dropped,
            'running': self.is_running(),
        }

    def run_once(self, timeout: float | None = None) -> TileRecord | None:
        """Pop and render a single tile.

        Returns:
            The tile that was taken from the queue, or None if it was empty.
        """
        tile = self.queue.pop(timeout=timeout)
        if tile is None:
            return None
        try:
            self.renderer.render(tile)
        except Exception:
            logger.exception('Failed to render %s', tile)
            self._handle_failure(tile)
        else:
            tile.failures = 0
            self.history.record(tile)
            self._stats_rendered += 1
        return tile

    def _handle_failure(self, tile: TileRecord) -> None:
        self._stats_failed += 1
        tile.failures += 1
        if tile.failures > self.max_retries:
            logger.error(
                'Giving up on %s after %d failed render(s)',
                tile,
                tile.failures,
            )
            tile.failures = 0
            self._stats_dropped += 1
            return
        self.queue.push(tile)

    def _render_loop(self) -> None:
        logger.info('Map renderer has started.')
        while not self._stop_event.is_set():
            tile = self.run_once(timeout=self.idle_wait)
            if tile is not None:
                self._stop_event.wait(self.render_wait)
        logger.info(
            'Map renderer has stopped: %d rendered, %d failed, %d dropped',
            self._stats_rendered,
            self._stats_failed,
            self._stats_dropped,
        )

    def __enter__(self) -> RenderWorker:
        """Context manager entry - starts the worker."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - stops the worker."""
        self.stop()
