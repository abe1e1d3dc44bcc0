"""FIFO of tiles waiting to be rendered.

A tile is in the queue at most once. Its ``dirty`` flag marks membership:
push() sets it, pop() clears it, and nothing else should touch it.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from tiles.store import TileRecord

logger = logging.getLogger(__name__)


class DirtyQueue:
    """Stale tiles in arrival order.

    pop() can block with a timeout; wake() releases blocked callers so the
    render worker notices a stop request without waiting out its idle
    interval.

    Usage:
        queue = DirtyQueue(lock)
        queue.push(tile)          # True, tile.dirty is now True
        queue.push(tile)          # False, already pending
        queue.pop(timeout=1.0)    # tile, tile.dirty is now False
    """

    def __init__(
        self,
        lock: threading.RLock | None = None,
        on_push: Callable[[TileRecord], None] | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            lock: Shared scheduler lock. A private one is created if omitted.
            on_push: Optional callback invoked (outside the lock) for every
                tile that becomes newly dirty.
        """
        self.lock = lock if lock is not None else threading.RLock()
        self._not_empty = threading.Condition(self.lock)
        self._tiles: deque[TileRecord] = deque()
        self._wakeups = 0
        self._on_push = on_push

    def push(self, tile: TileRecord) -> bool:
        """Mark tile stale and append it.

        Returns:
            True if the tile was newly queued, False if already pending.
        """
        with self._not_empty:
            if tile.dirty:
                return False
            tile.dirty = True
            self._tiles.append(tile)
            self._not_empty.notify()
        if self._on_push is not None:
            self._on_push(tile)
        return True

    def pop(self, timeout: float | None = None) -> TileRecord | None:
        """Remove and return the oldest stale tile.

        Args:
            timeout: Seconds to wait for a tile when the queue is empty.
                None or 0 returns immediately.

        Returns:
            The tile (now clean), or None if nothing arrived in time or
            wake() was called.
        """
        with self._not_empty:
            if not self._tiles and timeout:
                wakeups = self._wakeups
                self._not_empty.wait_for(
                    lambda: self._tiles or self._wakeups != wakeups,
                    timeout=timeout,
                )
            if not self._tiles:
                return None
            tile = self._tiles.popleft()
            tile.dirty = False
            return tile

    def wake(self) -> None:
        """Release every caller blocked in pop()."""
        with self._not_empty:
            self._wakeups += 1
            self._not_empty.notify_all()

    def is_pending(self, tile: TileRecord) -> bool:
        with self.lock:
            return tile.dirty

    def snapshot(self) -> list[TileRecord]:
        """Pending tiles in render order."""
        with self.lock:
            return list(self._tiles)

    def __len__(self) -> int:
        with self.lock:
            return len(self._tiles)
