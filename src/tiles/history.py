"""Time-bounded history of completed tile renders.

External pollers (e.g. a web delta feed) read it to learn which tiles
changed recently.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shared.constants import MAX_TILE_AGE_MS

if TYPE_CHECKING:
    from collections.abc import Callable

    from tiles.store import TileRecord


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class UpdateRecord:
    """A tile render completed at ``at`` (epoch ms)."""

    tile: TileRecord
    at: int


class UpdateHistory:
    """Recent render completions, oldest first.

    Holds at most one record per tile; a newer completion replaces the
    older one. Each insertion evicts records older than ``max_age_ms``
    relative to the insertion time.
    """

    def __init__(
        self,
        lock: threading.RLock | None = None,
        max_age_ms: int = MAX_TILE_AGE_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize history.

        Args:
            lock: Shared scheduler lock. A private one is created if omitted.
            max_age_ms: Retention window in milliseconds.
            clock: Source of epoch-millisecond timestamps.
        """
        self.lock = lock if lock is not None else threading.RLock()
        self.max_age_ms = max_age_ms
        self._clock = clock
        self._records: list[UpdateRecord] = []

    def record(self, tile: TileRecord, at: int | None = None) -> UpdateRecord:
        """Record a completed render of ``tile``.

        Args:
            tile: The rendered tile.
            at: Completion time in epoch ms. Defaults to the clock.

        Returns:
            The new record.
        """
        if at is None:
            at = self._clock()
        deadline = at - self.max_age_ms
        entry = UpdateRecord(tile=tile, at=at)
        with self.lock:
            self._records = [
                r for r in self._records if r.at >= deadline and r.tile is not tile
            ]
            self._records.append(entry)
        return entry

    def entries(self) -> list[UpdateRecord]:
        """Snapshot of all records, oldest first."""
        with self.lock:
            return list(self._records)

    def since(self, timestamp_ms: int) -> list[UpdateRecord]:
        """Records completed strictly after ``timestamp_ms``, oldest first."""
        with self.lock:
            return [r for r in self._records if r.at > timestamp_ms]

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)
