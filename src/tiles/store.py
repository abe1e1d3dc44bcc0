"""Registry of map tiles keyed by their aligned projection origin.

This module provides TileKey, TileRecord and TileStore. Records are
created on first reference and kept for the life of the process.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class TileKey(NamedTuple):
    """Aligned projection origin of a tile (hashable lookup key)."""

    tx: int
    ty: int


@dataclass(eq=False)
class TileRecord:
    """State of one map tile.

    ``dirty`` is True exactly while the tile sits in the DirtyQueue. The
    queue owns the flag: read or change it only through DirtyQueue.
    Records compare by identity.
    """

    key: TileKey
    mx: int
    mz: int
    dirty: bool = False
    failures: int = 0
    output: Any = field(default=None, repr=False)

    @property
    def px(self) -> int:
        return self.key.tx

    @property
    def py(self) -> int:
        return self.key.ty

    def __str__(self) -> str:
        return f'MapTile({self.px},{self.py})'


class TileStore:
    """Get-or-create registry of TileRecords.

    All access goes through the lock shared with DirtyQueue and
    UpdateHistory.
    """

    def __init__(
        self,
        column_for: Callable[[int, int], tuple[int, int]],
        lock: threading.RLock | None = None,
    ) -> None:
        """Initialize tile store.

        Args:
            column_for: Callable (px, py) -> (mx, mz) giving the world
                column sampled for a tile, usually
                CoordinateProjector.column_for.
            lock: Shared scheduler lock. A private one is created if omitted.
        """
        self._column_for = column_for
        self.lock = lock if lock is not None else threading.RLock()
        self._tiles: dict[TileKey, TileRecord] = {}

    def get_or_create(self, tx: int, ty: int) -> TileRecord:
        key = TileKey(tx, ty)
        with self.lock:
            tile = self._tiles.get(key)
            if tile is None:
                mx, mz = self._column_for(tx, ty)
                tile = TileRecord(key=key, mx=mx, mz=mz)
                self._tiles[key] = tile
                logger.debug('Created %s', tile)
            return tile

    def get(self, tx: int, ty: int) -> TileRecord | None:
        with self.lock:
            return self._tiles.get(TileKey(tx, ty))

    def __contains__(self, key: object) -> bool:
        with self.lock:
            return key in self._tiles

    def __len__(self) -> int:
        with self.lock:
            return len(self._tiles)

    def tiles(self) -> list[TileRecord]:
        """Snapshot of every known tile."""
        with self.lock:
            return list(self._tiles.values())
