"""Flood-fill regeneration of every reachable non-empty tile."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shared.constants import MIN_COLUMN_HEIGHT

if TYPE_CHECKING:
    from domain.interfaces import WorldHeightSource
    from tiles.dirty_queue import DirtyQueue
    from tiles.projection import CoordinateProjector
    from tiles.store import TileRecord, TileStore

logger = logging.getLogger(__name__)


class RegionWalker:
    """Marks a whole connected region of tiles stale.

    The walk uses an explicit LIFO open set. A tile that is already pending
    is treated as visited and not expanded, so a tile queued for an
    unrelated reason also stops the walk through it. Tiles whose world
    column is empty are pruned before being marked.
    """

    def __init__(
        self,
        projector: CoordinateProjector,
        store: TileStore,
        queue: DirtyQueue,
        world: WorldHeightSource,
        min_height: int = MIN_COLUMN_HEIGHT,
    ) -> None:
        self.projector = projector
        self.store = store
        self.queue = queue
        self.world = world
        self.min_height = min_height

    def _neighbours(self, tile: TileRecord) -> list[TileRecord]:
        w = self.projector.tile_width
        h = self.projector.tile_height
        return [
            self.store.get_or_create(tile.px + w, tile.py),
            self.store.get_or_create(tile.px - w, tile.py),
            self.store.get_or_create(tile.px, tile.py + h),
            self.store.get_or_create(tile.px, tile.py - h),
        ]

    def regenerate(self, x: int, y: int, z: int) -> int:
        """Walk outwards from the tile showing world point (x, y, z).

        Returns:
            Number of tiles newly marked stale.
        """
        tx, ty = self.projector.tile_for(x, y, z)
        open_set = [self.store.get_or_create(tx, ty)]
        marked = 0

        while open_set:
            tile = open_set.pop()
            if self.queue.is_pending(tile):
                continue
            height = self.world.height_at(tile.mx, tile.mz)
            logger.debug('walking: %d, %d, h = %d', tile.mx, tile.mz, height)
            if height < self.min_height:
                continue

            if self.queue.push(tile):
                marked += 1
            open_set.extend(self._neighbours(tile))

        logger.info(
            'Regeneration from (%d, %d, %d) marked %d tile(s) stale',
            x,
            y,
            z,
            marked,
        )
        return marked
