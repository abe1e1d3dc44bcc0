"""Point invalidation ("touch") with propagation across tile edges.

Rendering a tile samples a few projection units beyond its border for
shading, so a change close to an edge also makes the neighbouring tile
stale.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shared.constants import EDGE_MARGIN

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tiles.dirty_queue import DirtyQueue
    from tiles.projection import CoordinateProjector
    from tiles.store import TileKey, TileStore

logger = logging.getLogger(__name__)


class RegionInvalidator:
    """Marks the tiles affected by a changed world block as stale."""

    def __init__(
        self,
        projector: CoordinateProjector,
        store: TileStore,
        queue: DirtyQueue,
        margin: int = EDGE_MARGIN,
    ) -> None:
        self.projector = projector
        self.store = store
        self.queue = queue
        self.margin = margin

    def affected_tiles(self, x: int, y: int, z: int) -> list[TileKey]:
        """Keys of every tile a change at (x, y, z) makes stale.

        The own tile comes first, then edge neighbours (left, right, top,
        bottom), then diagonals. Between 1 and 9 keys.
        """
        p = self.projector
        px, py = p.project(x, y, z)
        tx, ty = p.align_x(px), p.align_y(py)
        w, h = p.tile_width, p.tile_height

        left = p.align_x(px - self.margin) != tx
        right = p.align_x(px + self.margin) != tx
        top = p.align_y(py - self.margin) != ty
        bottom = p.align_y(py + self.margin) != ty

        keys = [p.tile_key(tx, ty)]
        if left:
            keys.append(p.tile_key(tx - w, ty))
        if right:
            keys.append(p.tile_key(tx + w, ty))
        if top:
            keys.append(p.tile_key(tx, ty - h))
        if bottom:
            keys.append(p.tile_key(tx, ty + h))

        if left and top:
            keys.append(p.tile_key(tx - w, ty - h))
        if left and bottom:
            keys.append(p.tile_key(tx - w, ty + h))
        if right and top:
            keys.append(p.tile_key(tx + w, ty - h))
        if right and bottom:
            keys.append(p.tile_key(tx + w, ty + h))
        return keys

    def touch(self, x: int, y: int, z: int) -> bool:
        """Invalidate the tiles showing world block (x, y, z).

        Returns:
            True if at least one tile became newly stale.
        """
        changed = False
        for tx, ty in self.affected_tiles(x, y, z):
            changed = self.queue.push(self.store.get_or_create(tx, ty)) or changed
        return changed

    def touch_many(self, points: Iterable[tuple[int, int, int]]) -> int:
        """Touch every point; returns how many touches dirtied something."""
        count = 0
        for x, y, z in points:
            if self.touch(x, y, z):
                count += 1
        logger.debug('Touched batch: %d point(s) produced new stale tiles', count)
        return count
