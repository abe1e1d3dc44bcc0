"""Isometric projection of world coordinates onto the tile grid."""

from __future__ import annotations

from shared.constants import (
    ANCHOR_X,
    ANCHOR_Y,
    ANCHOR_Z,
    TILE_HEIGHT,
    TILE_WIDTH,
)
from tiles.store import TileKey


def align(value: int, size: int) -> int:
    """Return the largest multiple of ``size`` that is <= ``value``.

    Floor alignment keeps the grid gapless for negative coordinates:
    -4 -> -128 and -128 -> -128 for size 128.
    """
    return (value // size) * size


class CoordinateProjector:
    """Maps world coordinates to projection and tile-aligned coordinates.

    Usage:
        projector = CoordinateProjector()
        px, py = projector.project(10, 64, -3)
        key = projector.tile_for(10, 64, -3)
    """

    def __init__(
        self,
        anchor: tuple[int, int, int] = (ANCHOR_X, ANCHOR_Y, ANCHOR_Z),
        tile_width: int = TILE_WIDTH,
        tile_height: int = TILE_HEIGHT,
    ) -> None:
        self.anchor_x, self.anchor_y, self.anchor_z = anchor
        self.tile_width = tile_width
        self.tile_height = tile_height

    def project(self, x: int, y: int, z: int) -> tuple[int, int]:
        """Project a world point relative to the anchor."""
        dx = x - self.anchor_x
        dy = y - self.anchor_y
        dz = z - self.anchor_z
        return dx + dz, dx - dz - dy

    def align_x(self, px: int) -> int:
        return align(px, self.tile_width)

    def align_y(self, py: int) -> int:
        return align(py, self.tile_height)

    def tile_key(self, px: int, py: int) -> TileKey:
        """Key of the tile containing projection point (px, py)."""
        return TileKey(self.align_x(px), self.align_y(py))

    def tile_for(self, x: int, y: int, z: int) -> TileKey:
        """Key of the tile containing world point (x, y, z)."""
        return self.tile_key(*self.project(x, y, z))

    def column_for(self, px: int, py: int) -> tuple[int, int]:
        """World column (x, z) under the centre of the tile at (px, py).

        Inverse of project() taken at anchor height (dy = 0).
        """
        cx = px + self.tile_width // 2
        cy = py + self.tile_height // 2
        return (
            self.anchor_x + (cx + cy) // 2,
            self.anchor_z + (cx - cy) // 2,
        )
