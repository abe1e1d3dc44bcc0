"""Tile invalidation and rendering scheduler.

This module provides:
- CoordinateProjector: isometric projection and floor-aligned tile grid
- TileStore: get-or-create registry of TileRecords
- DirtyQueue: FIFO of stale tiles with at-most-once membership
- RegionInvalidator: point invalidation with edge propagation
- RegionWalker: flood-fill regeneration of non-empty regions
- RenderWorker: throttled background render thread
- UpdateHistory: time-bounded log of completed renders
"""

from tiles.dirty_queue import DirtyQueue
from tiles.history import UpdateHistory, UpdateRecord
from tiles.invalidator import RegionInvalidator
from tiles.projection import CoordinateProjector, align
from tiles.store import TileKey, TileRecord, TileStore
from tiles.walker import RegionWalker
from tiles.worker import RenderWorker

__all__ = [
    'CoordinateProjector',
    'DirtyQueue',
    'RegionInvalidator',
    'RegionWalker',
    'RenderWorker',
    'TileKey',
    'TileRecord',
    'TileStore',
    'UpdateHistory',
    'UpdateRecord',
    'align',
]
