"""Tests for tiles.walker module."""

from unittest.mock import MagicMock

from tiles.store import TileKey
from tiles.walker import RegionWalker


class ColumnWorld:
    """World whose only non-empty columns are those under given tiles."""

    def __init__(self, projector, tiles, height=64):
        self.columns = {projector.column_for(tx, ty) for tx, ty in tiles}
        self.height = height
        self.calls = []

    def height_at(self, x, z):
        self.calls.append((x, z))
        return self.height if (x, z) in self.columns else 0


# World point (64, 127, 0) projects to (64, 64), inside tile (0, 0)
START = (64, 127, 0)


def pending_keys(queue):
    return {tile.key for tile in queue.snapshot()}


class TestRegionWalker:
    """Tests for flood-fill regeneration."""

    def test_empty_world_dirties_nothing(self, projector, store, queue):
        """Pruning happens before marking: not even the start tile."""
        world = MagicMock()
        world.height_at.return_value = 0
        walker = RegionWalker(projector, store, queue, world)

        assert walker.regenerate(*START) == 0
        assert len(queue) == 0
        world.height_at.assert_called_once()

    def test_walks_connected_region(self, projector, store, queue):
        region = [(0, 0), (128, 0), (256, 0), (256, 128)]
        world = ColumnWorld(projector, region + [(1024, 1024)])
        walker = RegionWalker(projector, store, queue, world)

        assert walker.regenerate(*START) == 4
        assert pending_keys(queue) == {TileKey(*k) for k in region}

    def test_start_tile_queued_first(self, projector, store, queue):
        world = ColumnWorld(projector, [(0, 0), (0, 128)])
        RegionWalker(projector, store, queue, world).regenerate(*START)
        assert queue.snapshot()[0].key == TileKey(0, 0)

    def test_pending_tile_blocks_expansion(self, projector, store, queue):
        """An already queued tile counts as visited and is not expanded."""
        world = ColumnWorld(projector, [(0, 0), (128, 0), (256, 0)])
        queue.push(store.get_or_create(128, 0))
        walker = RegionWalker(projector, store, queue, world)

        assert walker.regenerate(*START) == 1
        assert pending_keys(queue) == {TileKey(0, 0), TileKey(128, 0)}

    def test_already_pending_start(self, projector, store, queue):
        world = MagicMock()
        queue.push(store.get_or_create(0, 0))
        walker = RegionWalker(projector, store, queue, world)

        assert walker.regenerate(*START) == 0
        world.height_at.assert_not_called()

    def test_queries_tile_column(self, projector, store, queue):
        world = ColumnWorld(projector, [])
        RegionWalker(projector, store, queue, world).regenerate(*START)
        assert world.calls == [projector.column_for(0, 0)]

    def test_min_height(self, projector, store, queue):
        world = ColumnWorld(projector, [(0, 0)], height=1)
        walker = RegionWalker(projector, store, queue, world, min_height=2)
        assert walker.regenerate(*START) == 0

    def test_large_region_no_recursion_limit(self, projector, store, queue):
        """A long strip is walked iteratively."""
        strip = [(i * 128, 0) for i in range(2000)]
        world = ColumnWorld(projector, strip)
        walker = RegionWalker(projector, store, queue, world)
        assert walker.regenerate(*START) == 2000
