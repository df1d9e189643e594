"""
Tests for the uniform spatial grid used by blocked repulsion.
"""

import math

import pytest

from bubblegraph.layout import Blocking


def _ids(entries):
    return sorted(entry[0] for entry in entries)


class TestCreate:
    """Tests for grid construction."""

    def test_extent_and_block_size(self):
        grid = Blocking.create([1.0, -2.0, 3.0, 0.5], 3)

        assert grid.max == pytest.approx(3.03)
        assert grid.block_size == pytest.approx(2.02)
        assert len(grid.blocks) == 3
        assert all(len(row) == 3 for row in grid.blocks)

    def test_every_finite_vertex_is_binned_once(self):
        loc = [0.0, 0.0, 1.0, 1.0, -4.0, 2.5, 3.9, -3.9]
        grid = Blocking.create(loc, 4)

        stats = grid.stats()
        assert stats["total_entries"] == 4
        entries = [e for row in grid.blocks for cell in row for e in cell]
        assert _ids(entries) == [0, 1, 2, 3]

    def test_entries_carry_positions(self):
        grid = Blocking.create([1.5, -0.5], 2)
        entries = [e for row in grid.blocks for cell in row for e in cell]
        assert entries == [(0, 1.5, -0.5)]

    def test_non_finite_positions_are_skipped(self):
        loc = [math.nan, 0.0, 1.0, 1.0, 2.0, math.inf, -1e308 * 10, 0.0]
        grid = Blocking.create(loc, 4)

        entries = [e for row in grid.blocks for cell in row for e in cell]
        assert _ids(entries) == [1]

    def test_non_finite_coordinates_do_not_set_extent(self):
        grid = Blocking.create([math.inf, 0.0, 2.0, 2.0], 2)
        assert grid.max == pytest.approx(2.02)

    def test_all_points_at_origin(self):
        """Test that a zero extent puts every vertex in the first cell."""
        grid = Blocking.create([0.0, 0.0, 0.0, 0.0], 3)

        assert grid.block_size == 0.0
        assert _ids(grid.blocks[0][0]) == [0, 1]
        assert _ids(grid.nearby(0.0, 0.0)) == [0, 1]

    def test_invalid_block_count(self):
        with pytest.raises(ValueError):
            Blocking.create([1.0, 1.0], 0)


class TestNearby:
    """Tests for neighbourhood queries."""

    @pytest.fixture
    def grid(self) -> Blocking:
        # 4x4 grid over [-4.04, 4.04]^2, block_size 2.02
        loc = [
            -3.5, -3.5,  # 0: cell (0, 0)
            -1.5, -1.5,  # 1: cell (1, 1)
            0.5, 0.5,    # 2: cell (2, 2)
            3.5, 3.5,    # 3: cell (3, 3)
            -3.5, 3.5,   # 4: cell (0, 3)
            4.0, -4.0,   # 5: cell (3, 0)
        ]
        return Blocking.create(loc, 4)

    def test_includes_own_cell_and_neighbours(self, grid):
        assert _ids(grid.nearby(-1.5, -1.5)) == [0, 1, 2]

    def test_corner_has_fewer_neighbours(self, grid):
        assert _ids(grid.nearby(-3.5, -3.5)) == [0, 1]
        assert _ids(grid.nearby(3.5, 3.5)) == [2, 3]

    def test_far_cells_are_excluded(self, grid):
        ids = _ids(grid.nearby(-3.5, 3.5))
        assert ids == [4]

    def test_own_cell_first(self, grid):
        entries = grid.nearby(0.5, 0.5)
        assert entries[0][0] == 2

    def test_non_finite_query_is_empty(self, grid):
        assert grid.nearby(math.nan, 0.0) == []
        assert grid.nearby(0.0, math.inf) == []

    def test_results_are_copies(self, grid):
        entries = grid.nearby(-3.5, -3.5)
        entries.clear()
        assert _ids(grid.nearby(-3.5, -3.5)) == [0, 1]

    def test_query_outside_extent_is_clamped(self, grid):
        assert _ids(grid.nearby(100.0, 100.0)) == [2, 3]


class TestCoverage:
    """Tests for the exactness check."""

    def test_covers(self):
        grid = Blocking.create([10.0, 0.0, -10.0, 0.0], 10)

        assert grid.covers(2.0)
        assert not grid.covers(5.0)

    def test_stats_on_empty_grid(self):
        stats = Blocking.create([], 3).stats()
        assert stats["total_entries"] == 0
        assert stats["occupied_cells"] == 0
        assert stats["max_entries_per_cell"] == 0
