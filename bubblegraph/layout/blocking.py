"""Uniform spatial grid for approximate near-neighbour repulsion.

Instead of checking all N*(N-1) ordered vertex pairs (O(N²)), vertices are
binned into an ``n_blocks x n_blocks`` grid over the square
``[-max, max]²`` and only pairs in the same or adjacent cells are checked.

The grid is rebuilt from scratch on every evaluation: positions move every
optimizer step, so nothing here is cached between calls.

Approximation: two vertices closer than ``repulse_dist`` can land in
non-adjacent cells whenever ``repulse_dist > block_size`` and their
repulsion is then missed. Pick ``n_blocks`` so that
``block_size >= repulse_dist`` when exactness matters.
"""

import logging
import math
from typing import Dict, List, Sequence, Tuple

from .forces import ieee_div

logger = logging.getLogger(__name__)

# (vertex_id, x, y)
BlockEntry = Tuple[int, float, float]

# Keeps the extreme coordinate off the outer cell boundary
MARGIN = 1.01


class Blocking:
    """Grid of vertex buckets built from one position vector."""

    def __init__(self, blocks: List[List[List[BlockEntry]]], block_size: float,
                 max_coord: float, n_blocks: int):
        self.blocks = blocks
        self.block_size = block_size
        self.max = max_coord
        self.n_blocks = n_blocks

    @classmethod
    def create(cls, xs: Sequence[float], n_blocks: int) -> "Blocking":
        """Bucket every finite position of ``xs`` (interleaved x, y).

        Positions with a non-finite coordinate are skipped entirely: they are
        never binned and never returned by ``nearby``.
        """
        if n_blocks < 1:
            raise ValueError(f"n_blocks must be >= 1, got {n_blocks}")

        blocks: List[List[List[BlockEntry]]] = [
            [[] for _ in range(n_blocks)] for _ in range(n_blocks)
        ]

        max_coord = 0.0
        for x in xs:
            if math.isfinite(x) and abs(x) > max_coord:
                max_coord = abs(x)
        max_coord *= MARGIN
        block_size = max_coord * 2.0 / n_blocks

        grid = cls(blocks, block_size, max_coord, n_blocks)

        skipped = 0
        for i in range(len(xs) // 2):
            x, y = xs[i * 2], xs[i * 2 + 1]
            if math.isfinite(x) and math.isfinite(y):
                blocks[grid._cell_index(x)][grid._cell_index(y)].append((i, x, y))
            else:
                skipped += 1

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built %dx%d blocking: block_size=%.4g skipped=%d %s",
                n_blocks, n_blocks, block_size, skipped, grid.stats(),
            )
        return grid

    def _cell_index(self, coord: float) -> int:
        """Map one coordinate to its row/column on the grid."""
        q = ieee_div(coord + self.max, self.block_size)
        if math.isnan(q):
            # All positions at the origin: block_size is 0
            return 0
        if math.isinf(q):
            return 0 if q < 0 else self.n_blocks - 1
        return min(max(int(math.floor(q)), 0), self.n_blocks - 1)

    def nearby(self, x: float, y: float) -> List[BlockEntry]:
        """Get entries in the cell of (x, y) and its up to 8 neighbours.

        Returns a fresh list, so callers may keep or mutate it. A non-finite
        query point has no cell and gets an empty list.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            return []

        x_id = self._cell_index(x)
        y_id = self._cell_index(y)

        elems = list(self.blocks[x_id][y_id])
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                cx, cy = x_id + dx, y_id + dy
                if 0 <= cx < self.n_blocks and 0 <= cy < self.n_blocks:
                    elems.extend(self.blocks[cx][cy])
        return elems

    def covers(self, repulse_dist: float) -> bool:
        """Check whether no pair within ``repulse_dist`` can be missed."""
        return self.block_size >= repulse_dist

    def stats(self) -> Dict:
        """Get grid occupancy statistics for debugging."""
        cell_counts = [len(cell) for row in self.blocks for cell in row if cell]
        return {
            "n_blocks": self.n_blocks,
            "block_size": self.block_size,
            "total_entries": sum(cell_counts),
            "occupied_cells": len(cell_counts),
            "avg_entries_per_cell": sum(cell_counts) / max(len(cell_counts), 1),
            "max_entries_per_cell": max(cell_counts) if cell_counts else 0,
        }
