"""
Layout Graph and Energy

A graph is a set of named vertices and directed edges between them. Given a
position vector ``loc`` (interleaved x, y per vertex) and a Model, it
evaluates the layout energy and its analytic gradient for an external
optimizer.

Energy terms:
1. Spring - linear in edge length, pulls connected vertices together
2. Repulsion - softplus of (repulse_dist - distance) over vertex pairs
3. Canvas - power law in distance from the origin, keeps the layout in a disk

Repulsion enumerates all ordered pairs when ``n_blocks <= 1`` and only grid
neighbours (see blocking.py) otherwise. ``cost`` and ``gradient`` always use
the same strategy for a given model.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .blocking import Blocking
from .forces import (
    SuperpositionNudge,
    ieee_div,
    ieee_pow,
    repulse_cost,
    repulse_grad,
    trig_nudge,
)
from .model import Model

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    """A directed edge between two vertex indices."""
    src: int
    trg: int


@dataclass
class CostBreakdown:
    """Layout energy split by term."""
    spring: float = 0.0
    repulsion: float = 0.0
    canvas: float = 0.0

    @property
    def total(self) -> float:
        return self.spring + self.repulsion + self.canvas


class Graph:
    """A graph of ``n`` vertices with a list of directed edges.

    Vertices are registered by name and get dense indices 0..n-1 in
    registration order. Undirected links are stored as two reciprocal
    edges, so their spring energy is counted twice.
    """

    def __init__(self, superposition: Optional[SuperpositionNudge] = None):
        """Create an empty graph.

        Args:
            superposition: Direction used to separate two vertices at the
                same position in the repulsion gradient. Defaults to
                ``trig_nudge``.
        """
        self.n = 0
        self.edges: List[Edge] = []
        self.superposition = superposition or trig_nudge
        self._values: Dict[str, int] = {}
        self._names: List[str] = []

    def __repr__(self) -> str:
        return f"Graph(n={self.n}, edges={len(self.edges)})"

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return (self.n == other.n and self._names == other._names
                and self.edges == other.edges)

    # ==========================================================================
    # Construction
    # ==========================================================================

    def add_vertex(self, name: str) -> int:
        """Add a vertex or look up the index of an existing one."""
        index = self._values.get(name)
        if index is None:
            index = self.n
            self._values[name] = index
            self._names.append(name)
            self.n += 1
        return index

    def add_edge(self, src: int, trg: int) -> Edge:
        """Append a directed edge between two registered vertices."""
        for v in (src, trg):
            if not 0 <= v < self.n:
                raise IndexError(
                    f"Edge endpoint {v} out of range for graph with {self.n} vertices"
                )
        edge = Edge(src, trg)
        self.edges.append(edge)
        return edge

    def add_link(self, src: int, trg: int) -> Tuple[Edge, Edge]:
        """Append an undirected link as two reciprocal directed edges."""
        return self.add_edge(src, trg), self.add_edge(trg, src)

    def index_of(self, name: str) -> int:
        """Get the index of a registered vertex (KeyError if unknown)."""
        return self._values[name]

    def vertex_name(self, index: int) -> str:
        """Get the name a vertex index was registered under."""
        if not 0 <= index < self.n:
            raise IndexError(f"Vertex {index} out of range for graph with {self.n} vertices")
        return self._names[index]

    @property
    def vertex_names(self) -> List[str]:
        """Vertex names in index order."""
        return list(self._names)

    def validate(self):
        """Check that every edge endpoint is a registered vertex.

        ``edges`` is a plain list callers may append to directly, so this
        re-checks the whole list.
        """
        for i, edge in enumerate(self.edges):
            if not (0 <= edge.src < self.n and 0 <= edge.trg < self.n):
                raise IndexError(
                    f"Edge {i} ({edge.src} -> {edge.trg}) out of range "
                    f"for graph with {self.n} vertices"
                )

    def _check_locations(self, loc: Sequence[float]):
        self.validate()
        if len(loc) != self.n * 2:
            raise ValueError(
                f"Expected {self.n * 2} coordinates for {self.n} vertices, got {len(loc)}"
            )

    # ==========================================================================
    # Pair enumeration
    # ==========================================================================

    def _repulsion_pairs(self, loc: Sequence[float], m: Model
                         ) -> Iterator[Tuple[int, int, float, float]]:
        """Yield (v1, v2, x, y) for each ordered pair to repel.

        (x, y) is the offset v1 - v2. With blocking enabled only grid
        neighbours of v1 are visited; a grid is built per call.
        """
        if m.n_blocks > 1:
            blocking = Blocking.create(loc, m.n_blocks)
            if not blocking.covers(m.repulse_dist) and logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Blocking is coarse: block_size=%.4g < repulse_dist=%.4g, "
                    "some close pairs will not repel",
                    blocking.block_size, m.repulse_dist,
                )

            for v1 in range(self.n):
                x1, y1 = loc[v1 * 2], loc[v1 * 2 + 1]
                for v2_id, v2_x, v2_y in blocking.nearby(x1, y1):
                    if v1 != v2_id:
                        yield v1, v2_id, x1 - v2_x, y1 - v2_y
        else:
            for v1 in range(self.n):
                x1, y1 = loc[v1 * 2], loc[v1 * 2 + 1]
                for v2 in range(self.n):
                    if v1 != v2:
                        yield v1, v2, x1 - loc[v2 * 2], y1 - loc[v2 * 2 + 1]

    # ==========================================================================
    # Energy
    # ==========================================================================

    def energy_terms(self, loc: Sequence[float], m: Model) -> CostBreakdown:
        """Evaluate each energy term for locations ``loc``."""
        self._check_locations(loc)
        terms = CostBreakdown()

        for edge in self.edges:
            x = loc[edge.src * 2] - loc[edge.trg * 2]
            y = loc[edge.src * 2 + 1] - loc[edge.trg * 2 + 1]
            terms.spring += m.spring * math.sqrt(x * x + y * y)

        for _v1, _v2, x, y in self._repulsion_pairs(loc, m):
            terms.repulsion += repulse_cost(x, y, m)

        for v1 in range(self.n):
            # Centre attraction
            d = math.sqrt(loc[v1 * 2] * loc[v1 * 2] +
                          loc[v1 * 2 + 1] * loc[v1 * 2 + 1])
            terms.canvas += m.canvas * ieee_pow(ieee_div(d, m.canvas_size),
                                                m.canvas_rigidity)

        return terms

    def cost(self, loc: Sequence[float], m: Model) -> float:
        """Estimate the energy of locations ``loc`` under model ``m``."""
        return self.energy_terms(loc, m).total

    def gradient(self, loc: Sequence[float], m: Model) -> List[float]:
        """Calculate d cost / d loc, laid out like ``loc``."""
        self._check_locations(loc)
        gradient = [0.0] * (self.n * 2)

        for edge in self.edges:
            x = loc[edge.src * 2] - loc[edge.trg * 2]
            y = loc[edge.src * 2 + 1] - loc[edge.trg * 2 + 1]
            d = math.sqrt(x * x + y * y)

            if d > 0.0:
                gradient[edge.src * 2] += m.spring * x / d
                gradient[edge.src * 2 + 1] += m.spring * y / d
                gradient[edge.trg * 2] -= m.spring * x / d
                gradient[edge.trg * 2 + 1] -= m.spring * y / d

        for v1, v2, x, y in self._repulsion_pairs(loc, m):
            repulse_grad(gradient, x, y, v1, v2, m, self.superposition)

        # d/dx c*(d/S)^r = c * S^-r * r * x * d^(r-2); unguarded at d == 0
        scale = m.canvas * ieee_pow(m.canvas_size, -m.canvas_rigidity) * m.canvas_rigidity
        for v1 in range(self.n):
            x, y = loc[v1 * 2], loc[v1 * 2 + 1]
            d_pow = ieee_pow(math.sqrt(x * x + y * y), m.canvas_rigidity - 2.0)
            gradient[v1 * 2] += scale * x * d_pow
            gradient[v1 * 2 + 1] += scale * y * d_pow

        return gradient
