"""
Graph Builder

Turns dataset records into a layout Graph. Each record exposes an
``identifier`` and a sequence of ``links``, each link exposing a ``target``
identifier. Any objects with those attributes work; ``DatasetRecord`` and
``Link`` are provided for callers without their own record types.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Union

from .graph import Graph

logger = logging.getLogger(__name__)


@dataclass
class Link:
    """An outbound link from one record to another."""
    target: str


@dataclass
class DatasetRecord:
    """A dataset entry with its outbound links."""
    identifier: str
    links: List[Link] = field(default_factory=list)


def build_graph(data: Union[Mapping[Any, Any], Iterable[Any]]) -> Graph:
    """Build the graph from a dataset.

    Records without links never become vertices. Every link adds two
    directed edges (record -> target and target -> record).

    Args:
        data: Mapping of key -> record (values are used, in the mapping's
            iteration order) or an iterable of records. Vertex indices
            follow this order, so pass an ordered sequence when the layout
            must be reproducible.

    Returns:
        Graph with one vertex per linked identifier
    """
    records = data.values() if isinstance(data, Mapping) else data

    g = Graph()
    skipped = 0
    for record in records:
        if not record.links:
            skipped += 1
            continue
        v1 = g.add_vertex(record.identifier)
        for link in record.links:
            v2 = g.add_vertex(link.target)
            g.add_link(v1, v2)

    logger.info(
        "Built graph: %d vertices, %d edges (%d records without links)",
        g.n, len(g.edges), skipped,
    )
    return g
