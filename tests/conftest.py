"""
Shared test fixtures for BubbleGraph tests.

Provides reusable graphs, position vectors and models for testing the
layout energy, spatial blocking and graph builder.
"""

import pytest
from typing import List

from bubblegraph.layout import DatasetRecord, Graph, Link, Model, build_graph


def _quiet_model(**overrides) -> Model:
    params = dict(canvas_size=1.0, canvas_rigidity=2.0, n_blocks=1)
    params.update(overrides)
    return Model(**params)


@pytest.fixture
def make_model():
    """Factory for models with every force switched off unless overridden.

    canvas_size=1 and canvas_rigidity=2 keep the canvas gradient finite at
    the origin even when the canvas weight is 0.
    """
    return _quiet_model


@pytest.fixture
def pair_graph() -> Graph:
    """Two vertices joined by one link, as produced by the builder."""
    return build_graph([DatasetRecord("A", [Link("B")])])


@pytest.fixture
def square_graph() -> Graph:
    """Four vertices in a cycle A-B-C-D-A."""
    return build_graph([
        DatasetRecord("A", [Link("B")]),
        DatasetRecord("B", [Link("C")]),
        DatasetRecord("C", [Link("D")]),
        DatasetRecord("D", [Link("A")]),
    ])


@pytest.fixture
def square_locations() -> List[float]:
    """Distinct, off-origin positions for square_graph."""
    return [0.3, 0.1, 1.2, -0.4, -0.7, 0.9, 2.0, 1.5]


@pytest.fixture
def full_model() -> Model:
    """All three energy terms active, all-pairs repulsion."""
    return Model(
        spring=1.0,
        repulse=1.0,
        repulse_dist=2.0,
        repulse_rigidity=1.0,
        canvas=1.0,
        canvas_size=5.0,
        canvas_rigidity=3.0,
        n_blocks=1,
    )
