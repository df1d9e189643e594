"""
BubbleGraph - Force-Directed Graph Layout Energy

Computes the energy of a 2D graph layout (edge springs, soft pairwise
repulsion and a confining canvas) and its analytic gradient, for use by an
external gradient-based optimizer.
"""

__version__ = "0.1.0"
__author__ = "BubbleGraph Team"

from .layout import (
    Model,
    Graph,
    Edge,
    CostBreakdown,
    Blocking,
    build_graph,
    DatasetRecord,
    Link,
    check_gradient,
)
from .profiles import get_profile, list_profiles, load_model

__all__ = [
    "Model",
    "Graph",
    "Edge",
    "CostBreakdown",
    "Blocking",
    "build_graph",
    "DatasetRecord",
    "Link",
    "check_gradient",
    "get_profile",
    "list_profiles",
    "load_model",
]
