"""Layout energy: graph, force kernels and spatial blocking."""

from .model import Model
from .graph import Graph, Edge, CostBreakdown
from .blocking import Blocking
from .builder import build_graph, DatasetRecord, Link
from .forces import softplus, sigma, trig_nudge, hashed_nudge
from .gradcheck import check_gradient, GradientCheck

__all__ = [
    "Model",
    "Graph",
    "Edge",
    "CostBreakdown",
    "Blocking",
    "build_graph",
    "DatasetRecord",
    "Link",
    "softplus",
    "sigma",
    "trig_nudge",
    "hashed_nudge",
    "check_gradient",
    "GradientCheck",
]
