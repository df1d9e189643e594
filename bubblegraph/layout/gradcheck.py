"""Compare the analytic layout gradient against central differences.

Diagnostic helper for checking that ``Graph.gradient`` matches
``Graph.cost``. Each coordinate is perturbed by ``±h`` and the relative
error uses ``max(1, |numeric|, |analytic|)`` as denominator so that tiny
components are compared absolutely.
"""

from dataclasses import dataclass
from typing import List, Sequence

from .graph import Graph
from .model import Model


@dataclass
class GradientCheck:
    """Result of a finite-difference gradient comparison."""
    analytic: List[float]
    numeric: List[float]
    max_error: float
    worst_index: int

    def ok(self, tol: float = 1e-4) -> bool:
        return self.max_error < tol


def numeric_gradient(graph: Graph, loc: Sequence[float], m: Model,
                     h: float = 1e-6) -> List[float]:
    """Central-difference estimate of d cost / d loc."""
    work = list(loc)
    numeric = []
    for k in range(len(work)):
        orig = work[k]
        work[k] = orig + h
        cost_plus = graph.cost(work, m)
        work[k] = orig - h
        cost_minus = graph.cost(work, m)
        work[k] = orig
        numeric.append((cost_plus - cost_minus) / (2 * h))
    return numeric


def check_gradient(graph: Graph, loc: Sequence[float], m: Model,
                   h: float = 1e-6) -> GradientCheck:
    """Return the maximum relative error between analytic and numeric gradients."""
    analytic = graph.gradient(loc, m)
    numeric = numeric_gradient(graph, loc, m, h)

    max_err = 0.0
    worst = -1
    for k, (g_ana, g_num) in enumerate(zip(analytic, numeric)):
        denom = max(1.0, abs(g_num), abs(g_ana))
        err = abs(g_ana - g_num) / denom
        if err > max_err:
            max_err = err
            worst = k
    return GradientCheck(analytic, numeric, max_err, worst)
