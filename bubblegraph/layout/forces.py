"""
Force Kernels

Pure per-pair functions used by the layout energy:
- softplus / sigma: smooth surrogates for max(0, x) and its derivative
- repulsion cost and gradient for one ordered vertex pair
- superposition nudges for two vertices sitting on the same point

All arithmetic follows IEEE-754 semantics. Python raises on float division
by zero and on pow poles where IEEE returns inf/nan, so the few places that
can hit those use ``ieee_div`` / ``ieee_pow`` to keep non-finite results
flowing to the caller instead of exceptions.
"""

import hashlib
import math
from typing import Callable, List, Tuple

from .model import Model

# (v1, v2) -> (dx, dy) in [-1, 1]; scaled by SUPERPOSITION_SCALE when applied
SuperpositionNudge = Callable[[int, int], Tuple[float, float]]

SUPERPOSITION_SCALE = 1e-10


def softplus(x: float) -> float:
    """ln(1 + e^x), evaluated without overflow for large x."""
    if x > 0.0:
        return x + math.log1p(math.exp(-x))
    return math.log1p(math.exp(x))


def sigma(x: float) -> float:
    """Logistic function 1 / (1 + e^-x), the derivative of softplus."""
    if x >= 0.0:
        return 1.0 / (1.0 + math.exp(-x))
    # NaN also lands here and propagates
    e = math.exp(x)
    return e / (1.0 + e)


def ieee_div(a: float, b: float) -> float:
    """Float division returning inf/nan on a zero divisor."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def ieee_pow(base: float, exponent: float) -> float:
    """Float power returning inf/nan where math.pow would raise."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        # Pole at zero or negative base with a fractional exponent
        if base == 0.0 and exponent < 0.0:
            return math.inf
        return math.nan


def trig_nudge(v1: int, v2: int) -> Tuple[float, float]:
    """Tie-breaker direction derived from the two vertex ids.

    Not a physical force. It only separates superposed vertices
    deterministically so the optimizer can make progress.
    """
    return (math.cos(v1), math.sin(v2))


def hashed_nudge(v1: int, v2: int) -> Tuple[float, float]:
    """Tie-breaker direction from an MD5 digest of the ordered pair.

    Antisymmetric like a real force: hashed_nudge(a, b) == -hashed_nudge(b, a),
    so a superposed pair is pushed apart rather than dragged together.
    """
    lo, hi = (v1, v2) if v1 < v2 else (v2, v1)
    h = hashlib.md5(f"{lo}_{hi}".encode()).hexdigest()
    # First 8 hex chars for x, next 8 for y, mapped to [-1, 1]
    x_val = int(h[:8], 16) / 0xFFFFFFFF * 2.0 - 1.0
    y_val = int(h[8:16], 16) / 0xFFFFFFFF * 2.0 - 1.0
    sign = 1.0 if v1 < v2 else -1.0
    return (sign * x_val, sign * y_val)


def repulse_cost(x: float, y: float, m: Model) -> float:
    """Repulsion energy for one ordered pair separated by (x, y)."""
    d = math.sqrt(x * x + y * y)
    return m.repulse * softplus(m.repulse_dist - d)


def repulse_grad(gradient: List[float], x: float, y: float,
                 v1: int, v2: int, m: Model,
                 nudge: SuperpositionNudge = trig_nudge):
    """Accumulate the repulsion gradient of pair (v1, v2) into v1's slots.

    Only v1 is updated: the reverse ordered pair (v2, v1) is visited
    separately and supplies v2's share.
    """
    d = math.sqrt(x * x + y * y)
    s = sigma(m.repulse_dist - d)
    if d > 0.0:
        gradient[v1 * 2] -= m.repulse * 2.0 * x * s / d
        gradient[v1 * 2 + 1] -= m.repulse * 2.0 * y * s / d
    else:
        # Superposition: push in a direction related to the ids
        nx, ny = nudge(v1, v2)
        gradient[v1 * 2] -= m.repulse * 2.0 * s * nx * SUPERPOSITION_SCALE
        gradient[v1 * 2 + 1] -= m.repulse * 2.0 * s * ny * SUPERPOSITION_SCALE
