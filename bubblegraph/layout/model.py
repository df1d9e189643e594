"""
Layout Model Parameters

The eight force parameters for one cost/gradient evaluation. A Model is
immutable; callers build a fresh one (or ``replace`` fields) between
optimizer runs.
"""

from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class Model:
    """Parameters of the layout energy.

    No invariants are enforced here. ``canvas_size > 0`` and
    ``n_blocks >= 1`` are the caller's job; violating them gives
    non-finite energies rather than errors.
    """
    # Importance of connected vertices being close
    spring: float = 0.0
    # Importance of vertices not overlapping
    repulse: float = 0.0
    # Minimum distance between two vertex centres
    repulse_dist: float = 0.0
    # Rigidity of vertices (carried, not used by the force terms)
    repulse_rigidity: float = 0.0
    # Importance of all vertices staying inside the canvas disk
    canvas: float = 0.0
    # Radius of the canvas disk
    canvas_size: float = 0.0
    # Rigidity of the canvas boundary (power-law exponent)
    canvas_rigidity: float = 0.0
    # Grid resolution for near-neighbour repulsion; <= 1 means all pairs
    n_blocks: int = 1

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Model":
        """Build a Model from a mapping of field names to numbers."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown model parameters: {unknown}. "
                f"Available: {', '.join(sorted(known))}"
            )

        values: Dict[str, Any] = {}
        for name, raw in data.items():
            try:
                values[name] = int(raw) if name == "n_blocks" else float(raw)
            except (TypeError, ValueError, OverflowError) as e:
                raise ValueError(
                    f"Model parameter '{name}' must be numeric, got {raw!r}"
                ) from e
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def replace(self, **changes: Any) -> "Model":
        """Return a copy with some fields changed."""
        return replace(self, **changes)

    @property
    def uses_blocking(self) -> bool:
        """True when repulsion is restricted to grid neighbours."""
        return self.n_blocks > 1
