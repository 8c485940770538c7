"""Shared tuning constants for the dungeon generator.

Every stage (the overlap oracle, the analytic scene, loop closure and the
connector heuristic) reads its thresholds from a single ``GeneratorRules``
instance, so changing a value here keeps all of them in sync.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path


@dataclass(frozen=True)
class GeneratorRules:
    """Geometric tolerances and heuristic probabilities.

    All distances are in scene units.
    """

    bounds_shrink: float = 0.01
    """Amount every bounding box is shrunk by before intersection tests,
    so modules that merely touch at a shared connector do not collide."""

    penetration_epsilon: float = 1e-4
    """Exact-test penetration depth at or below which two volumes are
    considered to be touching, not overlapping."""

    vertical_tolerance: float = 1e-6
    """How far a module's up axis may deviate from world +Y while the
    exact prism test still applies."""

    loop_height_tolerance: float = 0.05
    """Maximum elevation difference between two connectors of a loop."""

    loop_distance_max: float = 0.6
    """Maximum distance between two connectors of a loop."""

    loop_align_dot_max: float = -0.9
    """Facing vectors of a loop pair must have a dot product at or below
    this value (i.e. point roughly at each other)."""

    depth_first_probability: float = 0.80
    """Chance of resolving the most recently opened connector."""

    random_connector_probability: float = 0.15
    """Chance of resolving a uniformly random connector.  The remainder
    goes to the most-constrained connector."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def most_constrained_threshold(self) -> float:
        """Roll at or above which the most-constrained connector is used."""
        return self.depth_first_probability + self.random_connector_probability


# Module-level singleton, importable everywhere.
GENERATOR_RULES = GeneratorRules()


def rules_from_dict(data: dict, base: GeneratorRules = GENERATOR_RULES) -> GeneratorRules:
    """Return *base* with the fields in *data* overridden.

    Raises ValueError for keys that are not rule fields.
    """
    known = {f.name for f in fields(GeneratorRules)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown generator rule(s): {', '.join(unknown)}")
    return replace(base, **{k: float(v) for k, v in data.items()})


def load_rules(path: Path) -> GeneratorRules:
    """Load rule overrides from a JSON file."""
    return rules_from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
