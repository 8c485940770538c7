"""Generator dataclasses — placements, search outcomes and errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dungeongen.geometry.vector import Transform, Vec3


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass(frozen=True)
class Placement:
    """A placed module type with its final world position and orientation."""

    module_id: str
    position: Vec3
    forward: Vec3
    up: Vec3

    @property
    def transform(self) -> Transform:
        return Transform.from_basis(self.position, self.forward, self.up)


# Placements in the order they were committed (usable for staged replay).
Solution = list[Placement]


@dataclass(frozen=True)
class PlacementFit:
    """How a candidate module docks onto a target connector."""

    transform: Transform
    connector_index: int    # the candidate's connector that mates with the target
    mode: int               # 0 = face-to-face, 1 = pass-through


class SearchOutcome(Enum):
    """Terminal state of one level of the backtracking search."""

    BUDGET_REACHED = "budget_reached"   # success
    STARVED = "starved"                 # frontier empty before the budget
    DEAD_END = "dead_end"               # no catalog entry fits the chosen connector
    EXHAUSTED = "exhausted"             # every viable entry was tried and failed deeper

    @property
    def success(self) -> bool:
        return self is SearchOutcome.BUDGET_REACHED


class GenerationError(ValueError):
    """Raised when the generator is called with invalid arguments."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid '{field}': {reason}")
