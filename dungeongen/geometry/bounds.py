"""Axis-aligned bounding boxes in world space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .vector import Vec3


@dataclass(frozen=True)
class AABB:
    """Axis-aligned box stored as its min and max corners."""

    min: Vec3
    max: Vec3

    @classmethod
    def empty_at(cls, point: Vec3) -> AABB:
        """Zero-size box at *point* (what a module without geometry reports)."""
        return cls(min=tuple(point), max=tuple(point))  # type: ignore[arg-type]

    @classmethod
    def from_points(cls, points: Iterable[Vec3]) -> AABB:
        pts = list(points)
        if not pts:
            raise ValueError("AABB.from_points needs at least one point")
        return cls(
            min=(min(p[0] for p in pts), min(p[1] for p in pts), min(p[2] for p in pts)),
            max=(max(p[0] for p in pts), max(p[1] for p in pts), max(p[2] for p in pts)),
        )

    @property
    def size(self) -> Vec3:
        return (
            self.max[0] - self.min[0],
            self.max[1] - self.min[1],
            self.max[2] - self.min[2],
        )

    @property
    def volume(self) -> float:
        sx, sy, sz = self.size
        if sx <= 0 or sy <= 0 or sz <= 0:
            return 0.0
        return sx * sy * sz

    @property
    def is_empty(self) -> bool:
        return self.volume <= 0.0

    def encapsulate(self, other: AABB) -> AABB:
        return AABB(
            min=tuple(min(a, b) for a, b in zip(self.min, other.min)),  # type: ignore[arg-type]
            max=tuple(max(a, b) for a, b in zip(self.max, other.max)),  # type: ignore[arg-type]
        )

    def expand(self, amount: float) -> AABB:
        """Grow every face outward by *amount* (negative shrinks).

        A box shrunk past zero collapses onto its centre rather than
        turning inside out.
        """
        lo: list[float] = []
        hi: list[float] = []
        for a, b in zip(self.min, self.max):
            na, nb = a - amount, b + amount
            if na > nb:
                na = nb = (a + b) / 2
            lo.append(na)
            hi.append(nb)
        return AABB(min=tuple(lo), max=tuple(hi))  # type: ignore[arg-type]

    def intersects(self, other: AABB) -> bool:
        """Closed-interval test: touching faces count as intersecting."""
        return all(
            self.min[i] <= other.max[i] and self.max[i] >= other.min[i]
            for i in range(3)
        )


def boxes_overlap(a: AABB, b: AABB) -> bool:
    """Bounding-volume overlap where a zero-volume box never overlaps."""
    if a.is_empty or b.is_empty:
        return False
    return a.intersects(b)
