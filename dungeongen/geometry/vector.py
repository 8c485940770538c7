"""
Pure-Python 3D vector and rotation utilities.

Coordinates follow the usual level-editor convention: Y is up, a module's
local +Z is its forward axis and local +X is its right axis.  Rotations are
3×3 matrices stored row-major as nested tuples; their columns are the
rotated right, up and forward axes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

Vec3 = tuple[float, float, float]
Mat3 = tuple[Vec3, Vec3, Vec3]

WORLD_UP: Vec3 = (0.0, 1.0, 0.0)
WORLD_FORWARD: Vec3 = (0.0, 0.0, 1.0)
IDENTITY_ROTATION: Mat3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


# ── vector primitives ──────────────────────────────────────────────


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(a: Vec3, k: float) -> Vec3:
    return (a[0] * k, a[1] * k, a[2] * k)


def neg(a: Vec3) -> Vec3:
    return (-a[0], -a[1], -a[2])


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(a: Vec3) -> float:
    return math.sqrt(dot(a, a))


def distance(a: Vec3, b: Vec3) -> float:
    return length(sub(a, b))


def normalize(a: Vec3) -> Vec3:
    """Unit vector along *a*.  Raises ValueError for the zero vector."""
    n = length(a)
    if n < 1e-12:
        raise ValueError("Cannot normalize a zero-length vector")
    return (a[0] / n, a[1] / n, a[2] / n)


def is_close(a: Vec3, b: Vec3, tol: float = 1e-6) -> bool:
    return all(abs(x - y) <= tol for x, y in zip(a, b))


# ── rotations ──────────────────────────────────────────────────────


def look_rotation(forward: Vec3, up: Vec3 = WORLD_UP) -> Mat3:
    """Rotation whose forward (+Z) column points along *forward*.

    *up* only has to be roughly orthogonal; it is re-orthogonalised
    against *forward*.  When the two are parallel an arbitrary
    perpendicular up is chosen, so the result is always a valid
    rotation.
    """
    f = normalize(forward)
    r = cross(up, f)
    if length(r) < 1e-9:
        # up ∥ forward: pick whichever world axis is least aligned
        fallback = WORLD_FORWARD if abs(f[1]) > 0.9 else WORLD_UP
        r = cross(fallback, f)
    r = normalize(r)
    u = cross(f, r)
    return (
        (r[0], u[0], f[0]),
        (r[1], u[1], f[1]),
        (r[2], u[2], f[2]),
    )


def mat_mul(a: Mat3, b: Mat3) -> Mat3:
    return tuple(
        tuple(sum(a[i][k] * b[k][j] for k in range(3)) for j in range(3))
        for i in range(3)
    )  # type: ignore[return-value]


def transpose(m: Mat3) -> Mat3:
    """Transpose, which is also the inverse for a rotation matrix."""
    return (
        (m[0][0], m[1][0], m[2][0]),
        (m[0][1], m[1][1], m[2][1]),
        (m[0][2], m[1][2], m[2][2]),
    )


def rotate(m: Mat3, v: Vec3) -> Vec3:
    return (
        m[0][0] * v[0] + m[0][1] * v[1] + m[0][2] * v[2],
        m[1][0] * v[0] + m[1][1] * v[1] + m[1][2] * v[2],
        m[2][0] * v[0] + m[2][1] * v[1] + m[2][2] * v[2],
    )


def column(m: Mat3, index: int) -> Vec3:
    return (m[0][index], m[1][index], m[2][index])


# ── rigid transforms ───────────────────────────────────────────────


@dataclass(frozen=True)
class Transform:
    """Position + rotation of a module instance in world space."""

    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Mat3 = IDENTITY_ROTATION

    @classmethod
    def from_basis(cls, position: Vec3, forward: Vec3, up: Vec3) -> Transform:
        return cls(position=tuple(position), rotation=look_rotation(forward, up))  # type: ignore[arg-type]

    @property
    def forward(self) -> Vec3:
        return column(self.rotation, 2)

    @property
    def up(self) -> Vec3:
        return column(self.rotation, 1)

    @property
    def right(self) -> Vec3:
        return column(self.rotation, 0)

    def apply_point(self, p: Vec3) -> Vec3:
        return add(self.position, rotate(self.rotation, p))

    def apply_direction(self, d: Vec3) -> Vec3:
        return rotate(self.rotation, d)

    def about(self, pivot: Vec3, delta: Mat3, target: Vec3) -> Transform:
        """Rotate by *delta* around *pivot*, then move *pivot* onto *target*."""
        offset = rotate(delta, sub(self.position, pivot))
        return Transform(
            position=add(target, offset),
            rotation=mat_mul(delta, self.rotation),
        )


IDENTITY = Transform()
