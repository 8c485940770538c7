"""Geometry adapter contract between the generator and a host scene.

The search never touches meshes or physics directly; it only calls the
operations below.  Any backend (a game-engine bridge, or the pure
``AnalyticScene`` used by the CLI and the tests) can drive the generator
as long as it implements them synchronously: a destroyed instance must
be gone before the very next call returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from dungeongen.catalog.models import ModuleType
from dungeongen.geometry.bounds import AABB
from dungeongen.geometry.vector import Transform, Vec3


Handle = int


class SceneError(Exception):
    """Raised when a scene operation is given an invalid module or handle."""

    def __init__(self, handle: Handle | None, reason: str) -> None:
        self.handle = handle
        self.reason = reason
        where = f"instance {handle}" if handle is not None else "scene"
        super().__init__(f"{where}: {reason}")


@dataclass(frozen=True)
class ConnectorPose:
    """A connector's world-space position and orientation."""

    position: Vec3
    forward: Vec3
    up: Vec3


@runtime_checkable
class GeometryAdapter(Protocol):
    """Operations the generator needs from a host scene."""

    def instantiate(self, module: ModuleType) -> Handle:
        """Create a fresh instance at the origin with identity orientation."""
        ...

    def destroy(self, handle: Handle) -> None:
        """Release an instance immediately."""
        ...

    def set_transform(self, handle: Handle, transform: Transform) -> None:
        ...

    def get_transform(self, handle: Handle) -> Transform:
        ...

    def module_of(self, handle: Handle) -> ModuleType:
        ...

    def get_connectors(self, handle: Handle) -> list[ConnectorPose]:
        """Connector poses in world space, in the module's declared order."""
        ...

    def has_colliders(self, handle: Handle) -> bool:
        ...

    def test_overlap(self, a: Handle, b: Handle) -> bool:
        """Exact collider test, or bounding-volume fallback without colliders."""
        ...

    def world_bounds(self, handle: Handle) -> AABB:
        ...
