"""Analytic scene — a pure-geometry GeometryAdapter backend.

Module colliders are treated as boxes in module space.  While both
instances are upright (yaw-only rotation) each box is a vertical prism,
so the exact test reduces to a Shapely footprint intersection plus a
vertical interval overlap.  Anything else is reported as inconclusive
and falls back to coarse world-space bounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shapely.geometry import MultiPoint, Polygon

from dungeongen.catalog.models import Box, ModuleType
from dungeongen.config import GENERATOR_RULES, GeneratorRules
from dungeongen.geometry.bounds import AABB, boxes_overlap
from dungeongen.geometry.vector import IDENTITY, Transform, WORLD_UP

from .adapter import ConnectorPose, Handle, SceneError


log = logging.getLogger(__name__)


@dataclass
class _Instance:
    handle: Handle
    module: ModuleType
    transform: Transform = IDENTITY


# ── Exact prism test ───────────────────────────────────────────────


def _footprint(corners: list[tuple[float, float, float]]) -> Polygon:
    """XZ-plane footprint of an upright box's world corners."""
    return MultiPoint([(x, z) for x, _, z in corners]).convex_hull


def _short_side(poly: Polygon) -> float:
    """Width of the thinnest direction of a polygon (its penetration depth)."""
    rect = poly.minimum_rotated_rectangle
    if not isinstance(rect, Polygon):
        return 0.0
    coords = list(rect.exterior.coords)
    sides = [
        ((coords[i + 1][0] - coords[i][0]) ** 2
         + (coords[i + 1][1] - coords[i][1]) ** 2) ** 0.5
        for i in range(2)
    ]
    return min(sides)


def prism_penetration(
    ta: Transform, box_a: Box,
    tb: Transform, box_b: Box,
    vertical_tolerance: float = GENERATOR_RULES.vertical_tolerance,
) -> float | None:
    """Penetration depth of two transformed collider boxes.

    Returns 0.0 for separated or merely touching boxes, a positive depth
    for overlapping ones, and None when the exact test does not apply
    (a zero-size box, or either instance tilted off the vertical).
    """
    if box_a.is_degenerate or box_b.is_degenerate:
        return None
    for t in (ta, tb):
        if any(abs(u - w) > vertical_tolerance for u, w in zip(t.up, WORLD_UP)):
            return None

    ca = [ta.apply_point(c) for c in box_a.corners]
    cb = [tb.apply_point(c) for c in box_b.corners]

    vertical = (min(max(p[1] for p in ca), max(p[1] for p in cb))
                - max(min(p[1] for p in ca), min(p[1] for p in cb)))
    if vertical <= 0:
        return 0.0

    inter = _footprint(ca).intersection(_footprint(cb))
    if inter.is_empty or inter.area <= 0:
        return 0.0
    return min(vertical, _short_side(inter))


# ── Scene ──────────────────────────────────────────────────────────


class AnalyticScene:
    """In-memory scene container implementing GeometryAdapter."""

    def __init__(self, rules: GeneratorRules = GENERATOR_RULES, name: str = "dungeon") -> None:
        self.rules = rules
        self.name = name
        self._instances: dict[Handle, _Instance] = {}
        self._next_handle: Handle = 1

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, handle: object) -> bool:
        return handle in self._instances

    @property
    def handles(self) -> list[Handle]:
        """Live instance handles in creation order."""
        return list(self._instances)

    def _get(self, handle: Handle) -> _Instance:
        try:
            return self._instances[handle]
        except KeyError:
            raise SceneError(handle, "unknown or destroyed instance") from None

    # ── lifecycle ──

    def instantiate(self, module: ModuleType) -> Handle:
        if module is None or not module.has_geometry:
            raise SceneError(None, f"module {getattr(module, 'id', None)!r} has no geometry")
        handle = self._next_handle
        self._next_handle += 1
        self._instances[handle] = _Instance(handle=handle, module=module)
        return handle

    def destroy(self, handle: Handle) -> None:
        self._get(handle)
        del self._instances[handle]

    def clear(self) -> None:
        """Destroy every instance in the container."""
        if self._instances:
            log.debug("Clearing %d instance(s) from %s", len(self._instances), self.name)
        self._instances.clear()

    # ── transforms & queries ──

    def set_transform(self, handle: Handle, transform: Transform) -> None:
        self._get(handle).transform = transform

    def get_transform(self, handle: Handle) -> Transform:
        return self._get(handle).transform

    def module_of(self, handle: Handle) -> ModuleType:
        return self._get(handle).module

    def get_connectors(self, handle: Handle) -> list[ConnectorPose]:
        inst = self._get(handle)
        t = inst.transform
        return [
            ConnectorPose(
                position=t.apply_point(c.position),
                forward=t.apply_direction(c.forward),
                up=t.apply_direction(c.up),
            )
            for c in inst.module.connectors
        ]

    def has_colliders(self, handle: Handle) -> bool:
        return bool(self._get(handle).module.colliders)

    def _box_bounds(self, t: Transform, box: Box) -> AABB:
        return AABB.from_points(t.apply_point(c) for c in box.corners)

    def world_bounds(self, handle: Handle) -> AABB:
        """Visual bounds shrunk by ``bounds_shrink``; zero-size without visuals."""
        inst = self._get(handle)
        t = inst.transform
        if not inst.module.visuals:
            return AABB.empty_at(t.position)
        bounds = self._box_bounds(t, inst.module.visuals[0])
        for box in inst.module.visuals[1:]:
            bounds = bounds.encapsulate(self._box_bounds(t, box))
        return bounds.expand(-self.rules.bounds_shrink)

    # ── overlap ──

    def test_overlap(self, a: Handle, b: Handle) -> bool:
        ia, ib = self._get(a), self._get(b)
        if not ia.module.colliders:
            return boxes_overlap(self.world_bounds(a), self.world_bounds(b))

        for box_a in ia.module.colliders:
            for box_b in ib.module.colliders:
                depth = prism_penetration(
                    ia.transform, box_a, ib.transform, box_b,
                    self.rules.vertical_tolerance,
                )
                if depth is None:
                    coarse_a = self._box_bounds(ia.transform, box_a).expand(-self.rules.bounds_shrink)
                    coarse_b = self._box_bounds(ib.transform, box_b).expand(-self.rules.bounds_shrink)
                    if coarse_a.intersects(coarse_b):
                        return True
                elif depth > self.rules.penetration_epsilon:
                    return True
        return False
