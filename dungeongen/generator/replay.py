"""Replay helpers — materialize a Solution in a scene and re-check it."""

from __future__ import annotations

import logging

from dungeongen.catalog.models import CatalogResult, ModuleType
from dungeongen.scene.adapter import GeometryAdapter, Handle, SceneError

from .models import Solution
from .overlap import find_overlaps


log = logging.getLogger(__name__)


def instantiate_solution(
    scene: GeometryAdapter,
    solution: Solution,
    catalog: CatalogResult | list[ModuleType],
) -> list[Handle]:
    """Create one instance per placement, in order.

    Raises SceneError if a placement names a module the catalog lacks.
    """
    modules = catalog.modules if isinstance(catalog, CatalogResult) else catalog
    by_id = {m.id: m for m in modules}
    handles: list[Handle] = []
    for p in solution:
        module = by_id.get(p.module_id)
        if module is None:
            raise SceneError(None, f"unknown module '{p.module_id}' in solution")
        handle = scene.instantiate(module)
        scene.set_transform(handle, p.transform)
        handles.append(handle)
    return handles


def verify_solution(
    scene: GeometryAdapter,
    solution: Solution,
    catalog: CatalogResult | list[ModuleType],
) -> list[tuple[int, int]]:
    """Overlapping placement index pairs (empty = valid).

    Instances are created for the check and destroyed again afterwards.
    """
    handles = instantiate_solution(scene, solution, catalog)
    try:
        index = {h: i for i, h in enumerate(handles)}
        pairs = [(index[a], index[b]) for a, b in find_overlaps(scene, handles)]
    finally:
        for h in reversed(handles):
            scene.destroy(h)
    if pairs:
        log.warning("Solution has %d overlapping pair(s)", len(pairs))
    return pairs
