"""Placement trials — fitting a catalog module at an open connector."""

from __future__ import annotations

from typing import Iterable

from dungeongen.catalog.models import CatalogEntry, ModuleType
from dungeongen.geometry.vector import IDENTITY
from dungeongen.scene.adapter import ConnectorPose, GeometryAdapter, Handle

from .alignment import ALIGN_MODES, align_to_connector
from .context import SearchContext
from .frontier import OpenConnector
from .models import PlacementFit
from .overlap import overlaps_existing


def find_placement(
    scene: GeometryAdapter,
    handle: Handle,
    target: ConnectorPose,
    placed: Iterable[Handle],
) -> PlacementFit | None:
    """First (connector, mode) docking of *handle* at *target* that overlaps nothing.

    Leaves the instance at the returned transform; on None its transform
    is whatever was tried last.
    """
    placed = list(placed)
    scene.set_transform(handle, IDENTITY)
    local = scene.get_connectors(handle)
    for index, attach in enumerate(local):
        for mode in ALIGN_MODES:
            transform = align_to_connector(attach, target, mode)
            scene.set_transform(handle, transform)
            if not overlaps_existing(scene, handle, placed):
                return PlacementFit(transform=transform, connector_index=index, mode=mode)
    return None


def try_place(
    scene: GeometryAdapter,
    module: ModuleType,
    target: ConnectorPose,
    placed: Iterable[Handle],
) -> tuple[Handle, PlacementFit] | None:
    """Instantiate *module* docked at *target*; destroy it again if it cannot fit."""
    handle = scene.instantiate(module)
    fit = find_placement(scene, handle, target, placed)
    if fit is None:
        scene.destroy(handle)
        return None
    return handle, fit


def viable_entries(
    ctx: SearchContext,
    target: OpenConnector,
    cache: dict[OpenConnector, list[CatalogEntry]] | None = None,
) -> list[CatalogEntry]:
    """Catalog entries that can be placed at *target* without overlap.

    Nothing is committed: every trial instance is destroyed again.  Pass
    the same *cache* for calls within one search step, while the
    structure is unchanged.
    """
    if cache is not None and target in cache:
        return cache[target]

    pose = ctx.pose_of(target)
    viable: list[CatalogEntry] = []
    for entry in ctx.entries:
        trial = try_place(ctx.scene, entry.module, pose, ctx.placed)
        if trial is not None:
            ctx.scene.destroy(trial[0])
            viable.append(entry)

    if cache is not None:
        cache[target] = viable
    return viable
