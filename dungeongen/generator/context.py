"""Search context — the single mutable state threaded through the search.

Every structural change the search makes goes through one of the scoped
helpers below.  Each yields a ``Scope``; unless ``keep()`` is called
before the block exits (normally or by exception), the change is undone
in exact reverse, so the recursion always unwinds to the state it saw.
"""

from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from dungeongen.catalog.models import CatalogEntry, ModuleType
from dungeongen.config import GENERATOR_RULES, GeneratorRules
from dungeongen.geometry.vector import IDENTITY, Transform
from dungeongen.scene.adapter import ConnectorPose, GeometryAdapter, Handle

from .frontier import Frontier, OpenConnector
from .models import PlacementFit


log = logging.getLogger(__name__)


class Scope:
    """Token yielded by the scoped helpers; ``keep()`` makes the change permanent."""

    def __init__(self) -> None:
        self.kept = False

    def keep(self) -> None:
        self.kept = True


@dataclass
class LoopClosure:
    """A committed loop: *moved* was docked onto *anchor*.

    ``previous`` holds the transform of every instance that was moved, so
    the closure can be reverted exactly.
    """

    moved: OpenConnector
    anchor: OpenConnector
    previous: dict[Handle, Transform]


@dataclass
class SearchContext:
    scene: GeometryAdapter
    entries: list[CatalogEntry]
    max_modules: int
    rng: random.Random = field(default_factory=random.Random)
    rules: GeneratorRules = GENERATOR_RULES
    placed: list[Handle] = field(default_factory=list)
    frontier: Frontier = field(default_factory=Frontier)
    parents: dict[Handle, Handle | None] = field(default_factory=dict)

    @property
    def remaining_budget(self) -> int:
        return max(0, self.max_modules - len(self.placed))

    def pose_of(self, conn: OpenConnector) -> ConnectorPose:
        """World pose of an open connector, read fresh from the scene."""
        return self.scene.get_connectors(conn.handle)[conn.index]

    def children_of(self, handle: Handle) -> list[Handle]:
        return [h for h in self.placed if self.parents.get(h) == handle]

    # ── whole-structure operations ──

    def reset(self) -> None:
        """Destroy every placed instance and empty the frontier."""
        for handle in reversed(self.placed):
            self.scene.destroy(handle)
        self.placed.clear()
        self.frontier.clear()
        self.parents.clear()

    def place_start(self, module: ModuleType) -> Handle:
        """Place *module* at the origin with all of its connectors open."""
        handle = self.scene.instantiate(module)
        self.scene.set_transform(handle, IDENTITY)
        self.placed.append(handle)
        self.parents[handle] = None
        self.frontier.open_module(handle, module.connector_count)
        return handle

    # ── scoped mutations ──

    @contextmanager
    def resolving(self, target: OpenConnector) -> Iterator[Scope]:
        """Take *target* off the frontier while candidates are tried there."""
        index = self.frontier.remove(target)
        scope = Scope()
        try:
            yield scope
        finally:
            if not scope.kept:
                self.frontier.insert(index, target)

    @contextmanager
    def placing(
        self, handle: Handle, target: OpenConnector, fit: PlacementFit,
    ) -> Iterator[Scope]:
        """Commit the already-aligned instance *handle* at *target*."""
        module = self.scene.module_of(handle)
        self.placed.append(handle)
        self.parents[handle] = target.handle
        opened = self.frontier.open_module(
            handle, module.connector_count, skip=fit.connector_index)
        log.debug("Placed %s (#%d) at %s:%d via connector %d mode %d",
                  module.id, handle, target.handle, target.index,
                  fit.connector_index, fit.mode)
        scope = Scope()
        try:
            yield scope
        finally:
            if not scope.kept:
                self.frontier.discard_all(opened)
                self.placed.remove(handle)
                del self.parents[handle]
                self.scene.destroy(handle)
                log.debug("Backtracked %s (#%d)", module.id, handle)

    @contextmanager
    def closing(self, closure: LoopClosure) -> Iterator[Scope]:
        """Take both connectors of an applied loop closure off the frontier."""
        removed = [
            (self.frontier.remove(conn), conn)
            for conn in (closure.moved, closure.anchor)
        ]
        log.debug("Closed loop %s:%d -> %s:%d (moved %d instance(s))",
                  closure.moved.handle, closure.moved.index,
                  closure.anchor.handle, closure.anchor.index,
                  len(closure.previous))
        scope = Scope()
        try:
            yield scope
        finally:
            if not scope.kept:
                for index, conn in reversed(removed):
                    self.frontier.insert(index, conn)
                for handle, transform in closure.previous.items():
                    self.scene.set_transform(handle, transform)
