"""Main generation engine — recursive backtracking connector assembly."""

from __future__ import annotations

import logging
import random
import time
from typing import Sequence

from dungeongen.catalog.models import CatalogEntry
from dungeongen.config import GENERATOR_RULES, GeneratorRules
from dungeongen.scene.adapter import GeometryAdapter, Handle

from .context import SearchContext
from .frontier import OpenConnector
from .heuristics import partition_pool, pick_weighted, select_connector
from .loops import find_loop_closure
from .models import GenerationError, Placement, SearchOutcome, Solution
from .placement import try_place, viable_entries


log = logging.getLogger(__name__)


# ── Recursive search ───────────────────────────────────────────────


def expand(ctx: SearchContext) -> SearchOutcome:
    """Grow the structure in *ctx* until the module budget is reached.

    On success everything placed below this level is kept.  On any
    failure the structure is rolled back to exactly what it was on entry.
    """
    if len(ctx.placed) >= ctx.max_modules:
        return SearchOutcome.BUDGET_REACHED
    if not ctx.frontier:
        return SearchOutcome.STARVED

    closure = find_loop_closure(ctx)
    if closure is not None:
        with ctx.closing(closure) as scope:
            outcome = expand(ctx)
            if outcome.success:
                scope.keep()
            return outcome

    cache: dict[OpenConnector, list[CatalogEntry]] = {}
    target = select_connector(ctx, cache)
    viable = viable_entries(ctx, target, cache)
    if not viable:
        log.debug("Dead end at %s:%d", target.handle, target.index)
        return SearchOutcome.DEAD_END

    target_pose = ctx.pose_of(target)
    with ctx.resolving(target) as resolved:
        trial = partition_pool(viable)
        while trial:
            entry = trial.pop(pick_weighted(ctx.rng, trial))
            placed = try_place(ctx.scene, entry.module, target_pose, ctx.placed)
            if placed is None:
                continue
            handle, fit = placed
            with ctx.placing(handle, target, fit) as committed:
                if expand(ctx).success:
                    committed.keep()
                    resolved.keep()
                    return SearchOutcome.BUDGET_REACHED
    return SearchOutcome.EXHAUSTED


# ── Solution capture ───────────────────────────────────────────────


def capture_solution(scene: GeometryAdapter, handles: Sequence[Handle]) -> Solution:
    """Placements for *handles*, in order, at their current transforms."""
    solution: Solution = []
    for h in handles:
        t = scene.get_transform(h)
        solution.append(Placement(
            module_id=scene.module_of(h).id,
            position=t.position,
            forward=t.forward,
            up=t.up,
        ))
    return solution


# ── Top-level driver ───────────────────────────────────────────────


class DungeonGenerator:
    """Runs the search against a scene and remembers the last solution.

    The generator owns the instances it leaves in the scene: a new
    ``generate`` call destroys the previous result first.
    """

    def __init__(
        self, scene: GeometryAdapter, rules: GeneratorRules = GENERATOR_RULES,
    ) -> None:
        self.scene = scene
        self.rules = rules
        self.last_solution: Solution = []
        self.last_seed: int | None = None
        self._built: list[Handle] = []

    def has_solution(self) -> bool:
        return len(self.last_solution) > 0

    def _discard_previous(self) -> None:
        for handle in reversed(self._built):
            self.scene.destroy(handle)
        self._built = []
        self.last_solution = []

    def generate(
        self,
        catalog: Sequence[CatalogEntry],
        max_modules: int,
        seed: int | None = None,
    ) -> Solution | None:
        """Assemble a structure of exactly *max_modules* instances, or fail.

        Parameters
        ----------
        catalog : sequence of CatalogEntry
            Module types with their selection weights.  Entries without
            usable geometry are skipped.
        max_modules : int
            Module budget, at least 1.
        seed : int, optional
            RNG seed.  When omitted one is derived from the clock and
            logged, so the run can be repeated.

        Returns
        -------
        Solution or None
            The placements in commit order, or None when every starting
            module was exhausted (or no entry was usable).

        Raises
        ------
        GenerationError
            If *max_modules* is less than 1.
        """
        if max_modules < 1:
            raise GenerationError("max_modules", f"must be >= 1, got {max_modules}")
        if seed is None:
            seed = time.time_ns() % (2 ** 31)
            log.info("No seed given, using %d", seed)
        self.last_seed = seed
        self._discard_previous()

        entries = [e for e in catalog if e.usable]
        skipped = len(catalog) - len(entries)
        if skipped:
            log.info("Skipping %d catalog entr%s without placeable geometry",
                     skipped, "y" if skipped == 1 else "ies")
        if not entries:
            log.warning("No catalog entry has usable geometry, nothing to generate")
            return None

        rng = random.Random(seed)
        order = list(range(len(entries)))
        rng.shuffle(order)

        ctx = SearchContext(
            scene=self.scene, entries=entries, max_modules=max_modules,
            rng=rng, rules=self.rules,
        )
        log.info("Generating up to %d module(s) from %d entr%s, seed %d",
                 max_modules, len(entries), "y" if len(entries) == 1 else "ies", seed)

        for idx in order:
            ctx.reset()
            start = entries[idx].module
            ctx.place_start(start)
            outcome = expand(ctx)
            if outcome.success:
                self._built = list(ctx.placed)
                self.last_solution = capture_solution(self.scene, ctx.placed)
                log.info("Generated %d module(s) starting from %s",
                         len(self.last_solution), start.id)
                return self.last_solution
            log.info("Start module %s failed (%s)", start.id, outcome.value)

        ctx.reset()
        log.warning("Generation failed: every starting module was exhausted")
        return None


def generate_dungeon(
    catalog: Sequence[CatalogEntry],
    max_modules: int,
    scene: GeometryAdapter,
    seed: int | None = None,
    *,
    rules: GeneratorRules = GENERATOR_RULES,
) -> Solution | None:
    """One-shot convenience wrapper around ``DungeonGenerator.generate``."""
    return DungeonGenerator(scene, rules).generate(catalog, max_modules, seed)
