"""Selection heuristics — which connector to resolve, which module to try."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from dungeongen.catalog.models import CatalogEntry

from .context import SearchContext
from .frontier import OpenConnector
from .placement import viable_entries


log = logging.getLogger(__name__)


def select_connector(
    ctx: SearchContext,
    cache: dict[OpenConnector, list[CatalogEntry]] | None = None,
) -> OpenConnector:
    """Pick the open connector to resolve next.

    Mostly depth-first (the newest connector), sometimes a random one,
    and rarely the most-constrained one: the connector with the fewest
    viable catalog entries, first one wins ties.  The frontier must not
    be empty.
    """
    frontier = ctx.frontier
    roll = ctx.rng.random()

    if roll < ctx.rules.depth_first_probability:
        return frontier.last

    if roll < ctx.rules.most_constrained_threshold:
        return frontier[ctx.rng.randrange(len(frontier))]

    best: OpenConnector | None = None
    fewest = None
    for conn in frontier:
        count = len(viable_entries(ctx, conn, cache))
        if fewest is None or count < fewest:
            best, fewest = conn, count
            if count == 0:
                break
    log.debug("Most-constrained connector %s:%d (%d viable)",
              best.handle, best.index, fewest)
    return best


def partition_pool(viable: Sequence[CatalogEntry]) -> list[CatalogEntry]:
    """Prefer entries that keep growing (more than one connector).

    Dead-end entries are only returned when nothing else fits.
    """
    growing = [e for e in viable if e.connector_count > 1]
    if growing:
        return growing
    return [e for e in viable if e.connector_count <= 1]


def pick_weighted(rng: random.Random, entries: Sequence[CatalogEntry]) -> int:
    """Index of a weighted random pick; negative weights count as 0.

    Falls back to a uniform pick when no entry has positive weight.
    """
    total = sum(max(0.0, e.weight) for e in entries)
    if total <= 0:
        return rng.randrange(len(entries))
    roll = rng.random() * total
    for i, e in enumerate(entries):
        roll -= max(0.0, e.weight)
        if roll <= 0:
            return i
    return len(entries) - 1
