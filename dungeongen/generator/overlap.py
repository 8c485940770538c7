"""Overlap oracle — does a candidate instance collide with placed ones?"""

from __future__ import annotations

from typing import Iterable

from dungeongen.scene.adapter import GeometryAdapter, Handle


def overlaps_existing(
    scene: GeometryAdapter, candidate: Handle, placed: Iterable[Handle],
) -> bool:
    """True if *candidate* overlaps any instance in *placed*.

    The candidate itself is ignored if it appears in *placed*.  The scene
    decides per pair whether to use exact collider testing or the
    bounding-volume fallback; this function never mutates anything.
    """
    return any(
        scene.test_overlap(candidate, other)
        for other in placed
        if other != candidate
    )


def find_overlaps(
    scene: GeometryAdapter, handles: list[Handle],
) -> list[tuple[Handle, Handle]]:
    """Every overlapping pair among *handles*, tested in both directions.

    The oracle is asymmetric (a module without colliders is tested by its
    bounds), so a pair is reported if either ordering overlaps.
    """
    pairs: list[tuple[Handle, Handle]] = []
    for i, a in enumerate(handles):
        for b in handles[i + 1:]:
            if scene.test_overlap(a, b) or scene.test_overlap(b, a):
                pairs.append((a, b))
    return pairs
