"""Solution serialization — JSON conversion."""

from __future__ import annotations

from .models import Placement, Solution


def _round(v: tuple[float, float, float], digits: int) -> list[float]:
    # + 0.0 folds -0.0 into 0.0
    return [round(c, digits) + 0.0 for c in v]


def solution_to_dict(solution: Solution, *, seed: int | None = None, digits: int = 6) -> dict:
    """Serialize a Solution to a JSON-safe dict."""
    d: dict = {
        "module_count": len(solution),
        "placements": [
            {
                "module_id": p.module_id,
                "position": _round(p.position, digits),
                "forward": _round(p.forward, digits),
                "up": _round(p.up, digits),
            }
            for p in solution
        ],
    }
    if seed is not None:
        d["seed"] = seed
    return d


def parse_solution(data: dict) -> Solution:
    """Parse a solution.json dict back into a Solution."""
    return [
        Placement(
            module_id=p["module_id"],
            position=tuple(float(c) for c in p["position"]),
            forward=tuple(float(c) for c in p["forward"]),
            up=tuple(float(c) for c in p.get("up", [0, 1, 0])),
        )
        for p in data["placements"]
    ]
