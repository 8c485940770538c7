"""
dungeongen — entry point.

Usage:
    python -m dungeongen generate                     # default catalog, 20 modules
    python -m dungeongen generate --max-modules 40 --seed 7 --out dungeon.json
    python -m dungeongen generate --catalog my_modules/ --rules rules.json
    python -m dungeongen validate [--catalog DIR]
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

USAGE = (
    "Usage: python -m dungeongen generate [--catalog DIR] [--max-modules N] "
    "[--seed S] [--rules FILE] [--out FILE] [-v]\n"
    "       python -m dungeongen validate [--catalog DIR]"
)

DEFAULT_MAX_MODULES = 20


def _option(args: list[str], name: str) -> str | None:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return None


def _generate(args: list[str]) -> int:
    from dungeongen.catalog import catalog_entries, load_catalog
    from dungeongen.config import GENERATOR_RULES, load_rules
    from dungeongen.generator import DungeonGenerator, GenerationError, solution_to_dict
    from dungeongen.scene import AnalyticScene

    catalog_dir = _option(args, "--catalog")
    rules_path = _option(args, "--rules")
    out = _option(args, "--out")
    try:
        max_modules = int(_option(args, "--max-modules") or DEFAULT_MAX_MODULES)
        seed_arg = _option(args, "--seed")
        seed = int(seed_arg) if seed_arg is not None else None
        rules = load_rules(Path(rules_path)) if rules_path else GENERATOR_RULES
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    catalog = load_catalog(Path(catalog_dir) if catalog_dir else None)

    generator = DungeonGenerator(AnalyticScene(rules), rules)
    try:
        solution = generator.generate(catalog_entries(catalog), max_modules, seed)
    except GenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if solution is None:
        print("Generation failed.", file=sys.stderr)
        return 1

    text = json.dumps(solution_to_dict(solution, seed=generator.last_seed), indent=2)
    if out:
        Path(out).write_text(text, encoding="utf-8")
        print(f"Wrote {len(solution)} placement(s) to {out}")
    else:
        print(text)
    return 0


def _validate(args: list[str]) -> int:
    from dungeongen.catalog import load_catalog

    catalog_dir = _option(args, "--catalog")
    catalog = load_catalog(Path(catalog_dir) if catalog_dir else None)
    for err in catalog.errors:
        print(err)
    for warning in catalog.warnings:
        print(f"warning: {warning}")
    print(f"{len(catalog.modules)} module(s), {len(catalog.errors)} issue(s), "
          f"{len(catalog.warnings)} warning(s)")
    return 0 if catalog.ok else 1


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    cmd = args[0] if args else "generate"

    logging.basicConfig(
        level=logging.DEBUG if "-v" in args else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if cmd == "generate":
        return _generate(args[1:])
    if cmd == "validate":
        return _validate(args[1:])

    print(f"Unknown command: {cmd}")
    print(USAGE)
    return 1


if __name__ == "__main__":
    sys.exit(main())
