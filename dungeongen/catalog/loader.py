"""Catalog loader — reads catalog/*.json files, parses and validates them."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Iterator

from dungeongen.geometry.vector import Vec3, cross, length

from .models import (
    BASIS_EPSILON, Box, ConnectorSpec, ModuleType, ValidationError, CatalogResult,
)


log = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).resolve().parent.parent.parent / "catalog"


# ── Validation ─────────────────────────────────────────────────────

def _connector_issues(module: ModuleType) -> Iterator[ValidationError]:
    seen: set[str] = set()
    for conn in module.connectors:
        where = f"connectors.{conn.id}"
        if conn.id in seen:
            yield ValidationError(module.id, where, "Duplicate connector ID")
        seen.add(conn.id)

        if length(conn.forward) < BASIS_EPSILON:
            yield ValidationError(module.id, f"{where}.forward", "Zero-length vector")
        elif length(conn.up) < BASIS_EPSILON:
            yield ValidationError(module.id, f"{where}.up", "Zero-length vector")
        elif length(cross(conn.forward, conn.up)) < BASIS_EPSILON:
            yield ValidationError(module.id, f"{where}.up",
                                  "Parallel to forward, orientation is ambiguous")


def _box_issues(module: ModuleType) -> Iterator[ValidationError]:
    for kind, boxes in (("colliders", module.colliders), ("visuals", module.visuals)):
        for i, box in enumerate(boxes):
            if any(s < 0 for s in box.size):
                yield ValidationError(module.id, f"{kind}[{i}].size", "Must be >= 0")


def _validate_module(module: ModuleType) -> tuple[list[ValidationError], list[ValidationError]]:
    """Check one module type.  Returns ``(errors, warnings)``.

    Modules with errors are still returned by the loader; the generator
    skips the ones it cannot place.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    if not math.isfinite(module.weight):
        errors.append(ValidationError(module.id, "weight", "Must be a finite number"))
    elif module.weight < 0:
        warnings.append(ValidationError(module.id, "weight",
                                        f"Negative weight {module.weight:g} counts as 0"))

    if not module.has_geometry:
        errors.append(ValidationError(module.id, "geometry",
                                      "No connectors, colliders or visuals, module will be skipped"))
    errors.extend(_connector_issues(module))
    errors.extend(_box_issues(module))

    for issue in errors + warnings:
        log.warning("%s (%s)", issue, module.source_file or "<memory>")
    return errors, warnings


# ── Parsing ────────────────────────────────────────────────────────

def _parse_vec3(data: list | tuple, what: str) -> Vec3:
    if len(data) != 3:
        raise ValueError(f"{what} must have 3 components, got {len(data)}")
    return (float(data[0]), float(data[1]), float(data[2]))


def _parse_box(data: dict) -> Box:
    return Box(
        center=_parse_vec3(data.get("center", [0, 0, 0]), "center"),
        size=_parse_vec3(data["size"], "size"),
    )


def _parse_connector(data: dict) -> ConnectorSpec:
    return ConnectorSpec(
        id=data["id"],
        position=_parse_vec3(data["position"], "position"),
        forward=_parse_vec3(data["forward"], "forward"),
        up=_parse_vec3(data.get("up", [0, 1, 0]), "up"),
    )


def parse_module(data: dict, source_file: str = "") -> ModuleType:
    return ModuleType(
        id=data["id"],
        name=data.get("name", data["id"]),
        description=data.get("description", ""),
        weight=float(data.get("weight", 1.0)),
        connectors=tuple(_parse_connector(c) for c in data.get("connectors", [])),
        colliders=tuple(_parse_box(b) for b in data.get("colliders", [])),
        visuals=tuple(_parse_box(b) for b in data.get("visuals", [])),
        source_file=source_file,
    )


def _read_module(path: Path) -> ModuleType | ValidationError:
    """Parse one catalog file, or describe why it cannot be used."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        return ValidationError(path.stem, "json", f"Parse error: {exc}")
    except OSError as exc:
        return ValidationError(path.stem, "file", f"Read error: {exc}")

    try:
        return parse_module(raw, source_file=str(path))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        module_id = raw.get("id", path.stem) if isinstance(raw, dict) else path.stem
        return ValidationError(module_id, "parse", f"Missing/invalid field: {exc}")


# ── Public API ─────────────────────────────────────────────────────

def load_catalog(catalog_dir: Path | None = None) -> CatalogResult:
    """Load all catalog/*.json files, parse and validate.

    Files that cannot be parsed are skipped with an error.  Modules that
    parse are always included, even with validation errors, so the
    ``validate`` command can report every problem at once.
    """
    d = Path(catalog_dir) if catalog_dir is not None else CATALOG_DIR
    result = CatalogResult(modules=[])

    json_files = sorted(d.glob("*.json"))
    if not json_files:
        result.errors.append(ValidationError("_catalog", "files", f"No .json files found in {d}"))
        log.warning("No catalog files in %s", d)
        return result

    first_seen: dict[str, Path] = {}
    for path in json_files:
        loaded = _read_module(path)
        if isinstance(loaded, ValidationError):
            log.warning("Skipping %s: %s", path.name, loaded.message)
            result.errors.append(loaded)
            continue

        if loaded.id in first_seen:
            dup = ValidationError(loaded.id, "id",
                                  f"Duplicate module ID (already defined in {first_seen[loaded.id].name})")
            log.warning("%s (%s)", dup, path.name)
            result.errors.append(dup)
        else:
            first_seen[loaded.id] = path

        errors, warnings = _validate_module(loaded)
        result.errors.extend(errors)
        result.warnings.extend(warnings)
        result.modules.append(loaded)

    log.info("Loaded %d module type(s) from %s (%d error(s), %d warning(s))",
             len(result.modules), d, len(result.errors), len(result.warnings))
    return result


def get_module(catalog: list[ModuleType] | CatalogResult, module_id: str) -> ModuleType | None:
    """Look up a module type by ID. Returns None if not found."""
    modules = catalog.modules if isinstance(catalog, CatalogResult) else catalog
    return next((m for m in modules if m.id == module_id), None)
