"""Catalog dataclasses — typed representations of catalog/*.json entries."""

from __future__ import annotations

from dataclasses import dataclass, field

from dungeongen.geometry.vector import Vec3, cross, length

# Connector basis vectors shorter than this (or a cross product this small)
# cannot define an orientation.
BASIS_EPSILON = 1e-9


@dataclass(frozen=True)
class Box:
    """Module-local axis-aligned box (collider or visual mesh bounds)."""
    center: Vec3
    size: Vec3                          # full extents, not half

    @property
    def corners(self) -> list[Vec3]:
        cx, cy, cz = self.center
        hx, hy, hz = (s / 2 for s in self.size)
        return [
            (cx + sx * hx, cy + sy * hy, cz + sz * hz)
            for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)
        ]

    @property
    def is_degenerate(self) -> bool:
        return any(s <= 0 for s in self.size)


@dataclass(frozen=True)
class ConnectorSpec:
    id: str
    position: Vec3                      # module-local
    forward: Vec3                       # direction a neighbour attaches from
    up: Vec3 = (0.0, 1.0, 0.0)

    @property
    def has_valid_basis(self) -> bool:
        """Forward and up are non-zero and not parallel."""
        return (length(self.forward) >= BASIS_EPSILON
                and length(self.up) >= BASIS_EPSILON
                and length(cross(self.forward, self.up)) >= BASIS_EPSILON)


@dataclass(frozen=True)
class ModuleType:
    id: str
    name: str = ""
    description: str = ""
    weight: float = 1.0
    connectors: tuple[ConnectorSpec, ...] = ()
    colliders: tuple[Box, ...] = ()
    visuals: tuple[Box, ...] = ()
    source_file: str = ""               # path of the JSON file (for error reporting)

    @property
    def connector_count(self) -> int:
        return len(self.connectors)

    @property
    def has_geometry(self) -> bool:
        return bool(self.connectors or self.colliders or self.visuals)

    @property
    def placeable(self) -> bool:
        """Has geometry and every connector can be aligned."""
        return self.has_geometry and all(c.has_valid_basis for c in self.connectors)


@dataclass(frozen=True)
class CatalogEntry:
    """A module type paired with its selection weight.

    ``module`` may be None for a slot that was never filled in.  Such
    entries, and modules with a connector that cannot be aligned, are
    skipped by the generator.
    """
    module: ModuleType | None
    weight: float = 1.0

    @property
    def usable(self) -> bool:
        return self.module is not None and self.module.placeable

    @property
    def connector_count(self) -> int:
        return self.module.connector_count if self.module is not None else 0


@dataclass
class ValidationError:
    module_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.module_id}] {self.field}: {self.message}"


@dataclass
class CatalogResult:
    """Loaded module types plus what was wrong with the files.

    ``errors`` make the catalog not ok.  ``warnings`` flag input that is
    accepted but adjusted (a negative weight counts as 0).
    """
    modules: list[ModuleType]
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


def catalog_entries(catalog: CatalogResult | list[ModuleType]) -> list[CatalogEntry]:
    """Pair every module with its own weight, in catalog order."""
    modules = catalog.modules if isinstance(catalog, CatalogResult) else catalog
    return [CatalogEntry(module=m, weight=m.weight) for m in modules]
