"""Catalog serialization — convert dataclasses to JSON-safe dicts."""

from __future__ import annotations

from typing import Any

from .models import Box, ModuleType, CatalogResult, ValidationError


def catalog_to_dict(result: CatalogResult) -> dict:
    """Serialize a CatalogResult to a JSON-safe dict."""
    return {
        "ok": result.ok,
        "module_count": len(result.modules),
        "modules": [module_to_dict(m) for m in result.modules],
        "errors": [_issue_to_dict(e) for e in result.errors],
        "warnings": [_issue_to_dict(w) for w in result.warnings],
    }


def _issue_to_dict(e: ValidationError) -> dict:
    return {"module_id": e.module_id, "field": e.field, "message": e.message}


def _box_to_dict(b: Box) -> dict:
    return {"center": list(b.center), "size": list(b.size)}


def module_to_dict(m: ModuleType) -> dict:
    """Serialize a ModuleType to the same shape the loader reads."""
    d: dict[str, Any] = {
        "id": m.id,
        "name": m.name,
        "description": m.description,
        "weight": m.weight,
        "connectors": [
            {
                "id": c.id,
                "position": list(c.position),
                "forward": list(c.forward),
                "up": list(c.up),
            }
            for c in m.connectors
        ],
    }

    # Optional geometry
    if m.colliders:
        d["colliders"] = [_box_to_dict(b) for b in m.colliders]
    if m.visuals:
        d["visuals"] = [_box_to_dict(b) for b in m.visuals]
    if m.source_file:
        d["source_file"] = m.source_file

    return d
