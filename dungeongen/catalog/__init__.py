"""Module catalog — load, validate, query, and serialize catalog/*.json."""

from .models import (
    Box, ConnectorSpec, ModuleType, CatalogEntry,
    ValidationError, CatalogResult, catalog_entries,
)
from .loader import load_catalog, get_module, parse_module, CATALOG_DIR
from .serialization import catalog_to_dict, module_to_dict

__all__ = [
    # Models
    "Box", "ConnectorSpec", "ModuleType", "CatalogEntry",
    "ValidationError", "CatalogResult", "catalog_entries",
    # Loader
    "load_catalog", "get_module", "parse_module", "CATALOG_DIR",
    # Serialization
    "catalog_to_dict", "module_to_dict",
]
