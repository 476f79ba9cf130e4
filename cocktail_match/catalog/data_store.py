from __future__ import annotations

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .loader import load_catalog
from .models import CatalogEntity

_catalog: tuple[CatalogEntity, ...] | None = None


def get_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> tuple[CatalogEntity, ...]:
    """Return the in-memory catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog(config)
    return _catalog


def clear_catalog_cache() -> None:
    global _catalog
    _catalog = None
