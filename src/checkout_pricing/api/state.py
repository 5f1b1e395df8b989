"""Shared API state - the catalog is loaded once per process."""
from typing import Optional

from ..data.catalog import Catalog

_catalog: Optional[Catalog] = None


def get_catalog() -> Catalog:
    """FastAPI dependency returning the process-wide catalog."""
    global _catalog
    if _catalog is None:
        _catalog = Catalog.load()
    return _catalog
