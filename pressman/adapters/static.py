"""
Static CatalogBackend -- serves catalogs built in code.

Useful for tests and for projects that assemble catalogs themselves:

    from pressman import conf
    from pressman.adapters.static import StaticCatalogBackend

    conf._catalog_backend_instance = StaticCatalogBackend([catalog])
"""

from __future__ import annotations

from typing import Iterable

from pressman.engine.types import ProductCatalog
from pressman.protocols.catalog import CatalogBackend


class StaticCatalogBackend:
    """CatalogBackend over a fixed set of ProductCatalog snapshots."""

    def __init__(self, catalogs: Iterable[ProductCatalog] = ()) -> None:
        self._catalogs = {catalog.product_id: catalog for catalog in catalogs}

    def load_catalogs(self) -> dict[str, ProductCatalog]:
        return dict(self._catalogs)


# Verify protocol compliance at import time.
if not isinstance(StaticCatalogBackend(), CatalogBackend):
    raise TypeError("StaticCatalogBackend does not implement CatalogBackend protocol")
