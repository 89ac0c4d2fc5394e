"""
Catalog registry.

Holds the published catalogs as one read-only mapping. A reload builds a
complete new mapping from the backend and swaps the reference; snapshots
already handed to callers are never touched. Readers do not lock.
"""

import logging
import threading
from types import MappingProxyType
from typing import Callable, Mapping

from pressman.conf import get_catalog_backend
from pressman.engine.types import ProductCatalog

logger = logging.getLogger(__name__)


class CatalogRegistry:
    """Copy-on-reload store of ProductCatalog snapshots."""

    def __init__(self, backend_factory: Callable = get_catalog_backend) -> None:
        self._backend_factory = backend_factory
        self._lock = threading.Lock()
        self._snapshots: Mapping[str, ProductCatalog] | None = None

    def snapshots(self) -> Mapping[str, ProductCatalog]:
        """Current snapshot, loading it on first use."""
        snapshots = self._snapshots
        if snapshots is None:
            snapshots = self.reload()
        return snapshots

    def reload(self) -> Mapping[str, ProductCatalog]:
        """
        Load every catalog from the backend and publish them together.

        If the backend raises, the previous snapshot stays published.
        """
        from pressman.signals import catalog_reloaded

        with self._lock:
            catalogs = self._backend_factory().load_catalogs()
            snapshots = MappingProxyType(dict(catalogs))
            self._snapshots = snapshots

        logger.info("Published %d catalogs: %s", len(snapshots), sorted(snapshots))
        catalog_reloaded.send(sender=self.__class__, product_ids=sorted(snapshots))
        return snapshots

    def clear(self) -> None:
        """Drop the snapshot; the next read reloads."""
        with self._lock:
            self._snapshots = None

    def get(self, product_id: str) -> ProductCatalog | None:
        return self.snapshots().get(product_id)

    def product_ids(self) -> list[str]:
        return sorted(self.snapshots())


registry = CatalogRegistry()
