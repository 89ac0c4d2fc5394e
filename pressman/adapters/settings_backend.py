"""CatalogBackend reading raw catalogs from PRESSMAN["CATALOGS"]."""

import logging

from pressman.conf import pressman_settings
from pressman.engine.loader import parse_catalog
from pressman.engine.types import ProductCatalog
from pressman.protocols import CatalogBackend

logger = logging.getLogger(__name__)


class SettingsCatalogBackend:
    """
    Default CatalogBackend.

    Each key of PRESSMAN["CATALOGS"] is a product id, each value a raw
    catalog mapping (see pressman.engine.loader). Parsing errors propagate:
    a broken catalog must fail the reload, not publish half a registry.
    """

    def load_catalogs(self) -> dict[str, ProductCatalog]:
        raw_catalogs = pressman_settings.CATALOGS or {}
        catalogs = {}
        for product_id, raw in raw_catalogs.items():
            catalogs[product_id] = parse_catalog(raw, product_id=product_id)
        logger.debug("Parsed %d catalogs from settings", len(catalogs))
        return catalogs


# Verify implementation at import time
if not isinstance(SettingsCatalogBackend(), CatalogBackend):
    raise TypeError("SettingsCatalogBackend does not implement CatalogBackend protocol")
