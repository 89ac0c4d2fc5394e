"""
Health module - audit catalogs for configuration gaps.

Usage:
    from pressman.contrib.health import check_catalog, check_registry

    issues = check_catalog(catalog)
    report = check_registry()
"""

from pressman.contrib.health.health import CatalogIssue, check_catalog, check_registry

__all__ = ["CatalogIssue", "check_catalog", "check_registry"]
