"""Pressman adapters."""

from pressman.adapters.settings_backend import SettingsCatalogBackend
from pressman.adapters.static import StaticCatalogBackend

__all__ = [
    "SettingsCatalogBackend",
    "StaticCatalogBackend",
]
