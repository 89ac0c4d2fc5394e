"""
Pressman configuration.

Usage in settings.py:
    PRESSMAN = {
        "CATALOG_BACKEND": "pressman.adapters.settings_backend.SettingsCatalogBackend",
        "CATALOGS": {
            "A5": {"book_size": "A5", "paper_types": {...}, "bindings": [...]},
        },
        "ENFORCE_ADDON_PAGE_STEP": True,
    }

The backend is built once and handed to the catalog registry, which calls
its load_catalogs() on each reload. Changing PRESSMAN (override_settings in
tests) resets both; see PressmanConfig.ready().
"""

import importlib
import threading
from dataclasses import dataclass, field
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


DEFAULT_CATALOG_BACKEND = "pressman.adapters.settings_backend.SettingsCatalogBackend"


@dataclass
class PressmanSettings:
    """Pressman configuration settings."""

    CATALOG_BACKEND: str = DEFAULT_CATALOG_BACKEND
    CATALOGS: dict = field(default_factory=dict)
    ENFORCE_ADDON_PAGE_STEP: bool = True


def get_pressman_settings() -> PressmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "PRESSMAN", {})
    return PressmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_pressman_settings(), name)


pressman_settings = _LazySettings()


# CatalogBackend singleton
_catalog_backend_lock = threading.Lock()
_catalog_backend_instance = None


def get_catalog_backend():
    """
    Return the configured CatalogBackend instance.

    Loads from PRESSMAN["CATALOG_BACKEND"] setting (dotted path).
    If _catalog_backend_instance was set directly (e.g. in tests), returns it as-is.

    Raises:
        ImproperlyConfigured: the configured class has no load_catalogs()
    """
    global _catalog_backend_instance
    if _catalog_backend_instance is not None:
        return _catalog_backend_instance
    from pressman.protocols.catalog import CatalogBackend

    backend_path = pressman_settings.CATALOG_BACKEND or DEFAULT_CATALOG_BACKEND
    with _catalog_backend_lock:
        if _catalog_backend_instance is None:
            module_path, cls_name = backend_path.rsplit(".", 1)
            module = importlib.import_module(module_path)
            cls = getattr(module, cls_name)
            backend = cls()
            if not isinstance(backend, CatalogBackend):
                raise ImproperlyConfigured(
                    f"PRESSMAN['CATALOG_BACKEND'] {backend_path!r} does not implement CatalogBackend"
                )
            _catalog_backend_instance = backend
    return _catalog_backend_instance


def reset_catalog_backend():
    """Reset CatalogBackend singleton (for tests and setting changes)."""
    global _catalog_backend_instance
    _catalog_backend_instance = None
