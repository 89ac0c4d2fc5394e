"""Pressman protocols."""

from pressman.protocols.catalog import CatalogBackend, OptionsResult, QuoteResult

__all__ = [
    "CatalogBackend",
    "OptionsResult",
    "QuoteResult",
]
