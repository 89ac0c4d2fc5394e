"""Pressman models."""

from pressman.models.quote import Quote

__all__ = [
    "Quote",
]
