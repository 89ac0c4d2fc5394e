"""Pressman admin."""

from pressman.admin.quote import QuoteAdmin

__all__ = [
    "QuoteAdmin",
]
