"""Catalog protocols and service result types."""

from dataclasses import dataclass, field
from typing import Mapping, Protocol, runtime_checkable

from pressman.engine.types import (
    AllowedOptions,
    PriceBreakdown,
    ProductCatalog,
    ValidationIssue,
)


@dataclass(frozen=True)
class OptionsResult:
    """Outcome of resolving options for a partial selection.

    Either ``options`` is set (ok) or ``error`` describes the rejected field.
    """

    ok: bool
    product_id: str
    options: AllowedOptions | None = None
    error: dict | None = None

    def as_dict(self) -> dict:
        return {
            "ok": self.ok,
            "product_id": self.product_id,
            "options": self.options.as_dict() if self.options else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class QuoteResult:
    """Outcome of pricing a selection: a breakdown or the full list of issues."""

    ok: bool
    product_id: str
    breakdown: PriceBreakdown | None = None
    errors: list[ValidationIssue] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "ok": self.ok,
            "product_id": self.product_id,
            "breakdown": self.breakdown.as_dict() if self.breakdown else None,
            "errors": [issue.as_dict() for issue in self.errors],
        }


@runtime_checkable
class CatalogBackend(Protocol):
    """Interface for loading catalog snapshots."""

    def load_catalogs(self) -> Mapping[str, ProductCatalog]:
        """Return every configured catalog keyed by product id."""
        ...
