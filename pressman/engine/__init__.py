"""
Pricing & compatibility engine.

Pure functions over an immutable ProductCatalog and a Selection:

    resolve(catalog, selection)    -> AllowedOptions
    validate(catalog, selection)   -> list[ValidationIssue]
    calculate(catalog, selection)  -> PriceBreakdown
    tier_for(tiers, quantity)      -> TierMatch
    parse_catalog(raw)             -> ProductCatalog
"""

from pressman.engine.calculator import calculate
from pressman.engine.discounts import TierMatch, tier_for
from pressman.engine.loader import parse_catalog
from pressman.engine.resolver import allowed_add_ons, find_incompatibilities, resolve
from pressman.engine.types import (
    AddOn,
    AddOnKind,
    AllowedOptions,
    BindingType,
    DiscountTier,
    LineItem,
    PageRate,
    PageScope,
    PaperType,
    PaperWeight,
    PriceBreakdown,
    PrintMode,
    ProductCatalog,
    QuantityConstraint,
    Selection,
    ValidationIssue,
)
from pressman.engine.validation import validate

__all__ = [
    "AddOn",
    "AddOnKind",
    "AllowedOptions",
    "BindingType",
    "DiscountTier",
    "LineItem",
    "PageRate",
    "PageScope",
    "PaperType",
    "PaperWeight",
    "PriceBreakdown",
    "PrintMode",
    "ProductCatalog",
    "QuantityConstraint",
    "Selection",
    "TierMatch",
    "ValidationIssue",
    "allowed_add_ons",
    "calculate",
    "find_incompatibilities",
    "parse_catalog",
    "resolve",
    "tier_for",
    "validate",
]
