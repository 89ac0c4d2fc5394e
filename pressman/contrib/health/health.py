"""
Catalog health checks.

Finds configuration gaps that would otherwise only surface as a
CatalogCorrupted fault or a NoTierMatched warning at quote time.

Checks:
    - Discount tiers: gaps, overlaps, bounded last tier
    - Rates: page, binding and cover rates for every legal combination
    - Add-ons: page-based without a positive step, unknown eligible bindings
    - Quantity: minimum, step and maximum consistency
"""

import logging
from dataclasses import dataclass

from pressman.engine.types import ProductCatalog
from pressman.registry import registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogIssue:
    product_id: str
    check: str
    message: str

    def as_dict(self) -> dict:
        return {"product_id": self.product_id, "check": self.check, "message": self.message}


def _check_tiers(catalog: ProductCatalog) -> list[CatalogIssue]:
    tiers = sorted(catalog.quantity_discount_tiers, key=lambda t: t.min_quantity)
    if not tiers:
        return []

    issues = []

    def issue(message):
        issues.append(CatalogIssue(catalog.product_id, "discount_tiers", message))

    minimum = catalog.quantity_constraint.minimum
    if tiers[0].min_quantity > minimum:
        issue(f"No tier covers quantities {minimum}-{tiers[0].min_quantity - 1}")

    for previous, current in zip(tiers, tiers[1:]):
        if previous.max_quantity is None:
            issue(f"Unbounded tier from {previous.min_quantity} overlaps tier from {current.min_quantity}")
        elif current.min_quantity <= previous.max_quantity:
            issue(f"Tiers from {previous.min_quantity} and {current.min_quantity} overlap")
        elif current.min_quantity > previous.max_quantity + 1:
            issue(f"No tier covers quantities {previous.max_quantity + 1}-{current.min_quantity - 1}")

    if tiers[-1].max_quantity is not None:
        issue(f"Last tier is bounded at {tiers[-1].max_quantity}")
    return issues


def _check_rates(catalog: ProductCatalog) -> list[CatalogIssue]:
    issues = []
    for paper in catalog.paper_types:
        for weight in paper.weights:
            for mode in weight.print_modes():
                key = (paper.name, weight.weight, str(mode))
                if key not in catalog.page_rates:
                    issues.append(
                        CatalogIssue(catalog.product_id, "page_rates", f"Missing page rate for {key!r}")
                    )
    for binding in catalog.binding_types:
        if binding.name not in catalog.binding_rates:
            issues.append(
                CatalogIssue(catalog.product_id, "binding_rates", f"Missing rate for binding {binding.name!r}")
            )
        for cover_weight in binding.cover_weights:
            if (binding.name, cover_weight) not in catalog.cover_rates:
                issues.append(
                    CatalogIssue(
                        catalog.product_id,
                        "cover_rates",
                        f"Missing cover rate for {binding.name!r} at {cover_weight} g",
                    )
                )
    return issues


def _check_add_ons(catalog: ProductCatalog) -> list[CatalogIssue]:
    issues = []
    bindings = set(catalog.binding_type_names)
    for add_on in catalog.add_ons:
        if add_on.is_page_based and (not add_on.page_step or add_on.page_step <= 0):
            issues.append(
                CatalogIssue(catalog.product_id, "add_ons", f"Page-based add-on {add_on.name!r} has no page step")
            )
        for name in sorted(add_on.eligible_bindings - bindings):
            issues.append(
                CatalogIssue(
                    catalog.product_id,
                    "add_ons",
                    f"Add-on {add_on.name!r} names unknown binding {name!r}",
                )
            )
    return issues


def _check_quantity(catalog: ProductCatalog) -> list[CatalogIssue]:
    constraint = catalog.quantity_constraint
    issues = []
    if constraint.minimum < 1:
        issues.append(CatalogIssue(catalog.product_id, "quantity", "Minimum quantity must be at least 1"))
    if constraint.step < 1:
        issues.append(CatalogIssue(catalog.product_id, "quantity", "Quantity step must be at least 1"))
    if constraint.is_bounded and constraint.maximum < constraint.minimum:
        issues.append(
            CatalogIssue(
                catalog.product_id,
                "quantity",
                f"Maximum quantity {constraint.maximum} is below minimum {constraint.minimum}",
            )
        )
    return issues


def check_catalog(catalog: ProductCatalog) -> list[CatalogIssue]:
    """
    Run every health check against one catalog.

    Returns:
        Issues found; empty when the catalog is healthy.
    """
    issues = []
    issues.extend(_check_tiers(catalog))
    issues.extend(_check_rates(catalog))
    issues.extend(_check_add_ons(catalog))
    issues.extend(_check_quantity(catalog))
    for issue in issues:
        logger.warning("Catalog %s: %s", issue.product_id, issue.message)
    return issues


def check_registry() -> dict[str, list[CatalogIssue]]:
    """Check every published catalog, keyed by product id."""
    return {
        product_id: check_catalog(catalog)
        for product_id, catalog in sorted(registry.snapshots().items())
    }
