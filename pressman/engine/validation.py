"""
Validation gate.

Runs on a selection the caller believes is complete, before pricing. Every
check runs; all violations are returned together. Field compatibility is
re-derived from the catalog rather than trusted from what the client was shown.
"""

from pressman.engine.resolver import find_incompatibilities
from pressman.engine.types import (
    PrintMode,
    ProductCatalog,
    QuantityConstraint,
    Selection,
    ValidationIssue,
)


def _check_pages(selection: Selection) -> list[ValidationIssue]:
    issues = []
    for name in ("page_count_bw", "page_count_color"):
        if getattr(selection, name) < 0:
            issues.append(ValidationIssue(name, "invalid", f"{name} cannot be negative"))
    if issues:
        return issues

    if selection.total_pages <= 0:
        issues.append(
            ValidationIssue("page_count", "pages_required", "At least one page is required")
        )
        return issues

    if selection.print_mode == PrintMode.BW and selection.page_count_color:
        issues.append(
            ValidationIssue(
                "page_count_color",
                "print_mode_mismatch",
                "Black & white jobs cannot have color pages",
            )
        )
    elif selection.print_mode == PrintMode.COLOR and selection.page_count_bw:
        issues.append(
            ValidationIssue(
                "page_count_bw",
                "print_mode_mismatch",
                "Color jobs cannot have black & white pages",
            )
        )
    return issues


def check_quantity(constraint: QuantityConstraint, quantity: int) -> list[ValidationIssue]:
    """Bounds and step of the quantity. ``maximum == 0`` is unbounded."""
    if quantity <= 0:
        return [ValidationIssue("quantity", "invalid", "Quantity must be greater than zero")]

    issues = []
    if quantity < constraint.minimum:
        issues.append(
            ValidationIssue(
                "quantity",
                "quantity_below_minimum",
                f"Minimum quantity is {constraint.minimum}",
            )
        )
    elif constraint.step > 0 and (quantity - constraint.minimum) % constraint.step != 0:
        issues.append(
            ValidationIssue(
                "quantity",
                "quantity_step",
                f"Quantity must be {constraint.minimum} plus a multiple of {constraint.step}",
            )
        )
    if constraint.is_bounded and quantity > constraint.maximum:
        issues.append(
            ValidationIssue(
                "quantity",
                "quantity_above_maximum",
                f"Maximum quantity is {constraint.maximum}",
            )
        )
    return issues


def _check_add_ons(
    catalog: ProductCatalog,
    selection: Selection,
    enforce_page_step: bool,
) -> list[ValidationIssue]:
    issues = []
    for name in sorted(selection.add_ons):
        add_on = catalog.get_add_on(name)
        if add_on is None:
            issues.append(ValidationIssue("add_ons", "unknown_add_on", f"Unknown add-on {name!r}"))
            continue
        if not add_on.is_eligible(selection.binding_type):
            issues.append(
                ValidationIssue(
                    "add_ons",
                    "add_on_not_allowed",
                    f"Add-on {name!r} is not available for binding {selection.binding_type!r}",
                )
            )
        if enforce_page_step and add_on.is_page_based and add_on.page_step:
            pages = add_on.relevant_pages(
                selection.print_mode or "",
                selection.page_count_bw,
                selection.page_count_color,
            )
            if pages < 0 or pages % add_on.page_step != 0:
                issues.append(
                    ValidationIssue(
                        "add_ons",
                        "page_step",
                        f"Add-on {name!r} needs a page count in steps of {add_on.page_step}, got {pages}",
                    )
                )
    return issues


def validate(
    catalog: ProductCatalog,
    selection: Selection,
    enforce_page_step: bool = True,
) -> list[ValidationIssue]:
    """
    Validate a complete selection.

    Args:
        catalog: Product catalog snapshot
        selection: Selection to check
        enforce_page_step: Require page-based add-on page counts to be
            whole multiples of their step

    Returns:
        All violations found; empty means the selection may be priced.
    """
    issues = [
        ValidationIssue(name, "required", f"{name} is required")
        for name in selection.missing_fields()
    ]
    issues.extend(_check_pages(selection))
    issues.extend(check_quantity(catalog.quantity_constraint, selection.quantity))
    issues.extend(
        ValidationIssue(error.field, "incompatible", error.message)
        for error in find_incompatibilities(catalog, selection)
    )
    issues.extend(_check_add_ons(catalog, selection, enforce_page_step))

    if selection.override_unit_price_q is not None and selection.override_unit_price_q < 0:
        issues.append(
            ValidationIssue("override_unit_price_q", "invalid", "Override price cannot be negative")
        )
    return issues
