"""
Price calculator.

Turns a validated selection into a PriceBreakdown. Per-book line items come
first (pages, binding, cover, add-ons), then order-level ones (subtotal,
discount, profit, override). Amounts are integer minor units; the discount
and profit stay exact and the total is rounded half-up exactly once.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from pressman.engine.discounts import tier_for
from pressman.engine.types import (
    AddOn,
    LineItem,
    PriceBreakdown,
    ProductCatalog,
    Selection,
)
from pressman.engine.validation import validate
from pressman.exceptions import CatalogCorrupted, PreconditionViolated

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def _rate(catalog: ProductCatalog, mapping, key, what: str):
    try:
        return mapping[key]
    except KeyError:
        logger.error(
            "Catalog %s has no %s rate for %r although the selection is legal",
            catalog.product_id,
            what,
            key,
        )
        raise CatalogCorrupted(
            f"No {what} rate for {key!r}",
            product_id=catalog.product_id,
            rate=what,
            key=list(key) if isinstance(key, tuple) else key,
        ) from None


def _add_on_cost(catalog: ProductCatalog, add_on: AddOn, selection: Selection) -> tuple[int, str]:
    if not add_on.is_page_based:
        return add_on.unit_price_q, add_on.name

    if not add_on.page_step or add_on.page_step <= 0:
        logger.error("Add-on %r of %s has no page step", add_on.name, catalog.product_id)
        raise CatalogCorrupted(
            f"Page-based add-on {add_on.name!r} has no page step",
            product_id=catalog.product_id,
            add_on=add_on.name,
        )
    pages = add_on.relevant_pages(
        selection.print_mode,
        selection.page_count_bw,
        selection.page_count_color,
    )
    units = pages // add_on.page_step
    label = f"{add_on.name} ({units} x {add_on.page_step} pages)"
    return add_on.unit_price_q * units, label


def calculate(catalog: ProductCatalog, selection: Selection) -> PriceBreakdown:
    """
    Price a selection that has already passed the validation gate.

    Page-step divisibility of add-ons is not required here: integer division
    defines the charged units.

    Raises:
        PreconditionViolated: selection is incomplete or invalid (caller bug)
        CatalogCorrupted: a legal selection has no matching rate
    """
    issues = validate(catalog, selection, enforce_page_step=False)
    if issues:
        logger.error(
            "Calculator called with an unvalidated selection for %s: %s",
            catalog.product_id,
            [issue.as_dict() for issue in issues],
        )
        raise PreconditionViolated(
            "Selection must pass validation before pricing",
            product_id=catalog.product_id,
            issues=[issue.as_dict() for issue in issues],
        )

    lines: list[LineItem] = []

    # 1. Pages
    rate = _rate(
        catalog,
        catalog.page_rates,
        (selection.paper_type, selection.paper_weight, str(selection.print_mode)),
        "page",
    )
    pages_bw = selection.page_count_bw * rate.per_page_bw_q
    pages_color = selection.page_count_color * rate.per_page_color_q
    lines.append(
        LineItem(
            "pages_bw",
            f"Black & white pages ({selection.page_count_bw} x {rate.per_page_bw_q})",
            pages_bw,
        )
    )
    lines.append(
        LineItem(
            "pages_color",
            f"Color pages ({selection.page_count_color} x {rate.per_page_color_q})",
            pages_color,
        )
    )

    # 2. Binding, 3. cover
    binding = _rate(catalog, catalog.binding_rates, selection.binding_type, "binding")
    lines.append(LineItem("binding", f"Binding: {selection.binding_type}", binding))
    cover = _rate(
        catalog,
        catalog.cover_rates,
        (selection.binding_type, selection.cover_weight),
        "cover",
    )
    lines.append(LineItem("cover", f"Cover: {selection.cover_weight} g", cover))

    # 4. Add-ons, in catalog order
    add_ons_total = 0
    for add_on in catalog.add_ons:
        if add_on.name not in selection.add_ons:
            continue
        cost, label = _add_on_cost(catalog, add_on, selection)
        add_ons_total += cost
        lines.append(LineItem(f"add_on:{add_on.name}", label, cost))

    # 5-6. Unit price and subtotal
    unit_price = pages_bw + pages_color + binding + cover + add_ons_total
    subtotal = unit_price * selection.quantity
    lines.append(LineItem("subtotal", f"Subtotal ({selection.quantity} x {unit_price})", subtotal))

    # 7. Discount
    match = tier_for(catalog.quantity_discount_tiers, selection.quantity, catalog.product_id)
    discount_amount = Decimal(subtotal) * match.percent / HUNDRED
    lines.append(
        LineItem("discount", f"Quantity discount ({match.percent}%)", Decimal("0") - discount_amount)
    )

    # 8. Profit margin on the discounted subtotal
    exact_total = Decimal(subtotal) - discount_amount
    if catalog.profit_margin_percent:
        profit = exact_total * catalog.profit_margin_percent / HUNDRED
        lines.append(LineItem("profit", f"Margin ({catalog.profit_margin_percent}%)", profit))
        exact_total += profit

    total_price = int(exact_total.to_integral_value(rounding=ROUND_HALF_UP))

    breakdown = {
        "unit_price_q": unit_price,
        "total_price_before_discount_q": subtotal,
        "discount_percent": match.percent,
        "discount_amount": discount_amount,
        "total_price_q": total_price,
        "quantity": selection.quantity,
        "computed_unit_price_q": unit_price,
        "add_ons_total_q": add_ons_total,
        "matched_tier": match.tier,
    }

    # 9. Manual override supersedes discount and margin but keeps them visible
    override = selection.override_unit_price_q
    if override is not None:
        override_total = override * selection.quantity
        lines = [
            LineItem(item.code, item.label, item.amount, superseded=True)
            if item.code in ("discount", "profit")
            else item
            for item in lines
        ]
        lines.append(
            LineItem(
                "override",
                f"Manual unit price {override} (was {unit_price})",
                override_total - total_price,
            )
        )
        breakdown.update(
            unit_price_q=override,
            total_price_q=override_total,
            discount_percent=Decimal("0"),
            discount_amount=Decimal("0"),
            override_applied=True,
        )

    logger.debug(
        "Priced %s: unit=%s total=%s override=%s",
        catalog.product_id,
        breakdown["unit_price_q"],
        breakdown["total_price_q"],
        override is not None,
    )
    return PriceBreakdown(line_items=tuple(lines), **breakdown)
