"""
Catalog loader.

Parses a raw configuration mapping (as stored in settings or JSON) into a
typed, immutable ProductCatalog. Runs once at load time; the engine never
sees raw strings.

Raw format:

    {
        "book_size": "A5",
        "paper_types": {
            "Bond": [
                {"weight": 80, "print_modes": ["bw", "color"],
                 "per_page_bw": 400, "per_page_color": 1000,
                 "mode_rates": {"mixed": {"per_page_bw": 380, "per_page_color": 950}}},
            ],
        },
        "bindings": [
            {"name": "Perfect bound", "price": 5000,
             "cover_weights": {"250": 1500, "300": 1800}},
        ],
        "add_ons": [
            {"name": "Gloss lamination", "price": 5000, "kind": "page_based",
             "page_step": 16, "eligible_bindings": [], "page_scope": "all"},
        ],
        "quantity_constraints": {"minimum": 100, "maximum": 5000, "step": 50},
        "discount_tiers": [
            {"min_quantity": 100, "max_quantity": 499, "percent": "0"},
            {"min_quantity": 500, "max_quantity": None, "percent": "5"},
        ],
        "profit_margin_percent": "0",
    }

Also accepted: ``discount_tiers`` as a threshold map ``{"500": 5, "1000": 10}``,
``quantity_constraints`` with ``minimum_quantity``/``maximum_quantity``/
``quantity_step`` keys, and ``restrictions.forbidden_extras`` per binding.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from pressman.engine.types import (
    AddOn,
    AddOnKind,
    BindingType,
    DiscountTier,
    PageRate,
    PageScope,
    PaperType,
    PaperWeight,
    PrintMode,
    ProductCatalog,
    QuantityConstraint,
)
from pressman.exceptions import PricingError


def _invalid(product_id: str, path: str, message: str) -> PricingError:
    return PricingError(
        "INVALID_CATALOG",
        f"{product_id}: {path}: {message}",
        product_id=product_id,
        path=path,
    )


def _integer(product_id: str, path: str, value: Any, minimum: int = 0) -> int:
    if isinstance(value, bool):
        raise _invalid(product_id, path, f"expected an integer, got {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise _invalid(product_id, path, f"expected an integer, got {value!r}") from None
    if not number.is_finite() or number != number.to_integral_value():
        raise _invalid(product_id, path, f"expected an integer, got {value!r}")
    if number < minimum:
        raise _invalid(product_id, path, f"must be >= {minimum}")
    return int(number)


def _percent(product_id: str, path: str, value: Any) -> Decimal:
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise _invalid(product_id, path, f"expected a percentage, got {value!r}") from None
    if not number.is_finite() or not (0 <= number <= 100):
        raise _invalid(product_id, path, "percentage must be between 0 and 100")
    return number


def _choice(product_id: str, path: str, value: Any, choices) -> str:
    value = str(value).strip().lower()
    if value not in choices.values:
        raise _invalid(product_id, path, f"{value!r} is not one of {choices.values}")
    return choices(value)


def _parse_paper_types(product_id: str, raw: Mapping) -> tuple[list[PaperType], dict]:
    papers = []
    page_rates = {}
    for name, weights in raw.items():
        name = str(name).strip()
        path = f"paper_types.{name}"
        if not name:
            raise _invalid(product_id, "paper_types", "empty paper type name")
        if not isinstance(weights, (list, tuple)):
            raise _invalid(product_id, path, "expected a list of weights")

        entries = []
        seen = set()
        for i, entry in enumerate(weights):
            entry_path = f"{path}[{i}]"
            weight = _integer(product_id, f"{entry_path}.weight", entry.get("weight"), minimum=1)
            if weight in seen:
                raise _invalid(product_id, entry_path, f"duplicate weight {weight}")
            seen.add(weight)

            modes = frozenset(
                _choice(product_id, f"{entry_path}.print_modes", m, PrintMode)
                for m in entry.get("print_modes", ())
            )
            paper_weight = PaperWeight(weight=weight, allowed_print_modes=modes)
            entries.append(paper_weight)

            default_bw = entry.get("per_page_bw")
            default_color = entry.get("per_page_color")
            if PrintMode.BW in modes and default_bw is None:
                raise _invalid(product_id, entry_path, "per_page_bw is required for bw printing")
            if PrintMode.COLOR in modes and default_color is None:
                raise _invalid(product_id, entry_path, "per_page_color is required for color printing")

            mode_rates = entry.get("mode_rates") or {}
            for mode in paper_weight.print_modes():
                rates = mode_rates.get(str(mode), {})
                page_rates[(name, weight, str(mode))] = PageRate(
                    per_page_bw_q=_integer(
                        product_id,
                        f"{entry_path}.per_page_bw",
                        rates.get("per_page_bw", default_bw or 0),
                    ),
                    per_page_color_q=_integer(
                        product_id,
                        f"{entry_path}.per_page_color",
                        rates.get("per_page_color", default_color or 0),
                    ),
                )

        if name in {p.name for p in papers}:
            raise _invalid(product_id, path, "duplicate paper type")
        papers.append(PaperType(name=name, weights=tuple(entries)))
    return papers, page_rates


def _parse_bindings(product_id: str, raw) -> tuple[list[BindingType], dict, dict]:
    bindings = []
    binding_rates = {}
    cover_rates = {}
    for i, entry in enumerate(raw):
        path = f"bindings[{i}]"
        name = str(entry.get("name", "")).strip()
        if not name:
            raise _invalid(product_id, path, "binding name is required")
        if name in binding_rates:
            raise _invalid(product_id, path, f"duplicate binding {name!r}")
        binding_rates[name] = _integer(product_id, f"{path}.price", entry.get("price", 0))

        weights = []
        for weight, price in (entry.get("cover_weights") or {}).items():
            weight = _integer(product_id, f"{path}.cover_weights", weight, minimum=1)
            cover_rates[(name, weight)] = _integer(product_id, f"{path}.cover_weights.{weight}", price)
            weights.append(weight)
        bindings.append(BindingType(name=name, cover_weights=tuple(weights)))
    return bindings, binding_rates, cover_rates


def _parse_add_ons(product_id: str, raw, binding_names: list[str], forbidden: Mapping) -> list[AddOn]:
    add_ons = []
    for i, entry in enumerate(raw):
        path = f"add_ons[{i}]"
        name = str(entry.get("name", "")).strip()
        if not name:
            raise _invalid(product_id, path, "add-on name is required")
        if name in {a.name for a in add_ons}:
            raise _invalid(product_id, path, f"duplicate add-on {name!r}")

        kind = _choice(product_id, f"{path}.kind", entry.get("kind", AddOnKind.FLAT), AddOnKind)
        page_step = None
        if kind == AddOnKind.PAGE_BASED:
            page_step = _integer(product_id, f"{path}.page_step", entry.get("page_step"), minimum=1)

        eligible = set(entry.get("eligible_bindings") or ())
        unknown = eligible - set(binding_names)
        if unknown:
            raise _invalid(product_id, f"{path}.eligible_bindings", f"unknown bindings {sorted(unknown)}")
        if not eligible:
            allowed = {b for b in binding_names if name not in forbidden.get(b, ())}
            if allowed != set(binding_names):
                eligible = allowed

        add_ons.append(
            AddOn(
                name=name,
                unit_price_q=_integer(product_id, f"{path}.price", entry.get("price", 0)),
                kind=kind,
                page_step=page_step,
                eligible_bindings=frozenset(eligible),
                page_scope=_choice(
                    product_id, f"{path}.page_scope", entry.get("page_scope", PageScope.ALL), PageScope
                ),
                count_all_pages_when_mixed=bool(entry.get("count_all_pages_when_mixed", False)),
            )
        )
    return add_ons


def _parse_quantity(product_id: str, raw: Mapping) -> QuantityConstraint:
    minimum = _integer(
        product_id, "quantity_constraints.minimum", raw.get("minimum", raw.get("minimum_quantity", 1))
    )
    maximum = _integer(
        product_id, "quantity_constraints.maximum", raw.get("maximum", raw.get("maximum_quantity", 0))
    )
    step = _integer(product_id, "quantity_constraints.step", raw.get("step", raw.get("quantity_step", 1)))
    if maximum and maximum < minimum:
        raise _invalid(product_id, "quantity_constraints", "maximum is below minimum")
    return QuantityConstraint(minimum=minimum, maximum=maximum, step=step)


def _tiers_from_thresholds(product_id: str, raw: Mapping, minimum: int) -> list[DiscountTier]:
    """Threshold map {min_quantity: percent} into contiguous tiers."""
    thresholds = sorted(
        (_integer(product_id, "discount_tiers", q, minimum=1), _percent(product_id, f"discount_tiers.{q}", p))
        for q, p in raw.items()
    )
    tiers = []
    start = max(minimum, 1)
    if thresholds and thresholds[0][0] > start:
        tiers.append(DiscountTier(start, thresholds[0][0] - 1, Decimal("0")))
    for i, (quantity, percent) in enumerate(thresholds):
        upper = thresholds[i + 1][0] - 1 if i + 1 < len(thresholds) else None
        tiers.append(DiscountTier(quantity, upper, percent))
    return tiers


def _parse_tiers(product_id: str, raw, minimum: int) -> list[DiscountTier]:
    if isinstance(raw, Mapping):
        tiers = _tiers_from_thresholds(product_id, raw, minimum)
    else:
        tiers = []
        for i, entry in enumerate(raw):
            path = f"discount_tiers[{i}]"
            upper = entry.get("max_quantity")
            tiers.append(
                DiscountTier(
                    min_quantity=_integer(product_id, f"{path}.min_quantity", entry.get("min_quantity")),
                    max_quantity=None if upper is None else _integer(product_id, f"{path}.max_quantity", upper),
                    percent=_percent(product_id, f"{path}.percent", entry.get("percent", 0)),
                )
            )

    for i, tier in enumerate(tiers):
        path = f"discount_tiers[{i}]"
        is_last = i == len(tiers) - 1
        if tier.max_quantity is not None and tier.max_quantity < tier.min_quantity:
            raise _invalid(product_id, path, "max_quantity is below min_quantity")
        if is_last and tier.max_quantity is not None:
            raise _invalid(product_id, path, "last tier must be unbounded")
        if not is_last:
            if tier.max_quantity is None:
                raise _invalid(product_id, path, "only the last tier may be unbounded")
            if tier.max_quantity + 1 != tiers[i + 1].min_quantity:
                raise _invalid(product_id, path, "tiers must be contiguous and non-overlapping")
    return tiers


def parse_catalog(raw: Mapping[str, Any], product_id: str | None = None) -> ProductCatalog:
    """
    Parse and validate a raw catalog configuration.

    Args:
        raw: Raw configuration mapping
        product_id: Catalog key (defaults to the book size)

    Returns:
        Immutable ProductCatalog

    Raises:
        PricingError: INVALID_CATALOG naming the offending path
    """
    book_size = str(raw.get("book_size") or product_id or "").strip()
    product_id = product_id or book_size
    if not book_size:
        raise _invalid(product_id or "?", "book_size", "book_size is required")

    papers, page_rates = _parse_paper_types(product_id, raw.get("paper_types") or {})
    bindings, binding_rates, cover_rates = _parse_bindings(product_id, raw.get("bindings") or ())
    forbidden = (raw.get("restrictions") or {}).get("forbidden_extras") or {}
    add_ons = _parse_add_ons(
        product_id,
        raw.get("add_ons") or (),
        [b.name for b in bindings],
        forbidden,
    )
    quantity = _parse_quantity(product_id, raw.get("quantity_constraints") or {})
    tiers = _parse_tiers(product_id, raw.get("discount_tiers") or (), quantity.minimum)

    return ProductCatalog(
        product_id=product_id,
        book_size=book_size,
        paper_types=tuple(papers),
        binding_types=tuple(bindings),
        add_ons=tuple(add_ons),
        quantity_constraint=quantity,
        page_rates=page_rates,
        binding_rates=binding_rates,
        cover_rates=cover_rates,
        quantity_discount_tiers=tuple(tiers),
        profit_margin_percent=_percent(product_id, "profit_margin_percent", raw.get("profit_margin_percent", 0)),
    )
