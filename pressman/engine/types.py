"""Catalog model and engine value objects.

All money is integer minor units (``_q`` suffix). Discount and profit amounts
stay exact ``Decimal`` until the final total is rounded.
"""

import dataclasses
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from django.db import models
from django.utils.translation import gettext_lazy as _

from pressman.exceptions import PricingError


class PrintMode(models.TextChoices):
    """Print mode. ``mixed`` is derived: offered only when bw and color both are."""

    BW = "bw", _("Black & white")
    COLOR = "color", _("Color")
    MIXED = "mixed", _("Mixed")


class AddOnKind(models.TextChoices):
    FLAT = "flat", _("Flat")
    PAGE_BASED = "page_based", _("Page based")


class PageScope(models.TextChoices):
    """Which pages a page-based add-on counts."""

    ALL = "all", _("All pages")
    BW = "bw", _("Black & white pages")
    COLOR = "color", _("Color pages")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PaperWeight:
    weight: int
    allowed_print_modes: frozenset = frozenset()

    def print_modes(self) -> tuple[PrintMode, ...]:
        """Selectable print modes, ``mixed`` only when both bw and color are allowed."""
        modes = [m for m in (PrintMode.BW, PrintMode.COLOR) if m in self.allowed_print_modes]
        if len(modes) == 2:
            modes.append(PrintMode.MIXED)
        return tuple(modes)


@dataclass(frozen=True)
class PaperType:
    name: str
    weights: tuple[PaperWeight, ...] = ()

    def get_weight(self, weight: int) -> PaperWeight | None:
        for entry in self.weights:
            if entry.weight == weight:
                return entry
        return None

    @property
    def weight_values(self) -> tuple[int, ...]:
        return tuple(w.weight for w in self.weights)


@dataclass(frozen=True)
class BindingType:
    name: str
    cover_weights: tuple[int, ...] = ()


@dataclass(frozen=True)
class AddOn:
    """
    Optional extra service.

    Flat add-ons cost ``unit_price_q`` once per book. Page-based add-ons cost
    ``unit_price_q`` per ``page_step`` pages (integer division). ``page_scope``
    limits the counted pages to one print mode; in mixed mode a scoped add-on
    counts every page only if ``count_all_pages_when_mixed`` is set.
    """

    name: str
    unit_price_q: int
    kind: AddOnKind = AddOnKind.FLAT
    page_step: int | None = None
    eligible_bindings: frozenset = frozenset()
    page_scope: PageScope = PageScope.ALL
    count_all_pages_when_mixed: bool = False

    @property
    def is_page_based(self) -> bool:
        return self.kind == AddOnKind.PAGE_BASED

    def is_eligible(self, binding_type: str | None) -> bool:
        """Empty ``eligible_bindings`` means every binding."""
        if not self.eligible_bindings:
            return True
        return binding_type in self.eligible_bindings

    def relevant_pages(self, print_mode: str, page_count_bw: int, page_count_color: int) -> int:
        if self.page_scope == PageScope.ALL:
            return page_count_bw + page_count_color
        if print_mode == PrintMode.MIXED and self.count_all_pages_when_mixed:
            return page_count_bw + page_count_color
        if self.page_scope == PageScope.BW:
            return page_count_bw
        return page_count_color


@dataclass(frozen=True)
class QuantityConstraint:
    minimum: int = 1
    maximum: int = 0  # 0 = unbounded
    step: int = 1

    @property
    def is_bounded(self) -> bool:
        return self.maximum > 0


@dataclass(frozen=True)
class PageRate:
    per_page_bw_q: int = 0
    per_page_color_q: int = 0


@dataclass(frozen=True)
class DiscountTier:
    min_quantity: int
    max_quantity: int | None  # None = unbounded
    percent: Decimal = Decimal("0")

    def contains(self, quantity: int) -> bool:
        if quantity < self.min_quantity:
            return False
        return self.max_quantity is None or quantity <= self.max_quantity


@dataclass(frozen=True)
class ProductCatalog:
    """
    Compatibility matrix and rates for one product (one book size).

    Immutable: rate mappings are wrapped read-only on construction. A reload
    publishes a new catalog instead of editing this one.
    """

    product_id: str
    book_size: str
    paper_types: tuple[PaperType, ...] = ()
    binding_types: tuple[BindingType, ...] = ()
    add_ons: tuple[AddOn, ...] = ()
    quantity_constraint: QuantityConstraint = field(default_factory=QuantityConstraint)
    page_rates: Mapping[tuple[str, int, str], PageRate] = field(default_factory=dict)
    binding_rates: Mapping[str, int] = field(default_factory=dict)
    cover_rates: Mapping[tuple[str, int], int] = field(default_factory=dict)
    quantity_discount_tiers: tuple[DiscountTier, ...] = ()
    profit_margin_percent: Decimal = Decimal("0")

    def __post_init__(self):
        for name in ("page_rates", "binding_rates", "cover_rates"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        for name in ("paper_types", "binding_types", "add_ons", "quantity_discount_tiers"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def get_paper_type(self, name: str | None) -> PaperType | None:
        for paper in self.paper_types:
            if paper.name == name:
                return paper
        return None

    def get_binding_type(self, name: str | None) -> BindingType | None:
        for binding in self.binding_types:
            if binding.name == name:
                return binding
        return None

    def get_add_on(self, name: str) -> AddOn | None:
        for add_on in self.add_ons:
            if add_on.name == name:
                return add_on
        return None

    @property
    def paper_type_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.paper_types)

    @property
    def binding_type_names(self) -> tuple[str, ...]:
        return tuple(b.name for b in self.binding_types)

    @property
    def add_on_names(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.add_ons)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

# Legacy order-form field names.
SELECTION_ALIASES = {
    "print_type": "print_mode",
    "cover_paper_weight": "cover_weight",
    "extras": "add_ons",
}

REQUIRED_FIELDS = (
    "book_size",
    "paper_type",
    "paper_weight",
    "print_mode",
    "binding_type",
    "cover_weight",
)


def _coerce_int(field_name: str, value: Any, optional: bool = False) -> int | None:
    if value is None or value == "":
        if optional:
            return None
        return 0
    if isinstance(value, bool):
        raise PricingError("INVALID_SELECTION_DATA", field=field_name, value=value)
    try:
        number = Decimal(str(value).strip())
    except ArithmeticError:
        raise PricingError("INVALID_SELECTION_DATA", field=field_name, value=value) from None
    if not number.is_finite() or number != number.to_integral_value():
        raise PricingError("INVALID_SELECTION_DATA", field=field_name, value=value)
    return int(number)


def _coerce_str(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class Selection:
    """
    Caller's in-progress or complete choice for one order line.

    Stateless value object; build a new one with ``replace()``.
    """

    book_size: str = ""
    paper_type: str | None = None
    paper_weight: int | None = None
    print_mode: str | None = None
    page_count_bw: int = 0
    page_count_color: int = 0
    binding_type: str | None = None
    cover_weight: int | None = None
    add_ons: frozenset = frozenset()
    quantity: int = 0
    override_unit_price_q: int | None = None

    def __post_init__(self):
        if not isinstance(self.add_ons, frozenset):
            object.__setattr__(self, "add_ons", frozenset(self.add_ons))

    @property
    def total_pages(self) -> int:
        return self.page_count_bw + self.page_count_color

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if getattr(self, name) in (None, "")]

    @property
    def is_complete(self) -> bool:
        return (
            not self.missing_fields()
            and self.page_count_bw >= 0
            and self.page_count_color >= 0
            and self.total_pages > 0
            and self.quantity > 0
        )

    def replace(self, **changes) -> "Selection":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Selection":
        """
        Build a Selection from a transport payload.

        Raises:
            PricingError: INVALID_SELECTION_DATA naming the malformed field
        """
        if not isinstance(data, Mapping):
            raise PricingError("INVALID_SELECTION_DATA", field="selection", value=data)

        # Canonical keys win over their legacy aliases.
        values = {}
        for key, value in data.items():
            if key in SELECTION_ALIASES:
                values.setdefault(SELECTION_ALIASES[key], value)
        for key, value in data.items():
            if key not in SELECTION_ALIASES:
                values[key] = value

        add_ons = values.get("add_ons") or ()
        if isinstance(add_ons, str):
            add_ons = [add_ons]
        if not isinstance(add_ons, (list, tuple, set, frozenset)):
            raise PricingError("INVALID_SELECTION_DATA", field="add_ons", value=add_ons)

        return cls(
            book_size=_coerce_str(values.get("book_size")) or "",
            paper_type=_coerce_str(values.get("paper_type")),
            paper_weight=_coerce_int("paper_weight", values.get("paper_weight"), optional=True),
            print_mode=_coerce_str(values.get("print_mode")),
            page_count_bw=_coerce_int("page_count_bw", values.get("page_count_bw")),
            page_count_color=_coerce_int("page_count_color", values.get("page_count_color")),
            binding_type=_coerce_str(values.get("binding_type")),
            cover_weight=_coerce_int("cover_weight", values.get("cover_weight"), optional=True),
            add_ons=frozenset(name for name in map(_coerce_str, add_ons) if name),
            quantity=_coerce_int("quantity", values.get("quantity")),
            override_unit_price_q=_coerce_int(
                "override_unit_price_q", values.get("override_unit_price_q"), optional=True
            ),
        )

    def as_dict(self) -> dict:
        return {
            "book_size": self.book_size,
            "paper_type": self.paper_type,
            "paper_weight": self.paper_weight,
            "print_mode": None if self.print_mode is None else str(self.print_mode),
            "page_count_bw": self.page_count_bw,
            "page_count_color": self.page_count_color,
            "binding_type": self.binding_type,
            "cover_weight": self.cover_weight,
            "add_ons": sorted(self.add_ons),
            "quantity": self.quantity,
            "override_unit_price_q": self.override_unit_price_q,
        }


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


def _json_amount(amount) -> int | str:
    if isinstance(amount, Decimal):
        return str(amount)
    return amount


@dataclass(frozen=True)
class ValidationIssue:
    """One business-rule violation; returned as data, never raised."""

    field: str
    code: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class LineItem:
    code: str
    label: str
    amount: int | Decimal
    superseded: bool = False

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "label": self.label,
            "amount": _json_amount(self.amount),
            "superseded": self.superseded,
        }


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized price. Produced fresh per calculation; persisted verbatim by the caller."""

    unit_price_q: int
    total_price_before_discount_q: int
    discount_percent: Decimal
    discount_amount: Decimal
    total_price_q: int
    line_items: tuple[LineItem, ...]
    quantity: int
    computed_unit_price_q: int
    add_ons_total_q: int = 0
    override_applied: bool = False
    matched_tier: DiscountTier | None = None

    def line_item(self, code: str) -> LineItem | None:
        for item in self.line_items:
            if item.code == code:
                return item
        return None

    def as_dict(self) -> dict:
        tier = self.matched_tier
        return {
            "unit_price_q": self.unit_price_q,
            "total_price_before_discount_q": self.total_price_before_discount_q,
            "discount_percent": str(self.discount_percent),
            "discount_amount": str(self.discount_amount),
            "total_price_q": self.total_price_q,
            "quantity": self.quantity,
            "computed_unit_price_q": self.computed_unit_price_q,
            "add_ons_total_q": self.add_ons_total_q,
            "override_applied": self.override_applied,
            "matched_tier": None if tier is None else {
                "min_quantity": tier.min_quantity,
                "max_quantity": tier.max_quantity,
                "percent": str(tier.percent),
            },
            "line_items": [item.as_dict() for item in self.line_items],
        }


def _add_on_as_dict(add_on: AddOn) -> dict:
    return {
        "name": add_on.name,
        "unit_price_q": add_on.unit_price_q,
        "kind": str(add_on.kind),
        "page_step": add_on.page_step,
    }


@dataclass(frozen=True)
class AllowedOptions:
    """
    What is still selectable at each cascade level.

    The narrowed fields (``paper_weights``, ``print_modes``, ``cover_weights``,
    ``add_ons``) follow the current selection; the ``*_by_*`` maps cover every
    parent so a client can render the whole cascade at once.
    """

    paper_types: tuple[str, ...]
    paper_weights: tuple[int, ...]
    print_modes: tuple[str, ...]
    binding_types: tuple[str, ...]
    cover_weights: tuple[int, ...]
    add_ons: tuple[AddOn, ...]
    disabled_add_ons: tuple[str, ...]
    weights_by_paper_type: Mapping[str, tuple[int, ...]]
    print_modes_by_weight: Mapping[str, Mapping[int, tuple[str, ...]]]
    cover_weights_by_binding: Mapping[str, tuple[int, ...]]
    add_ons_by_binding: Mapping[str, tuple[AddOn, ...]]

    @property
    def add_on_names(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.add_ons)

    def as_dict(self) -> dict:
        return {
            "allowed_paper_types": list(self.paper_types),
            "allowed_paper_weights": {k: list(v) for k, v in self.weights_by_paper_type.items()},
            "allowed_print_modes": {
                paper: {str(weight): [str(m) for m in modes] for weight, modes in by_weight.items()}
                for paper, by_weight in self.print_modes_by_weight.items()
            },
            "allowed_binding_types": list(self.binding_types),
            "allowed_cover_weights": {k: list(v) for k, v in self.cover_weights_by_binding.items()},
            "allowed_add_ons": {
                binding: [_add_on_as_dict(a) for a in add_ons]
                for binding, add_ons in self.add_ons_by_binding.items()
            },
            "selection": {
                "paper_weights": list(self.paper_weights),
                "print_modes": [str(m) for m in self.print_modes],
                "cover_weights": list(self.cover_weights),
                "add_ons": [_add_on_as_dict(a) for a in self.add_ons],
                "disabled_add_ons": list(self.disabled_add_ons),
            },
        }
