"""Tests for catalog parsing."""

import copy
from decimal import Decimal

import pytest

from pressman.engine import AddOnKind, DiscountTier, PageRate, PrintMode, parse_catalog
from pressman.exceptions import PricingError
from pressman.tests.catalogs import A4_CATALOG, A5_CATALOG


def raw_a5(**overrides):
    raw = copy.deepcopy(A5_CATALOG)
    raw.update(overrides)
    return raw


class TestParseCatalog:
    """Tests for parse_catalog()."""

    def test_structure(self, a5_catalog):
        assert a5_catalog.product_id == "A5"
        assert a5_catalog.paper_type_names == ("Bond", "Couche")
        assert a5_catalog.get_paper_type("Bond").weight_values == (60, 80)
        assert a5_catalog.get_binding_type("Spiral").cover_weights == (200, 250)
        assert a5_catalog.quantity_constraint.step == 50

    def test_page_rates_per_derived_mode(self, a5_catalog):
        assert a5_catalog.page_rates[("Bond", 80, "bw")] == PageRate(400, 1000)
        assert a5_catalog.page_rates[("Bond", 80, "mixed")] == PageRate(380, 950)
        assert ("Bond", 60, "mixed") not in a5_catalog.page_rates

    def test_rates_are_read_only(self, a5_catalog):
        with pytest.raises(TypeError):
            a5_catalog.binding_rates["Spiral"] = 0

    def test_add_ons(self, a5_catalog):
        gloss = a5_catalog.get_add_on("Gloss lamination")
        assert gloss.kind == AddOnKind.PAGE_BASED
        assert gloss.page_step == 16
        assert a5_catalog.get_add_on("Plastic cover").eligible_bindings == frozenset({"Spiral"})
        assert a5_catalog.get_add_on("Shrink wrap").page_step is None

    def test_literal_mixed_mode_is_derived(self):
        raw = raw_a5(paper_types={"Bond": [{"weight": 60, "print_modes": ["bw", "mixed"], "per_page_bw": 300}]})
        catalog = parse_catalog(raw, product_id="A5")
        assert catalog.get_paper_type("Bond").get_weight(60).print_modes() == (PrintMode.BW,)

    def test_threshold_tiers(self, a4_catalog):
        assert a4_catalog.quantity_discount_tiers == (
            DiscountTier(10, 99, Decimal("0")),
            DiscountTier(100, None, Decimal("5")),
        )
        assert a4_catalog.quantity_constraint.minimum == 10
        assert a4_catalog.profit_margin_percent == Decimal("20")

    def test_forbidden_extras(self):
        raw = raw_a5(restrictions={"forbidden_extras": {"Spiral": ["Shrink wrap"]}})
        catalog = parse_catalog(raw, product_id="A5")
        assert catalog.get_add_on("Shrink wrap").eligible_bindings == frozenset({"Perfect bound"})

    def test_product_id_defaults_to_book_size(self):
        assert parse_catalog(A4_CATALOG).product_id == "A4"


class TestInvalidCatalog:
    """Configuration errors name the offending path."""

    def assert_invalid(self, raw, path_fragment):
        with pytest.raises(PricingError) as exc:
            parse_catalog(raw, product_id="A5")
        assert exc.value.code == "INVALID_CATALOG"
        assert path_fragment in exc.value.data["path"]

    def test_bounded_last_tier(self):
        tiers = [{"min_quantity": 100, "max_quantity": 499, "percent": 0}]
        self.assert_invalid(raw_a5(discount_tiers=tiers), "discount_tiers[0]")

    def test_tier_gap(self):
        tiers = [
            {"min_quantity": 100, "max_quantity": 399, "percent": 0},
            {"min_quantity": 500, "max_quantity": None, "percent": 5},
        ]
        self.assert_invalid(raw_a5(discount_tiers=tiers), "discount_tiers[0]")

    def test_percent_out_of_range(self):
        tiers = [{"min_quantity": 100, "max_quantity": None, "percent": 150}]
        self.assert_invalid(raw_a5(discount_tiers=tiers), "percent")

    def test_missing_color_rate(self):
        raw = raw_a5(paper_types={"Bond": [{"weight": 80, "print_modes": ["color"]}]})
        self.assert_invalid(raw, "paper_types.Bond[0]")

    def test_unknown_print_mode(self):
        raw = raw_a5(paper_types={"Bond": [{"weight": 80, "print_modes": ["sepia"], "per_page_bw": 1}]})
        self.assert_invalid(raw, "print_modes")

    def test_duplicate_weight(self):
        weights = [
            {"weight": 80, "print_modes": ["bw"], "per_page_bw": 1},
            {"weight": 80, "print_modes": ["bw"], "per_page_bw": 2},
        ]
        self.assert_invalid(raw_a5(paper_types={"Bond": weights}), "paper_types.Bond[1]")

    def test_unknown_eligible_binding(self):
        add_ons = [{"name": "Tabs", "price": 100, "eligible_bindings": ["Wire"]}]
        self.assert_invalid(raw_a5(add_ons=add_ons), "eligible_bindings")

    def test_page_based_without_step(self):
        add_ons = [{"name": "Varnish", "price": 100, "kind": "page_based"}]
        self.assert_invalid(raw_a5(add_ons=add_ons), "page_step")

    def test_maximum_below_minimum(self):
        self.assert_invalid(raw_a5(quantity_constraints={"minimum": 100, "maximum": 50}), "quantity_constraints")

    def test_non_integer_price(self):
        bindings = [{"name": "Spiral", "price": "12.5", "cover_weights": {}}]
        self.assert_invalid(raw_a5(bindings=bindings, add_ons=[]), "bindings[0].price")
