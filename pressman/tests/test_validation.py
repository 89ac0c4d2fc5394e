"""Tests for the validation gate."""

import pytest

from pressman.engine import QuantityConstraint, Selection, resolve, validate
from pressman.engine.validation import check_quantity
from pressman.exceptions import IncompatibleSelection
from pressman.tests.catalogs import legal_selections


def codes(issues):
    return [(issue.field, issue.code) for issue in issues]


class TestQuantity:
    """Bounds and step of the quantity."""

    CONSTRAINT = QuantityConstraint(minimum=100, maximum=5000, step=50)

    def test_off_step_rejected(self):
        assert codes(check_quantity(self.CONSTRAINT, 120)) == [("quantity", "quantity_step")]

    @pytest.mark.parametrize("quantity", [100, 150, 5000])
    def test_on_step_accepted(self, quantity):
        assert check_quantity(self.CONSTRAINT, quantity) == []

    def test_below_minimum(self):
        assert codes(check_quantity(self.CONSTRAINT, 50)) == [("quantity", "quantity_below_minimum")]

    def test_above_maximum(self):
        assert codes(check_quantity(self.CONSTRAINT, 5050)) == [("quantity", "quantity_above_maximum")]

    @pytest.mark.parametrize("quantity", [0, -100])
    def test_non_positive(self, quantity):
        assert codes(check_quantity(self.CONSTRAINT, quantity)) == [("quantity", "invalid")]

    def test_unbounded_maximum(self):
        assert check_quantity(QuantityConstraint(minimum=1, maximum=0, step=1), 10**6) == []

    def test_step_measured_from_minimum(self, a5_catalog, selection):
        assert codes(validate(a5_catalog, selection.replace(quantity=120))) == [("quantity", "quantity_step")]
        assert validate(a5_catalog, selection.replace(quantity=150)) == []


class TestPages:
    """Page counts against the print mode."""

    def test_pages_required(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(page_count_bw=0))
        assert codes(issues) == [("page_count", "pages_required")]

    def test_negative_pages(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(page_count_color=-4))
        assert ("page_count_color", "invalid") in codes(issues)

    def test_color_pages_in_bw_job(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(page_count_color=8))
        assert codes(issues) == [("page_count_color", "print_mode_mismatch")]

    def test_bw_pages_in_color_job(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(print_mode="color", page_count_color=8))
        assert codes(issues) == [("page_count_bw", "print_mode_mismatch")]

    def test_mixed_job_takes_both(self, a5_catalog, selection):
        assert validate(a5_catalog, selection.replace(print_mode="mixed", page_count_color=16)) == []


class TestAddOns:
    """Add-on eligibility and page steps."""

    def test_ineligible_add_on_rejected(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(add_ons={"Plastic cover"}))
        assert codes(issues) == [("add_ons", "add_on_not_allowed")]

    def test_eligible_add_on_accepted(self, a5_catalog, selection):
        spiral = selection.replace(binding_type="Spiral", cover_weight=200, add_ons={"Plastic cover"})
        assert validate(a5_catalog, spiral) == []

    def test_unknown_add_on(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(add_ons={"Gold foil"}))
        assert codes(issues) == [("add_ons", "unknown_add_on")]

    def test_page_step_enforced(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(add_ons={"Gloss lamination"}))
        assert codes(issues) == [("add_ons", "page_step")]

    def test_page_step_not_enforced(self, a5_catalog, selection):
        issues = validate(a5_catalog, selection.replace(add_ons={"Gloss lamination"}), enforce_page_step=False)
        assert issues == []

    def test_page_step_on_multiple(self, a5_catalog, selection):
        assert validate(a5_catalog, selection.replace(page_count_bw=208, add_ons={"Gloss lamination"})) == []

    def test_scoped_add_on_counts_its_pages(self, a5_catalog, selection):
        """Color proof counts color pages only: 0 color pages is a whole step."""
        assert validate(a5_catalog, selection.replace(add_ons={"Color proof"})) == []


class TestCollectsAllIssues:
    """Every check runs; all violations come back together."""

    def test_multiple_issues(self, a5_catalog, selection):
        bad = selection.replace(
            paper_weight=115,
            quantity=120,
            add_ons={"Plastic cover"},
            override_unit_price_q=-1,
        )
        assert codes(validate(a5_catalog, bad)) == [
            ("quantity", "quantity_step"),
            ("paper_weight", "incompatible"),
            ("print_mode", "incompatible"),
            ("add_ons", "add_on_not_allowed"),
            ("override_unit_price_q", "invalid"),
        ]

    def test_required_fields(self, a5_catalog):
        issues = validate(a5_catalog, Selection(book_size="A5", page_count_bw=10, quantity=100))
        assert [i.field for i in issues if i.code == "required"] == [
            "paper_type",
            "paper_weight",
            "print_mode",
            "binding_type",
            "cover_weight",
        ]


class TestResolverGateEquivalence:
    """The gate accepts exactly what the resolver allows."""

    def test_every_legal_selection_passes(self, a5_catalog):
        selections = list(legal_selections(a5_catalog))
        assert len(selections) == 32
        for selection in selections:
            options = resolve(a5_catalog, selection)
            with_add_ons = selection.replace(add_ons=frozenset(options.add_on_names))
            assert validate(a5_catalog, with_add_ons) == [], with_add_ons

    def test_every_swapped_print_mode_fails_both(self, a5_catalog, selection):
        for paper in a5_catalog.paper_types:
            for weight in paper.weights:
                for mode in {"bw", "color", "mixed"} - {str(m) for m in weight.print_modes()}:
                    swapped = selection.replace(
                        paper_type=paper.name,
                        paper_weight=weight.weight,
                        print_mode=mode,
                        page_count_bw=16,
                        page_count_color=16 if mode != "bw" else 0,
                    )
                    with pytest.raises(IncompatibleSelection):
                        resolve(a5_catalog, swapped)
                    assert ("print_mode", "incompatible") in codes(validate(a5_catalog, swapped))

    def test_every_swapped_cover_weight_fails_both(self, a5_catalog, selection):
        all_weights = {w for b in a5_catalog.binding_types for w in b.cover_weights}
        for binding in a5_catalog.binding_types:
            for cover_weight in all_weights - set(binding.cover_weights):
                swapped = selection.replace(binding_type=binding.name, cover_weight=cover_weight)
                with pytest.raises(IncompatibleSelection):
                    resolve(a5_catalog, swapped)
                assert ("cover_weight", "incompatible") in codes(validate(a5_catalog, swapped))

    def assert_same_verdict(self, catalog, selection):
        try:
            resolve(catalog, selection)
        except IncompatibleSelection:
            resolver_accepts = False
        else:
            resolver_accepts = True
        gate_accepts = not [i for i in validate(catalog, selection) if i.code == "incompatible"]
        assert resolver_accepts == gate_accepts, selection
        return resolver_accepts

    def test_every_swapped_paper_type(self, a5_catalog):
        names = list(a5_catalog.paper_type_names) + ["Kraft"]
        rejected = 0
        for selection in legal_selections(a5_catalog):
            for name in names:
                if not self.assert_same_verdict(a5_catalog, selection.replace(paper_type=name)):
                    rejected += 1
        assert rejected > 0

    def test_every_swapped_paper_weight(self, a5_catalog, selection):
        all_weights = {w for p in a5_catalog.paper_types for w in p.weight_values}
        for paper in a5_catalog.paper_types:
            for weight in all_weights - set(paper.weight_values):
                swapped = selection.replace(paper_type=paper.name, paper_weight=weight)
                with pytest.raises(IncompatibleSelection):
                    resolve(a5_catalog, swapped)
                assert ("paper_weight", "incompatible") in codes(validate(a5_catalog, swapped))

    def test_every_swapped_binding_type(self, a5_catalog):
        names = list(a5_catalog.binding_type_names) + ["Wire"]
        rejected = 0
        for selection in legal_selections(a5_catalog):
            for name in names:
                if not self.assert_same_verdict(a5_catalog, selection.replace(binding_type=name)):
                    rejected += 1
        assert rejected > 0

    def test_every_restricted_add_on(self, a5_catalog):
        for selection in legal_selections(a5_catalog):
            options = resolve(a5_catalog, selection)
            for add_on in a5_catalog.add_ons:
                if add_on.is_eligible(selection.binding_type):
                    continue
                assert add_on.name not in options.add_on_names
                assert add_on.name in options.disabled_add_ons
                issues = validate(a5_catalog, selection.replace(add_ons={add_on.name}))
                assert ("add_ons", "add_on_not_allowed") in codes(issues)
