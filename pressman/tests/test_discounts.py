"""Tests for quantity discount tier lookup."""

import logging
from decimal import Decimal

import pytest

from pressman.engine import DiscountTier, tier_for

TIERS = (
    DiscountTier(100, 499, Decimal("0")),
    DiscountTier(500, 999, Decimal("5")),
    DiscountTier(1000, None, Decimal("10")),
)


class TestTierFor:
    """Tests for tier_for()."""

    @pytest.mark.parametrize(
        "quantity,percent",
        [
            (100, Decimal("0")),
            (499, Decimal("0")),
            (500, Decimal("5")),
            (750, Decimal("5")),
            (999, Decimal("5")),
            (1000, Decimal("10")),
            (10**6, Decimal("10")),
        ],
    )
    def test_boundaries(self, quantity, percent):
        match = tier_for(TIERS, quantity)
        assert match.matched
        assert match.percent == percent
        assert match.tier.contains(quantity)

    def test_every_legal_quantity_matches_one_tier(self, a5_catalog):
        constraint = a5_catalog.quantity_constraint
        for quantity in range(constraint.minimum, constraint.maximum + 1, constraint.step):
            matching = [t for t in a5_catalog.quantity_discount_tiers if t.contains(quantity)]
            assert len(matching) == 1
            assert tier_for(a5_catalog.quantity_discount_tiers, quantity).tier == matching[0]

    def test_empty_table_is_no_discount(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pressman.engine.discounts"):
            match = tier_for((), 250)
        assert match.percent == Decimal("0")
        assert not match.matched
        assert caplog.records == []


class TestNoTierMatched:
    """A quantity outside every tier falls back to no discount and logs."""

    GAPPED = (
        DiscountTier(100, 199, Decimal("5")),
        DiscountTier(300, None, Decimal("10")),
    )

    @pytest.mark.parametrize("quantity", [50, 250])
    def test_falls_back_and_warns(self, caplog, quantity):
        with caplog.at_level(logging.WARNING, logger="pressman.engine.discounts"):
            match = tier_for(self.GAPPED, quantity, product_id="A5")
        assert match.percent == Decimal("0")
        assert match.tier is None
        assert not match.matched
        assert "NoTierMatched" in caplog.text
        assert "A5" in caplog.text
