"""Pytest fixtures for Pressman tests."""

import pytest

from pressman.conf import reset_catalog_backend
from pressman.engine import Selection, parse_catalog
from pressman.registry import registry
from pressman.tests.catalogs import A4_CATALOG, A5_CATALOG


@pytest.fixture(autouse=True)
def reset_pressman():
    """Start every test with a fresh backend and an empty registry."""
    reset_catalog_backend()
    registry.clear()
    yield
    reset_catalog_backend()
    registry.clear()


@pytest.fixture
def a5_catalog():
    """A5 catalog with tiers, eligibility rules and page-based add-ons."""
    return parse_catalog(A5_CATALOG, product_id="A5")


@pytest.fixture
def a4_catalog():
    """A4 catalog with threshold tiers and a profit margin."""
    return parse_catalog(A4_CATALOG, product_id="A4")


@pytest.fixture
def selection():
    """Valid A5 selection: 200 bw pages on Bond 80, perfect bound, 100 copies.

    Unit price: 200 x 400 + 5000 + 1500 = 86500.
    """
    return Selection(
        book_size="A5",
        paper_type="Bond",
        paper_weight=80,
        print_mode="bw",
        page_count_bw=200,
        binding_type="Perfect bound",
        cover_weight=250,
        quantity=100,
    )


@pytest.fixture
def selection_payload(selection):
    """Same selection as a transport payload."""
    return selection.as_dict()
