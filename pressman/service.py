"""
Pressman public API.

CORE (essential):
    PricingService.resolve_options(product_id, partial)    - Allowed options for a partial selection
    PricingService.validate(product_id, selection)         - All violations of a complete selection
    PricingService.calculate_price(product_id, selection)  - Price breakdown or the issues blocking it

ORDERS:
    PricingService.record_quote(product_id, selection, breakdown, user) - Persist an accepted quote

CATALOG:
    PricingService.get_catalog(product_id) - Catalog snapshot
    PricingService.product_ids()           - Configured products
"""

import logging
from typing import TYPE_CHECKING, Any, Mapping

from pressman.conf import pressman_settings
from pressman.engine import calculate, resolve
from pressman.engine import validate as validate_selection
from pressman.engine.types import PriceBreakdown, ProductCatalog, Selection, ValidationIssue
from pressman.exceptions import IncompatibleSelection, PricingError
from pressman.protocols import OptionsResult, QuoteResult
from pressman.registry import registry

if TYPE_CHECKING:
    from pressman.models import Quote

logger = logging.getLogger(__name__)

OVERRIDE_PERMISSION = "pressman.override_quote_price"


class PricingService:
    """
    Pressman public API.

    Uses @classmethod for extensibility. Resolver and gate failures are
    returned as data; only CatalogCorrupted propagates.

    CORE (essential):
        resolve_options(product_id, partial)   - Narrowed options
        validate(product_id, selection)        - ValidationIssue list
        calculate_price(product_id, selection) - QuoteResult

    ORDERS:
        record_quote(...) - Persist a Quote
    """

    # ======================================================================
    # CATALOG
    # ======================================================================

    @classmethod
    def get_catalog(cls, product_id: str) -> ProductCatalog:
        """
        Get the catalog snapshot for a product.

        Raises:
            PricingError: CATALOG_NOT_FOUND
        """
        catalog = registry.get(product_id)
        if catalog is None:
            raise PricingError("CATALOG_NOT_FOUND", product_id=product_id)
        return catalog

    @classmethod
    def product_ids(cls) -> list[str]:
        return registry.product_ids()

    @classmethod
    def _coerce(cls, selection: "Selection | Mapping[str, Any]") -> Selection:
        if isinstance(selection, Selection):
            return selection
        return Selection.from_dict(selection)

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def resolve_options(
        cls,
        product_id: str,
        partial: "Selection | Mapping[str, Any]",
    ) -> OptionsResult:
        """
        Allowed options at every level for a partial selection.

        Args:
            product_id: Catalog to resolve against
            partial: Selection or transport payload (may be incomplete)

        Returns:
            OptionsResult with ``options`` on success, ``error`` otherwise.
            An incompatible field reports its parent and suggestions.
        """
        try:
            catalog = cls.get_catalog(product_id)
            options = resolve(catalog, cls._coerce(partial))
        except IncompatibleSelection as e:
            logger.debug("Incompatible %s=%r for %s", e.field, e.data["value"], product_id)
            return OptionsResult(ok=False, product_id=product_id, error=e.as_dict())
        except PricingError as e:
            return OptionsResult(ok=False, product_id=product_id, error=e.as_dict())
        return OptionsResult(ok=True, product_id=product_id, options=options)

    @classmethod
    def validate(
        cls,
        product_id: str,
        selection: "Selection | Mapping[str, Any]",
    ) -> list[ValidationIssue]:
        """
        Every violation of a complete selection, collected in one pass.

        Returns:
            Empty list when the selection may be priced.
        """
        _, _, issues = cls._gate(product_id, selection)
        return issues

    @classmethod
    def _gate(cls, product_id: str, selection):
        """
        Read the catalog once and run the gate against it.

        Returns (catalog, selection, issues); catalog and selection are None
        when the product or the payload could not be read.
        """
        try:
            catalog = cls.get_catalog(product_id)
        except PricingError as e:
            return None, None, [ValidationIssue("product_id", "catalog_not_found", e.message)]
        try:
            selection = cls._coerce(selection)
        except PricingError as e:
            return catalog, None, [ValidationIssue(e.data.get("field", "selection"), "invalid", e.message)]
        issues = validate_selection(
            catalog,
            selection,
            enforce_page_step=pressman_settings.ENFORCE_ADDON_PAGE_STEP,
        )
        return catalog, selection, issues

    @classmethod
    def calculate_price(
        cls,
        product_id: str,
        selection: "Selection | Mapping[str, Any]",
    ) -> QuoteResult:
        """
        Price a complete selection.

        Runs the validation gate first; the calculator only sees selections
        that passed it.

        Returns:
            QuoteResult with ``breakdown`` on success, ``errors`` otherwise.

        Raises:
            CatalogCorrupted: A legal selection has no rate in the catalog
        """
        catalog, selection, issues = cls._gate(product_id, selection)
        if issues:
            logger.debug("Rejected %s with %d issues", product_id, len(issues))
            return QuoteResult(ok=False, product_id=product_id, errors=issues)

        # Price against the snapshot the gate checked.
        breakdown = calculate(catalog, selection)

        from pressman.signals import quote_calculated

        quote_calculated.send(
            sender=cls,
            product_id=product_id,
            selection=selection,
            breakdown=breakdown,
        )
        return QuoteResult(ok=True, product_id=product_id, breakdown=breakdown)

    # ======================================================================
    # ORDERS
    # ======================================================================

    @classmethod
    def record_quote(
        cls,
        product_id: str,
        selection: "Selection | Mapping[str, Any]",
        breakdown: PriceBreakdown,
        user=None,
    ) -> "Quote":
        """
        Persist an accepted quote exactly as it was priced.

        Args:
            product_id: Catalog the quote was priced against
            selection: The priced selection
            breakdown: Breakdown returned by calculate_price()
            user: Acting user; required to hold the override permission
                when the breakdown carries a manual unit price

        Raises:
            PricingError: OVERRIDE_NOT_PERMITTED
        """
        from pressman.models import Quote

        selection = cls._coerce(selection)
        if breakdown.override_applied and not cls._can_override(user):
            raise PricingError(
                "OVERRIDE_NOT_PERMITTED",
                product_id=product_id,
                user=getattr(user, "pk", None),
            )

        quote = Quote(
            product_id=product_id,
            book_size=selection.book_size,
            selection=selection.as_dict(),
            breakdown=breakdown.as_dict(),
            quantity=breakdown.quantity,
            unit_price_q=breakdown.unit_price_q,
            total_price_q=breakdown.total_price_q,
            override_applied=breakdown.override_applied,
        )
        if user is not None and user.is_authenticated:
            # Attributes the history row to the acting user.
            quote._history_user = user
        quote.save()
        logger.info("Recorded quote %s for %s: %d", quote.uuid, product_id, quote.total_price_q)
        return quote

    @classmethod
    def _can_override(cls, user) -> bool:
        """Override check. Override for custom authorization."""
        return user is not None and user.has_perm(OVERRIDE_PERMISSION)
