"""
Pressman signals.

Signals:
    catalog_reloaded:
        Sent after the catalog registry publishes a new snapshot.

        Kwargs:
            sender: CatalogRegistry class
            product_ids: list[str], products in the new snapshot

    quote_calculated:
        Sent after PricingService.calculate_price() produces a breakdown.

        Kwargs:
            sender: PricingService class
            product_id: str
            selection: Selection
            breakdown: PriceBreakdown

        Example handler::

            from pressman.signals import quote_calculated

            def on_quote(sender, product_id, breakdown, **kwargs):
                logger.info("Quoted %s: %d", product_id, breakdown.total_price_q)

            quote_calculated.connect(on_quote)

    quote_recorded:
        Sent after a Quote is persisted.

        Kwargs:
            sender: Quote class
            instance: The Quote instance
            product_id: str
"""

from django.dispatch import Signal

catalog_reloaded = Signal()
quote_calculated = Signal()
quote_recorded = Signal()
