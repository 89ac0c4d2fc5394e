"""
Quantity discount tier lookup.

Tiers are ordered by ``min_quantity`` and contiguous; the last one is
unbounded. A quantity outside every tier is a catalog authoring defect: it is
logged as ``NoTierMatched`` and priced without discount.
"""

import bisect
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from pressman.engine.types import DiscountTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierMatch:
    percent: Decimal
    tier: DiscountTier | None = None
    matched: bool = False


NO_DISCOUNT = TierMatch(percent=Decimal("0"))


def tier_for(
    tiers: Sequence[DiscountTier],
    quantity: int,
    product_id: str | None = None,
) -> TierMatch:
    """
    Return the tier whose [min_quantity, max_quantity] contains quantity.

    An empty table means the product has no quantity discounts: no warning.
    """
    if not tiers:
        return NO_DISCOUNT

    starts = [tier.min_quantity for tier in tiers]
    index = bisect.bisect_right(starts, quantity) - 1
    if index >= 0 and tiers[index].contains(quantity):
        tier = tiers[index]
        return TierMatch(percent=tier.percent, tier=tier, matched=True)

    logger.warning(
        "NoTierMatched: quantity=%s product_id=%s tiers=%s; falling back to zero discount",
        quantity,
        product_id,
        [(t.min_quantity, t.max_quantity) for t in tiers],
    )
    return NO_DISCOUNT
