"""
Cross-sell advisor: market-basket mining over order line items.

Basket statistics
-----------------
    item_counts[a]      = number of orders containing sku a (not units)
    co_occurrence[a][b] = number of orders containing both a and b
                          (symmetric; a sku repeated within one order
                          counts once)

Association measures (primary a, related b, N = total orders)
-------------------------------------------------------------
    confidence = co_occurrence[a][b] / item_counts[a]          ≈ P(b | a)
    lift       = co_occurrence[a][b] / (item_counts[a] × item_counts[b] / N)

A pair is kept when confidence > 0.10 AND lift > 1.20, and only primaries
seen in at least ``min_support`` (5) orders are considered.  Thresholds use
the raw confidence; everything after uses the published value, rounded half
up to 2 places.  Kept items are ranked by published confidence and the top
three are published.

    expected_uplift = round(mean published confidence of all kept items × 25)

Output is sorted by expected uplift descending, stable for ties.

Cost: building co-occurrence is O(orders × basket_size²).  Very large order
volumes should be sampled or pre-aggregated before calling.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

from commerce_advisor.config import CrossSellConfig
from commerce_advisor.models.commerce import Order
from commerce_advisor.models.recommendation import (
    CrossSellRecommendation,
    RecommendedProduct,
)

logger = logging.getLogger(__name__)


@dataclass
class BasketStats:
    """Support counts mined from a set of orders.

    Attributes:
        total_orders:  Number of orders scanned (including empty ones).
        item_counts:   sku → orders containing it.
        co_occurrence: sku → (sku → orders containing both).
        names:         sku → first display name seen.
    """

    total_orders:  int = 0
    item_counts:   dict[str, int] = field(default_factory=dict)
    co_occurrence: dict[str, dict[str, int]] = field(default_factory=dict)
    names:         dict[str, str] = field(default_factory=dict)

    def confidence(self, primary: str, related: str) -> float:
        """P(related | primary); 0.0 if ``primary`` was never seen."""
        primary_count = self.item_counts.get(primary, 0)
        if primary_count == 0:
            return 0.0
        return self.co_occurrence.get(primary, {}).get(related, 0) / primary_count

    def lift(self, primary: str, related: str) -> float:
        """Observed over expected-under-independence co-occurrence."""
        expected = (
            self.item_counts.get(primary, 0)
            * self.item_counts.get(related, 0)
            / self.total_orders
        ) if self.total_orders else 0.0
        if expected == 0:
            return 0.0
        return self.co_occurrence.get(primary, {}).get(related, 0) / expected


def build_basket_stats(orders: Sequence[Order]) -> BasketStats:
    """Count item support and pairwise co-occurrence across ``orders``."""
    item_counts: dict[str, int] = defaultdict(int)
    co_occurrence: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    names: dict[str, str] = {}

    for order in orders:
        skus: list[str] = []
        for item in order.items:
            names.setdefault(item.sku, item.name)
            if item.sku not in skus:
                skus.append(item.sku)

        for sku in skus:
            item_counts[sku] += 1

        for i, first in enumerate(skus):
            for second in skus[i + 1:]:
                co_occurrence[first][second] += 1
                co_occurrence[second][first] += 1

    return BasketStats(
        total_orders=len(orders),
        item_counts=dict(item_counts),
        co_occurrence={sku: dict(related) for sku, related in co_occurrence.items()},
        names=names,
    )


def generate_cross_sell_recommendations(
    orders: Sequence[Order],
    config: CrossSellConfig | None = None,
) -> list[CrossSellRecommendation]:
    """Mine co-purchase pairings, highest expected uplift first.

    Args:
        orders: Orders with their line items.
        config: Thresholds; defaults to ``CrossSellConfig()``.

    Returns:
        One recommendation per primary sku with at least one kept pairing.
    """
    cfg = config or CrossSellConfig()
    stats = build_basket_stats(orders)
    recommendations: list[CrossSellRecommendation] = []

    for primary, related_counts in stats.co_occurrence.items():
        if stats.item_counts[primary] < cfg.min_support:
            continue

        # (related sku, raw confidence, published 2-dp confidence)
        kept: list[tuple[str, float, float]] = []
        for related in related_counts:
            confidence = stats.confidence(primary, related)
            lift       = stats.lift(primary, related)
            if confidence > cfg.min_confidence and lift > cfg.min_lift:
                kept.append((related, confidence, _round_half_up(confidence * 100) / 100))

        if not kept:
            continue

        kept.sort(key=lambda item: item[2], reverse=True)
        mean_confidence = sum(published for _, _, published in kept) / len(kept)

        products = [
            RecommendedProduct(
                sku=related,
                name=stats.names.get(related, related),
                confidence=published,
                reason=(
                    f"{_round_half_up(confidence * 100)}% of customers who buy this "
                    f"also buy {stats.names.get(related, related)}"
                ),
            )
            for related, confidence, published in kept[: cfg.max_recommendations]
        ]

        recommendations.append(
            CrossSellRecommendation(
                id=f"cross-sell-{primary}",
                primary_product=stats.names.get(primary, primary),
                recommended_products=products,
                expected_uplift=_round_half_up(mean_confidence * cfg.uplift_factor),
                customer_segment="all",
            )
        )

    logger.info(
        "Cross-sell: %d recommendations from %d orders (%d distinct skus)",
        len(recommendations), stats.total_orders, len(stats.item_counts),
        extra={
            "advisor": "cross_sell",
            "emitted": len(recommendations),
            "considered": stats.total_orders,
        },
    )
    return sorted(recommendations, key=lambda r: r.expected_uplift, reverse=True)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
