"""
Pricing advisor: infers price elasticity from historical (price, quantity)
pairs and proposes a price change per product.

Elasticity
----------
Average daily quantity is computed at every distinct observed price, but
only the two extremes enter the estimate:

    elasticity = ((demand@min − demand@max) / demand@max)
               / ((max_price − min_price) / min_price)

i.e. the percentage demand swing divided by the percentage price swing
between the cheapest and most expensive observed price.  Intermediate price
points only raise the confidence (more points observed → more trust).

Rules (evaluated in order - first match wins)
---------------------------------------------
    1. RAISE : margin < target_margin AND |elasticity| < 1.5
               → move toward the target-margin price, capped at +15%.
    2. LOWER : |elasticity| > 2 AND competitor prices known AND
               current price > 1.10 × competitor average
               → 1.05 × competitor average.
    3. none  : no recommendation.

A proposal is emitted only if it moves the price by more than $0.01.

Impact estimate
---------------
    demand_change_pct = −elasticity × price_change_pct
    new_demand        = avg_demand × (1 + demand_change_pct / 100)
    revenue_change    = new_price × new_demand − old_price × avg_demand

Output order is input order; callers may re-sort.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from commerce_advisor.config import PricingConfig
from commerce_advisor.models.commerce import ProductSalesRecord, SalePoint
from commerce_advisor.models.recommendation import ExpectedImpact, PricingRecommendation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricePoint:
    """Average daily demand observed at one price.

    Attributes:
        price:      Observed selling price.
        avg_demand: Mean quantity over the days sold at this price.
        days:       Number of history rows at this price.
    """

    price:      float
    avg_demand: float
    days:       int


def build_price_points(history: Sequence[SalePoint]) -> list[PricePoint]:
    """Group priced history rows by price, sorted by price ascending."""
    quantities: dict[float, list[float]] = defaultdict(list)
    for sale in history:
        if sale.price is not None:
            quantities[sale.price].append(sale.quantity)
    return [
        PricePoint(price=price, avg_demand=sum(qs) / len(qs), days=len(qs))
        for price, qs in sorted(quantities.items())
    ]


def estimate_elasticity(points: Sequence[PricePoint]) -> float | None:
    """Two-point elasticity between the cheapest and dearest price.

    Returns:
        The elasticity, or ``None`` when it cannot be measured: fewer than two
        price points, a zero minimum price, or zero demand at the maximum price.
    """
    if len(points) < 2:
        return None
    low, high = points[0], points[-1]
    if low.price <= 0 or high.avg_demand <= 0:
        return None
    price_swing  = (high.price - low.price) / low.price
    demand_swing = (low.avg_demand - high.avg_demand) / high.avg_demand
    return demand_swing / price_swing


def generate_pricing_recommendations(
    products: Sequence[ProductSalesRecord],
    config: PricingConfig | None = None,
) -> list[PricingRecommendation]:
    """Build one pricing recommendation per product whose rules fire.

    Args:
        products: Product records; ``cost`` and priced history are required
                  for a product to be eligible.
        config:   Thresholds; defaults to ``PricingConfig()``.

    Returns:
        Recommendations in input order.
    """
    cfg = config or PricingConfig()
    recommendations: list[PricingRecommendation] = []

    for product in products:
        rec = _recommend_price(product, cfg)
        if rec is not None:
            recommendations.append(rec)

    logger.info(
        "Pricing: %d recommendations from %d products",
        len(recommendations), len(products),
        extra={"advisor": "pricing", "emitted": len(recommendations), "considered": len(products)},
    )
    return recommendations


def _skip(product: ProductSalesRecord, reason: str) -> dict:
    return {"advisor": "pricing", "sku": product.sku, "reason": reason}


def _recommend_price(
    product: ProductSalesRecord,
    cfg: PricingConfig,
) -> PricingRecommendation | None:
    if product.cost is None:
        logger.debug("Pricing: skipping %s (no cost)", product.sku, extra=_skip(product, "no_cost"))
        return None

    priced = [s for s in product.history if s.price is not None]
    if len(priced) < cfg.min_history_rows:
        logger.debug(
            "Pricing: skipping %s (%d priced rows < %d)",
            product.sku, len(priced), cfg.min_history_rows,
            extra=_skip(product, "short_history"),
        )
        return None

    points = build_price_points(priced)
    if len(points) < 2:
        logger.debug(
            "Pricing: skipping %s (no price variation)",
            product.sku,
            extra=_skip(product, "no_price_variation"),
        )
        return None

    elasticity = estimate_elasticity(points)
    if elasticity is None:
        logger.debug(
            "Pricing: skipping %s (degenerate elasticity)",
            product.sku,
            extra=_skip(product, "degenerate_elasticity"),
        )
        return None

    current_price  = product.price
    current_margin = (current_price - product.cost) / current_price
    recommended    = current_price
    reasoning      = ""

    if current_margin < cfg.target_margin and abs(elasticity) < cfg.inelastic_threshold:
        target_price = product.cost / (1 - cfg.target_margin)
        increase     = min(target_price - current_price, current_price * cfg.max_increase_pct)
        recommended  = current_price + increase
        reasoning = (
            f"Low margin ({round(current_margin * 100)}%) and low price elasticity "
            f"suggest room for price increase."
        )
    elif abs(elasticity) > cfg.elastic_threshold and product.competitor_prices:
        competitor_avg = sum(product.competitor_prices) / len(product.competitor_prices)
        if current_price > competitor_avg * cfg.competitor_trigger:
            recommended = competitor_avg * cfg.competitor_target
            reasoning = (
                "High price elasticity and above-market pricing suggest price "
                "reduction to increase volume."
            )

    # Threshold applies to the published (rounded) price.
    if abs(round(recommended, 2) - current_price) <= cfg.min_price_change:
        return None

    price_change     = recommended - current_price
    price_change_pct = price_change / current_price * 100
    demand_change    = -elasticity * price_change_pct
    avg_demand       = sum(s.quantity for s in priced) / len(priced)
    new_demand       = avg_demand * (1 + demand_change / 100)
    revenue_change   = recommended * new_demand - current_price * avg_demand

    confidence = min(cfg.max_confidence, len(points) / cfg.price_points_for_full_confidence)

    return PricingRecommendation(
        id=f"pricing-{product.sku}",
        sku=product.sku,
        product_name=product.name,
        current_price=current_price,
        recommended_price=round(recommended, 2),
        price_change=round(price_change, 2),
        price_change_percent=round(price_change_pct, 2),
        reasoning=reasoning,
        expected_impact=ExpectedImpact(
            revenue_change=round(revenue_change, 2),
            demand_change=round(demand_change, 2),
        ),
        confidence=confidence,
    )
