"""
Restock advisor: ranks products by how soon forecast demand will exhaust
their current stock.

Algorithm (per product)
-----------------------
1. Skip products with fewer than ``min_history_days`` history rows.
2. Forecast ``horizon_days`` of demand from the (date, quantity) history;
   skip the product if the provider returns nothing.
3. Walk the forecast accumulating demand.  The first day on which cumulative
   demand exceeds current stock is the stockout day (1-indexed).
4. Urgency from the stockout day:
       <= 7  → critical
       <= 14 → high
       <= 21 → medium
       later, or never within the horizon → low
5. Order quantity covers the horizon's demand plus ``safety_stock_days`` of
   average daily demand, minus stock on hand:
       ceil(total + total / horizon × safety_days − stock)
   Products needing nothing (quantity <= 0) are not emitted.

Output is sorted by urgency rank descending; ``sorted`` is stable so ties
keep input order.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import date

from commerce_advisor.config import RestockConfig
from commerce_advisor.models.commerce import ProductSalesRecord
from commerce_advisor.models.recommendation import RestockRecommendation
from commerce_advisor.models.signals import ForecastPoint
from commerce_advisor.providers.base import ForecastProvider, check_forecast
from commerce_advisor.taxonomy.tiers import Urgency
from commerce_advisor.utils.time_utils import format_short_date

logger = logging.getLogger(__name__)


def find_stockout(
    forecast: Sequence[ForecastPoint],
    current_stock: float,
) -> tuple[int | None, date | None]:
    """Return ``(stockout_day, stockout_date)``, or ``(None, None)`` if stock lasts.

    ``stockout_day`` is 1-indexed: day 1 is the first forecast point.
    """
    cumulative = 0.0
    for day, point in enumerate(forecast, start=1):
        cumulative += point.predicted_quantity
        if cumulative > current_stock:
            return day, point.date
    return None, None


def classify_urgency(stockout_day: int | None, config: RestockConfig) -> Urgency:
    """Map a projected stockout day onto an urgency tier."""
    if stockout_day is None:
        return Urgency.LOW
    if stockout_day <= config.critical_days:
        return Urgency.CRITICAL
    if stockout_day <= config.high_days:
        return Urgency.HIGH
    if stockout_day <= config.medium_days:
        return Urgency.MEDIUM
    return Urgency.LOW


def generate_restock_recommendations(
    products: Sequence[ProductSalesRecord],
    forecaster: ForecastProvider,
    config: RestockConfig | None = None,
) -> list[RestockRecommendation]:
    """Build restock recommendations, most urgent first.

    Args:
        products:   Product records with daily sales history.
        forecaster: Demand forecast collaborator.
        config:     Thresholds; defaults to ``RestockConfig()``.

    Returns:
        Recommendations sorted by urgency (critical → low), stable for ties.

    Raises:
        ProviderContractError: If the forecaster returns malformed output.
    """
    cfg = config or RestockConfig()
    provider_name = type(forecaster).__name__
    recommendations: list[RestockRecommendation] = []

    for product in products:
        history_days = len(product.history)
        if history_days < cfg.min_history_days:
            logger.debug(
                "Restock: skipping %s (%d days of history < %d)",
                product.sku, history_days, cfg.min_history_days,
                extra={"advisor": "restock", "sku": product.sku, "reason": "short_history"},
            )
            continue

        series = [(s.date, s.quantity) for s in product.history]
        forecast = check_forecast(
            forecaster.forecast(series, cfg.horizon_days),
            cfg.horizon_days,
            provider=provider_name,
            last_observed=series[-1][0] if series else None,
        )
        if not forecast:
            logger.debug(
                "Restock: skipping %s (empty forecast)",
                product.sku,
                extra={"advisor": "restock", "sku": product.sku, "reason": "empty_forecast"},
            )
            continue

        total_demand   = sum(p.predicted_quantity for p in forecast)
        avg_confidence = sum(p.confidence for p in forecast) / len(forecast)

        stockout_day, stockout_date = find_stockout(forecast, product.current_stock)
        urgency = classify_urgency(stockout_day, cfg)

        avg_daily_demand = total_demand / cfg.horizon_days
        safety_stock     = avg_daily_demand * cfg.safety_stock_days
        quantity = math.ceil(total_demand + safety_stock - product.current_stock)
        if quantity <= 0:
            logger.debug("Restock: %s needs no restock", product.sku)
            continue

        lost_revenue = None
        if stockout_day is not None:
            lost_revenue = (total_demand - product.current_stock) * product.price

        recommendations.append(
            RestockRecommendation(
                id=f"restock-{product.sku}",
                sku=product.sku,
                product_name=product.name,
                current_stock=product.current_stock,
                recommended_quantity=quantity,
                urgency=urgency,
                reasoning=_build_reasoning(
                    history_days, total_demand, cfg.horizon_days, stockout_date
                ),
                estimated_stockout_date=stockout_date,
                confidence=avg_confidence,
                potential_lost_revenue=lost_revenue,
            )
        )

    logger.info(
        "Restock: %d recommendations from %d products",
        len(recommendations), len(products),
        extra={"advisor": "restock", "emitted": len(recommendations), "considered": len(products)},
    )
    return sorted(recommendations, key=lambda r: r.urgency.rank, reverse=True)


def _build_reasoning(
    history_days: int,
    total_demand: float,
    horizon_days: int,
    stockout_date: date | None,
) -> str:
    reasoning = (
        f"Based on {history_days} days of sales data, expected demand is "
        f"{round(total_demand)} units over next {horizon_days} days."
    )
    if stockout_date is not None:
        reasoning += (
            f" Current stock will run out around {format_short_date(stockout_date)}."
        )
    return reasoning
