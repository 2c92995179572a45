"""
Insight aggregator: merges independent business signals into one feed
ranked by impact.

Signals (each optional, all evaluated on every call)
----------------------------------------------------
REVENUE TREND
    Last 7 days vs the 7 days before (needs >= 14 days).
    |change| > 10%  → opportunity (growth) or risk (decline)
    |change| > 25%  → high impact, else medium.
    Potential: growth → current × 1.1; decline → previous-period revenue.
HIGH-MARGIN PRODUCT
    Highest-revenue product with margin > 0.5 → opportunity, medium.
CUSTOMER CONCENTRATION
    Top-5 customers' spend / total spend > 0.30 → risk, high.
RECENT ANOMALY
    Any anomaly index within the last 7 days of the revenue series
    → trend, medium.

Degenerate inputs (zero prior-week revenue, zero total customer spend)
skip the affected signal.  Output is sorted by impact rank descending,
stable for ties.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from commerce_advisor.config import InsightConfig
from commerce_advisor.models.commerce import (
    CustomerSummary,
    DailySales,
    ProductPerformance,
)
from commerce_advisor.models.recommendation import BusinessInsight, InsightMetrics
from commerce_advisor.models.signals import AnomalyPoint
from commerce_advisor.providers.base import check_anomalies
from commerce_advisor.taxonomy.tiers import Impact, InsightType

logger = logging.getLogger(__name__)


def generate_business_insights(
    sales: Sequence[DailySales],
    products: Sequence[ProductPerformance],
    customers: Sequence[CustomerSummary],
    anomalies: Sequence[AnomalyPoint],
    config: InsightConfig | None = None,
) -> list[BusinessInsight]:
    """Synthesize the insight feed, highest impact first.

    Args:
        sales:     Daily revenue series, oldest first.
        products:  Per-product revenue and margin.
        customers: Per-customer lifetime spend.
        anomalies: Anomaly provider output computed over
                   ``[d.revenue for d in sales]``.
        config:    Thresholds; defaults to ``InsightConfig()``.

    Raises:
        ProviderContractError: If an anomaly index lies outside ``sales``.
    """
    cfg = config or InsightConfig()
    checked = check_anomalies(anomalies, len(sales))

    candidates = [
        revenue_trend_insight(sales, cfg),
        high_margin_insight(products, cfg),
        concentration_insight(customers, cfg),
        anomaly_insight(checked, len(sales), cfg),
    ]
    insights = [i for i in candidates if i is not None]

    logger.info(
        "Insights: %d generated",
        len(insights),
        extra={"advisor": "insights", "emitted": len(insights), "considered": len(candidates)},
    )
    return sorted(insights, key=lambda i: i.impact.rank, reverse=True)


def revenue_trend_insight(
    sales: Sequence[DailySales],
    cfg: InsightConfig,
) -> BusinessInsight | None:
    window = cfg.window_days
    if len(sales) < window * 2:
        return None

    recent   = sum(d.revenue for d in sales[-window:])
    previous = sum(d.revenue for d in sales[-2 * window:-window])
    if previous == 0:
        logger.debug("Insights: revenue trend skipped (zero prior-period revenue)")
        return None

    change_pct = (recent - previous) / previous * 100
    if abs(change_pct) <= cfg.trend_threshold_pct:
        return None

    growing = change_pct > 0
    if growing:
        recommendations = [
            "Analyze what drove the growth and replicate",
            "Consider scaling successful campaigns",
            "Ensure inventory can meet increased demand",
        ]
    else:
        recommendations = [
            "Investigate causes of revenue decline",
            "Review marketing campaign performance",
            "Check for inventory or pricing issues",
        ]

    return BusinessInsight(
        id="revenue-trend",
        type=InsightType.OPPORTUNITY if growing else InsightType.RISK,
        title=f"Revenue {'Growth' if growing else 'Decline'} Detected",
        description=(
            f"Revenue has {'increased' if growing else 'decreased'} by "
            f"{abs(change_pct):.1f}% compared to the previous week."
        ),
        impact=Impact.HIGH if abs(change_pct) > cfg.high_impact_pct else Impact.MEDIUM,
        actionable=True,
        recommendations=recommendations,
        metrics=InsightMetrics(
            current=recent,
            potential=recent * 1.1 if growing else previous,
            unit=cfg.currency,
        ),
    )


def high_margin_insight(
    products: Sequence[ProductPerformance],
    cfg: InsightConfig,
) -> BusinessInsight | None:
    candidates = [p for p in products if p.margin > cfg.high_margin]
    if not candidates:
        return None
    # max() keeps the first of equal-revenue products.
    top = max(candidates, key=lambda p: p.revenue)

    return BusinessInsight(
        id="high-margin-opportunity",
        type=InsightType.OPPORTUNITY,
        title="High-Margin Product Opportunity",
        description=(
            f"{top.name} has a {top.margin * 100:.1f}% margin. "
            f"Focus marketing efforts on this product."
        ),
        impact=Impact.MEDIUM,
        actionable=True,
        recommendations=[
            "Increase marketing budget for high-margin products",
            "Create targeted campaigns for profitable items",
            "Consider bundling with complementary products",
        ],
    )


def concentration_insight(
    customers: Sequence[CustomerSummary],
    cfg: InsightConfig,
) -> BusinessInsight | None:
    total = sum(c.total_spent for c in customers)
    if total <= 0:
        return None

    top = sorted((c.total_spent for c in customers), reverse=True)[: cfg.top_customers]
    share = sum(top) / total
    if share <= cfg.concentration_threshold:
        return None

    return BusinessInsight(
        id="customer-concentration",
        type=InsightType.RISK,
        title="High Customer Concentration Risk",
        description=(
            f"Top {cfg.top_customers} customers represent {share * 100:.1f}% of revenue. "
            f"Diversify customer base to reduce risk."
        ),
        impact=Impact.HIGH,
        actionable=True,
        recommendations=[
            "Develop customer acquisition campaigns",
            "Create loyalty programs for smaller customers",
            "Expand into new market segments",
        ],
    )


def anomaly_insight(
    anomalies: Sequence[AnomalyPoint],
    series_length: int,
    cfg: InsightConfig,
) -> BusinessInsight | None:
    cutoff = series_length - cfg.window_days
    recent = [a for a in anomalies if a.index >= cutoff]
    if not recent:
        return None

    return BusinessInsight(
        id="sales-anomaly",
        type=InsightType.TREND,
        title="Unusual Sales Pattern Detected",
        description=(
            f"Detected {len(recent)} unusual sales day(s) in the past week. "
            f"Review for potential issues or opportunities."
        ),
        impact=Impact.MEDIUM,
        actionable=True,
        recommendations=[
            "Investigate causes of unusual sales patterns",
            "Check for external factors (holidays, events)",
            "Review marketing campaign timing",
        ],
    )
