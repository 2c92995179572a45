"""
ASCII terminal formatters for CLI output.

All formatters accept output models and return plain multi-line strings
suitable for ``typer.echo()``.  No third-party dependencies.

Example::

  === Restock Recommendations (2) ===
    Rank  SKU             Urgency     Stock    Order  Stockout
    ------------------------------------------------------------
       1  SKU-1          critical      50.0      390  2025-01-15
"""

from __future__ import annotations

from collections.abc import Sequence

from commerce_advisor.models.recommendation import (
    BusinessInsight,
    CrossSellRecommendation,
    MarketingRecommendation,
    PricingRecommendation,
    RestockRecommendation,
)
from commerce_advisor.pipeline.engine import AdvisorReport

_RULE = "    " + "-" * 72


def _empty(lines: list[str]) -> str:
    lines.append("    (none)")
    return "\n".join(lines)


def format_restock_table(recs: Sequence[RestockRecommendation]) -> str:
    lines = ["", f"=== Restock Recommendations ({len(recs)}) ==="]
    if not recs:
        return _empty(lines)
    lines.append(
        f"    {'Rank':>4}  {'SKU':<14}  {'Urgency':>8}  {'Stock':>8}  "
        f"{'Order':>7}  {'Stockout':<10}"
    )
    lines.append(_RULE)
    for rank, r in enumerate(recs, start=1):
        stockout = r.estimated_stockout_date.isoformat() if r.estimated_stockout_date else "-"
        lines.append(
            f"    {rank:>4}  {r.sku:<14.14}  {r.urgency.value:>8}  "
            f"{r.current_stock:>8.1f}  {r.recommended_quantity:>7}  {stockout:<10}"
        )
    return "\n".join(lines)


def format_pricing_table(recs: Sequence[PricingRecommendation]) -> str:
    lines = ["", f"=== Pricing Recommendations ({len(recs)}) ==="]
    if not recs:
        return _empty(lines)
    lines.append(
        f"    {'SKU':<14}  {'Current':>9}  {'New':>9}  {'Change':>8}  "
        f"{'Demand':>8}  {'Conf':>5}"
    )
    lines.append(_RULE)
    for p in recs:
        lines.append(
            f"    {p.sku:<14.14}  {p.current_price:>9.2f}  {p.recommended_price:>9.2f}  "
            f"{p.price_change_percent:>+7.2f}%  {p.expected_impact.demand_change:>+7.2f}%  "
            f"{p.confidence:>5.2f}"
        )
    return "\n".join(lines)


def format_marketing_table(recs: Sequence[MarketingRecommendation]) -> str:
    lines = ["", f"=== Marketing Recommendations ({len(recs)}) ==="]
    if not recs:
        return _empty(lines)
    lines.append(f"    {'Priority':>8}  {'Type':<22}  {'ROI':>5}  Title")
    lines.append(_RULE)
    for m in recs:
        lines.append(
            f"    {m.priority.value:>8}  {m.type.value:<22}  {m.expected_roi:>5.1f}  {m.title}"
        )
    return "\n".join(lines)


def format_cross_sell_table(recs: Sequence[CrossSellRecommendation]) -> str:
    lines = ["", f"=== Cross-Sell Recommendations ({len(recs)}) ==="]
    if not recs:
        return _empty(lines)
    lines.append(f"    {'Uplift':>6}  {'Primary':<24}  Pair with (confidence)")
    lines.append(_RULE)
    for c in recs:
        pairs = ", ".join(f"{p.name} ({p.confidence:.2f})" for p in c.recommended_products)
        lines.append(f"    {c.expected_uplift:>5}%  {c.primary_product:<24.24}  {pairs}")
    return "\n".join(lines)


def format_insights_table(insights: Sequence[BusinessInsight]) -> str:
    lines = ["", f"=== Business Insights ({len(insights)}) ==="]
    if not insights:
        return _empty(lines)
    for i in insights:
        lines.append(f"    [{i.impact.value.upper()}] {i.type.value}: {i.title}")
        lines.append(f"        {i.description}")
    return "\n".join(lines)


def format_report_summary(report: AdvisorReport) -> str:
    """Format every advisor section of a report, preceded by a header."""
    header = [
        "",
        "=== Advisor Run ===",
        f"  Run:          {report.run_slug}",
        f"  Generated at: {report.generated_at.isoformat()}",
    ]
    sections = [
        format_restock_table(report.restock),
        format_pricing_table(report.pricing),
        format_marketing_table(report.marketing),
        format_cross_sell_table(report.cross_sell),
        format_insights_table(report.insights),
    ]
    return "\n".join(header + sections)
