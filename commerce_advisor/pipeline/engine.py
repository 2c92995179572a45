"""
Batch runner: evaluate every advisor over one bundle of business records.

Flow
----
1. ``AdvisorInputs`` holds all domain collections (each may be empty).
   ``load_inputs(path)`` reads one from a JSON document.
2. ``run_advisors(inputs, config, forecaster, detector)``:
     a. restock    ← products + forecaster
     b. pricing    ← products
     c. marketing  ← campaigns
     d. cross-sell ← orders
     e. anomalies  ← detector over the daily revenue series
     f. insights   ← daily sales + product performance + customers + anomalies
3. Returns an ``AdvisorReport`` with the five sorted lists plus provenance
   (``run_slug``, ``generated_at``).

The runner resolves collaborator calls before handing their output to the
advisor logic; advisors themselves stay synchronous and stateless.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from commerce_advisor.advisors.cross_sell import generate_cross_sell_recommendations
from commerce_advisor.advisors.insights import generate_business_insights
from commerce_advisor.advisors.marketing import generate_marketing_recommendations
from commerce_advisor.advisors.pricing import generate_pricing_recommendations
from commerce_advisor.advisors.restock import generate_restock_recommendations
from commerce_advisor.config import AppConfig
from commerce_advisor.models.commerce import (
    CampaignMetrics,
    CustomerSummary,
    DailySales,
    Order,
    ProductPerformance,
    ProductSalesRecord,
)
from commerce_advisor.models.recommendation import (
    BusinessInsight,
    CrossSellRecommendation,
    MarketingRecommendation,
    PricingRecommendation,
    Recommendation,
    RestockRecommendation,
)
from commerce_advisor.providers.base import AnomalyProvider, ForecastProvider
from commerce_advisor.providers.baseline import (
    SmoothedTrendForecaster,
    ZScoreAnomalyDetector,
)
from commerce_advisor.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class AdvisorInputs(BaseModel):
    """Every collection the advisors consume, as one JSON-loadable bundle."""

    model_config = ConfigDict(frozen=True)

    products: list[ProductSalesRecord] = []
    campaigns: list[CampaignMetrics] = []
    orders: list[Order] = []
    daily_sales: list[DailySales] = []
    product_performance: list[ProductPerformance] = []
    customers: list[CustomerSummary] = []


class AdvisorReport(BaseModel):
    """Output of one batch run."""

    model_config = ConfigDict(frozen=True)

    run_slug: str = Field(default_factory=lambda: str(uuid4()))
    generated_at: datetime = Field(default_factory=utcnow)
    restock: list[RestockRecommendation] = []
    pricing: list[PricingRecommendation] = []
    marketing: list[MarketingRecommendation] = []
    cross_sell: list[CrossSellRecommendation] = []
    insights: list[BusinessInsight] = []

    def all_recommendations(self) -> list[Recommendation]:
        """All outputs in advisor order (restock first, insights last)."""
        return [
            *self.restock,
            *self.pricing,
            *self.marketing,
            *self.cross_sell,
            *self.insights,
        ]

    def counts(self) -> dict[str, int]:
        return {
            "restock":    len(self.restock),
            "pricing":    len(self.pricing),
            "marketing":  len(self.marketing),
            "cross_sell": len(self.cross_sell),
            "insights":   len(self.insights),
        }


def load_inputs(path: Path) -> AdvisorInputs:
    """Read and validate an ``AdvisorInputs`` JSON document.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        pydantic.ValidationError: If the document does not match the schema.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return AdvisorInputs.model_validate_json(path.read_text(encoding="utf-8"))


def run_advisors(
    inputs: AdvisorInputs,
    config: AppConfig | None = None,
    forecaster: ForecastProvider | None = None,
    detector: AnomalyProvider | None = None,
) -> AdvisorReport:
    """Run all five advisors over ``inputs``.

    Args:
        inputs:     Business records.
        config:     Application config; defaults to ``AppConfig()``.
        forecaster: Demand forecaster; defaults to ``SmoothedTrendForecaster``.
        detector:   Anomaly detector; defaults to ``ZScoreAnomalyDetector``.

    Raises:
        ProviderContractError: If a collaborator returns malformed output.
    """
    cfg = config or AppConfig()
    forecaster = forecaster or SmoothedTrendForecaster(
        min_points=cfg.restock.min_history_days
    )
    detector = detector or ZScoreAnomalyDetector()

    revenues = [d.revenue for d in inputs.daily_sales]
    anomalies = detector.detect_anomalies(revenues, cfg.insights.anomaly_sensitivity)

    report = AdvisorReport(
        restock=generate_restock_recommendations(inputs.products, forecaster, cfg.restock),
        pricing=generate_pricing_recommendations(inputs.products, cfg.pricing),
        marketing=generate_marketing_recommendations(inputs.campaigns, cfg.marketing),
        cross_sell=generate_cross_sell_recommendations(inputs.orders, cfg.cross_sell),
        insights=generate_business_insights(
            inputs.daily_sales,
            inputs.product_performance,
            inputs.customers,
            anomalies,
            cfg.insights,
        ),
    )
    logger.info(
        "Advisor run %s complete: %s",
        report.run_slug,
        report.counts(),
        extra={
            "run_slug": report.run_slug,
            "emitted": len(report.all_recommendations()),
            "counts": report.counts(),
        },
    )
    return report
