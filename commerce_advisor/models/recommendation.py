"""
Recommendation and insight output models.

Five output variants, one per advisor.  Each carries a literal ``kind`` tag
so a mixed list can be (de)serialised through the ``Recommendation``
discriminated union::

    from pydantic import TypeAdapter
    adapter = TypeAdapter(list[Recommendation])
    recs = adapter.validate_python(payload)

All models are frozen: an output is constructed, returned, and discarded.
Nothing here is persisted.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from commerce_advisor.taxonomy.tiers import (
    Impact,
    InsightType,
    MarketingActionType,
    Priority,
    Urgency,
)


class RestockRecommendation(BaseModel):
    """Restock order proposal for one sku.

    Attributes:
        recommended_quantity: Units to order (always > 0 when emitted).
        urgency: Derived from the projected stockout day.
        estimated_stockout_date: First forecast day on which cumulative
            demand exceeds stock, or ``None`` if stock lasts the horizon.
        confidence: Mean forecast confidence over the horizon.
        potential_lost_revenue: Revenue at risk if no restock happens;
            ``None`` when no stockout is projected.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["restock"] = "restock"
    id: str
    sku: str
    product_name: str
    current_stock: float
    recommended_quantity: int = Field(gt=0)
    urgency: Urgency
    reasoning: str
    estimated_stockout_date: Optional[date] = None
    confidence: float = Field(ge=0.0, le=1.0)
    potential_lost_revenue: Optional[float] = None


class ExpectedImpact(BaseModel):
    """Projected effect of a price change on daily revenue and demand."""

    model_config = ConfigDict(frozen=True)

    revenue_change: float
    demand_change: float


class PricingRecommendation(BaseModel):
    """Price change proposal for one sku."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pricing"] = "pricing"
    id: str
    sku: str
    product_name: str
    current_price: float
    recommended_price: float
    price_change: float
    price_change_percent: float
    reasoning: str
    expected_impact: ExpectedImpact
    confidence: float = Field(ge=0.0, le=1.0)


class MarketingRecommendation(BaseModel):
    """Campaign or portfolio-level advertising action."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["marketing"] = "marketing"
    id: str
    type: MarketingActionType
    title: str
    description: str
    priority: Priority
    expected_roi: float
    estimated_cost: Optional[float] = None
    timeframe: str
    action_items: list[str] = []


class RecommendedProduct(BaseModel):
    """A product suggested alongside a primary product."""

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str


class CrossSellRecommendation(BaseModel):
    """Co-purchase suggestions for one primary product.

    ``recommended_products`` holds at most three entries ordered by
    confidence, highest first.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["cross_sell"] = "cross_sell"
    id: str
    primary_product: str
    recommended_products: list[RecommendedProduct]
    expected_uplift: int
    customer_segment: str = "all"

    @field_validator("recommended_products")
    @classmethod
    def validate_recommended_products(
        cls, v: list[RecommendedProduct]
    ) -> list[RecommendedProduct]:
        if not 1 <= len(v) <= 3:
            raise ValueError(
                f"recommended_products must hold 1-3 entries, got {len(v)}."
            )
        confidences = [p.confidence for p in v]
        if confidences != sorted(confidences, reverse=True):
            raise ValueError("recommended_products must be sorted by confidence descending.")
        return v


class InsightMetrics(BaseModel):
    """Current versus potential value backing an insight."""

    model_config = ConfigDict(frozen=True)

    current: float
    potential: float
    unit: str


class BusinessInsight(BaseModel):
    """A synthesized observation about the business, ranked by impact."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["insight"] = "insight"
    id: str
    type: InsightType
    title: str
    description: str
    impact: Impact
    actionable: bool = True
    recommendations: Optional[list[str]] = None
    metrics: Optional[InsightMetrics] = None


Recommendation = Annotated[
    Union[
        RestockRecommendation,
        PricingRecommendation,
        MarketingRecommendation,
        CrossSellRecommendation,
        BusinessInsight,
    ],
    Field(discriminator="kind"),
]
