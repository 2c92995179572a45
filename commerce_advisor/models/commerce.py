"""
Input records consumed by the advisors.

Every record is a frozen pydantic model: advisors never mutate their inputs,
and construction is the single place where shape and range checks happen.
Dates may be supplied as ISO strings (``"2025-03-01"``); a string that is
not a parseable calendar date is rejected with ``pydantic.ValidationError``
before any advisor sees it.

``ProductSalesRecord`` serves both the restock and pricing advisors.  The
restock advisor only reads ``(date, quantity)`` from the history; the pricing
advisor additionally needs ``price`` on each row and a ``cost`` on the record.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SalePoint(BaseModel):
    """One day of sales for a product.

    Attributes:
        date: Calendar date of the sales.
        quantity: Units sold that day.
        price: Unit price the product sold at that day, if known.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    quantity: float = Field(ge=0)
    price: Optional[float] = Field(default=None, ge=0)


class ProductSalesRecord(BaseModel):
    """Current stock, pricing, and sales history for one sku.

    History rows are expected in chronological order but need not be
    contiguous (days without sales may be missing).

    Attributes:
        sku: Stock keeping unit identifier.
        name: Display name.
        current_stock: Units on hand right now.
        price: Current unit selling price.
        cost: Unit cost, or ``None`` if unknown.
        competitor_prices: Observed competitor prices for the same product.
        history: Ordered daily sales.
    """

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    current_stock: float = Field(ge=0)
    price: float = Field(gt=0)
    cost: Optional[float] = Field(default=None, ge=0)
    competitor_prices: Optional[list[float]] = None
    history: list[SalePoint] = []

    @field_validator("sku")
    @classmethod
    def validate_sku_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("sku must not be empty.")
        return v.strip()

    @field_validator("competitor_prices")
    @classmethod
    def validate_competitor_prices(cls, v: Optional[list[float]]) -> Optional[list[float]]:
        if v is None:
            return v
        if any(p < 0 for p in v):
            raise ValueError("competitor_prices must be non-negative.")
        # An empty list carries no signal; treat it as absent.
        return v or None


class CampaignMetrics(BaseModel):
    """Aggregated performance of one advertising campaign."""

    model_config = ConfigDict(frozen=True)

    campaign_id: str
    name: str
    spend: float = Field(ge=0)
    revenue: float = Field(ge=0)
    clicks: int = Field(ge=0)
    impressions: int = Field(ge=0)
    conversions: int = Field(default=0, ge=0)
    is_active: bool = True


class OrderItem(BaseModel):
    """A line on an order."""

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    quantity: int = Field(default=1, ge=1)


class Order(BaseModel):
    """A customer order (one market basket)."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    customer_id: str = ""
    items: list[OrderItem] = []


class DailySales(BaseModel):
    """Store-wide revenue and order count for one day."""

    model_config = ConfigDict(frozen=True)

    date: date
    revenue: float
    orders: int = Field(default=0, ge=0)


class ProductPerformance(BaseModel):
    """Revenue and gross margin fraction for one product over a period.

    Attributes:
        margin: Gross margin as a fraction, e.g. ``0.55`` for 55%.
    """

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    revenue: float
    margin: float


class CustomerSummary(BaseModel):
    """Lifetime spend and order count for one customer."""

    model_config = ConfigDict(frozen=True)

    customer_id: str
    total_spent: float = Field(ge=0)
    order_count: int = Field(default=0, ge=0)
