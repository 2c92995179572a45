"""
Shared pytest fixtures for the commerce-advisor test suite.

Provides:
  - Record factories (``make_product``, ``make_campaign``, ``make_order``)
    exposed as fixtures so test modules can build inputs tersely.
  - Stub collaborators: ``ConstantForecaster`` returns a flat forecast,
    ``FixedAnomalies`` returns a canned anomaly list.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

import pytest

from commerce_advisor.models.commerce import (
    CampaignMetrics,
    Order,
    OrderItem,
    ProductSalesRecord,
    SalePoint,
)
from commerce_advisor.models.signals import AnomalyPoint, ForecastPoint

HISTORY_START = date(2025, 1, 1)


# ── Stub collaborators ────────────────────────────────────────────────────────


class ConstantForecaster:
    """Forecasts ``predicted`` units per day after the last history date."""

    def __init__(self, predicted: float = 10.0, confidence: float = 0.9) -> None:
        self.predicted = predicted
        self.confidence = confidence
        self.calls: list[tuple[int, int]] = []

    def forecast(
        self,
        series: Sequence[tuple[date, float]],
        horizon_days: int,
    ) -> list[ForecastPoint]:
        self.calls.append((len(series), horizon_days))
        last = series[-1][0]
        return [
            ForecastPoint(
                date=last + timedelta(days=i),
                predicted_quantity=self.predicted,
                confidence=self.confidence,
            )
            for i in range(1, horizon_days + 1)
        ]


class EmptyForecaster:
    def forecast(self, series, horizon_days):
        return []


class FixedAnomalies:
    """Returns the same anomaly list for any series."""

    def __init__(self, points: list[AnomalyPoint]) -> None:
        self.points = points

    def detect_anomalies(self, series, sensitivity):
        return list(self.points)


# ── Record factories ──────────────────────────────────────────────────────────


def _history(quantities: Sequence[float], prices: Sequence[float | None] | None = None):
    prices = prices if prices is not None else [None] * len(quantities)
    return [
        SalePoint(date=HISTORY_START + timedelta(days=i), quantity=q, price=p)
        for i, (q, p) in enumerate(zip(quantities, prices))
    ]


def _make_product(
    sku: str = "SKU-1",
    name: str = "Widget",
    current_stock: float = 50.0,
    price: float = 20.0,
    cost: float | None = None,
    competitor_prices: list[float] | None = None,
    quantities: Sequence[float] = (10.0,) * 10,
    prices: Sequence[float | None] | None = None,
) -> ProductSalesRecord:
    return ProductSalesRecord(
        sku=sku,
        name=name,
        current_stock=current_stock,
        price=price,
        cost=cost,
        competitor_prices=competitor_prices,
        history=_history(quantities, prices),
    )


def _make_campaign(
    campaign_id: str = "c1",
    name: str = "Spring Sale",
    spend: float = 1000.0,
    revenue: float = 2500.0,
    clicks: int = 200,
    impressions: int = 10_000,
    conversions: int = 20,
    is_active: bool = True,
) -> CampaignMetrics:
    return CampaignMetrics(
        campaign_id=campaign_id,
        name=name,
        spend=spend,
        revenue=revenue,
        clicks=clicks,
        impressions=impressions,
        conversions=conversions,
        is_active=is_active,
    )


def _make_order(order_id: str, *skus: str) -> Order:
    return Order(
        order_id=order_id,
        customer_id=f"cust-{order_id}",
        items=[OrderItem(sku=s, name=f"Product {s}", quantity=1) for s in skus],
    )


@pytest.fixture
def make_product():
    return _make_product


@pytest.fixture
def make_campaign():
    return _make_campaign


@pytest.fixture
def make_order():
    return _make_order


@pytest.fixture
def constant_forecaster() -> ConstantForecaster:
    """10 units/day at 0.9 confidence."""
    return ConstantForecaster(predicted=10.0, confidence=0.9)


# ── Full input bundle ─────────────────────────────────────────────────────────


def _daily_sales(revenues: Sequence[float]):
    from commerce_advisor.models.commerce import DailySales

    return [
        DailySales(date=date(2025, 3, 1) + timedelta(days=i), revenue=r, orders=20)
        for i, r in enumerate(revenues)
    ]


@pytest.fixture
def sample_inputs():
    """An ``AdvisorInputs`` bundle on which every advisor produces output."""
    from commerce_advisor.models.commerce import CustomerSummary, ProductPerformance
    from commerce_advisor.pipeline.engine import AdvisorInputs

    return AdvisorInputs(
        products=[
            _make_product(sku="SKU-1", name="Widget", current_stock=50.0),
            _make_product(
                sku="SKU-2", name="Gadget", current_stock=500.0, price=20.0, cost=15.0,
                quantities=[10.0] * 7 + [9.5] * 7,
                prices=[19.0] * 7 + [21.0] * 7,
            ),
        ],
        campaigns=[
            _make_campaign(campaign_id="c1", spend=1000.0, revenue=2500.0, clicks=50),
        ],
        orders=(
            [_make_order(f"ab{i}", "A", "B") for i in range(5)]
            + [_make_order(f"cd{i}", "C", "D") for i in range(5)]
        ),
        daily_sales=_daily_sales([1400.0] * 6 + [1600.0] + [1800.0] * 6 + [2200.0]),
        product_performance=[
            ProductPerformance(sku="SKU-2", name="Gadget", revenue=900.0, margin=0.55),
        ],
        customers=[
            CustomerSummary(customer_id=f"cust-{i}", total_spent=s, order_count=1)
            for i, s in enumerate([100.0] + [10.0] * 19)
        ],
    )
