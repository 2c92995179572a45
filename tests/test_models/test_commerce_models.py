"""
Tests for commerce_advisor/models/commerce.py and models/signals.py.

What we test
------------
  - ISO date strings are parsed; malformed dates are rejected.
  - Negative quantities, stock, and competitor prices are rejected.
  - sku is stripped and must be non-empty.
  - Empty competitor price lists normalise to None.
  - Models are frozen.
  - ForecastPoint / AnomalyPoint range checks.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from commerce_advisor.models.commerce import (
    CampaignMetrics,
    CustomerSummary,
    Order,
    OrderItem,
    ProductSalesRecord,
    SalePoint,
)
from commerce_advisor.models.signals import AnomalyPoint, ForecastPoint


def _product(**overrides) -> ProductSalesRecord:
    data = {
        "sku": "SKU-1",
        "name": "Widget",
        "current_stock": 10,
        "price": 9.99,
        "history": [{"date": "2025-03-01", "quantity": 3, "price": 9.99}],
    }
    data.update(overrides)
    return ProductSalesRecord.model_validate(data)


class TestSalePoint:
    def test_iso_date_parsed(self):
        sale = SalePoint.model_validate({"date": "2025-03-05", "quantity": 2})
        assert sale.date == date(2025, 3, 5)
        assert sale.price is None

    def test_unparseable_date_rejected(self):
        with pytest.raises(ValidationError):
            SalePoint.model_validate({"date": "2025-02-30", "quantity": 2})

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            SalePoint(date=date(2025, 3, 5), quantity=-1)


class TestProductSalesRecord:
    def test_valid(self):
        product = _product()
        assert product.history[0].price == pytest.approx(9.99)
        assert product.cost is None

    def test_sku_stripped(self):
        assert _product(sku="  SKU-9 ").sku == "SKU-9"

    def test_blank_sku_rejected(self):
        with pytest.raises(ValidationError, match="sku must not be empty"):
            _product(sku="   ")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _product(current_stock=-1)

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError):
            _product(price=0)

    def test_negative_competitor_price_rejected(self):
        with pytest.raises(ValidationError, match="non-negative"):
            _product(competitor_prices=[10.0, -1.0])

    def test_empty_competitor_list_is_none(self):
        assert _product(competitor_prices=[]).competitor_prices is None

    def test_frozen(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.current_stock = 99


class TestOtherRecords:
    def test_campaign_defaults(self):
        campaign = CampaignMetrics(
            campaign_id="c1", name="Spring", spend=10, revenue=20, clicks=1, impressions=100
        )
        assert campaign.is_active is True
        assert campaign.conversions == 0

    def test_order_item_quantity_at_least_one(self):
        with pytest.raises(ValidationError):
            OrderItem(sku="A", name="A", quantity=0)

    def test_order_defaults(self):
        order = Order(order_id="o1")
        assert order.items == []
        assert order.customer_id == ""

    def test_customer_negative_spend_rejected(self):
        with pytest.raises(ValidationError):
            CustomerSummary(customer_id="x", total_spent=-5)


class TestSignals:
    def test_forecast_confidence_range(self):
        with pytest.raises(ValidationError):
            ForecastPoint(date=date(2025, 3, 5), predicted_quantity=1.0, confidence=1.5)

    def test_forecast_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            ForecastPoint(date=date(2025, 3, 5), predicted_quantity=-0.1, confidence=0.5)

    def test_anomaly_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            AnomalyPoint(index=-1, value=1.0, severity=2.0)
