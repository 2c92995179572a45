"""
Tests for commerce_advisor/advisors/restock.py.

What we test
------------
generate_restock_recommendations():
  - Products with < 7 days of history are skipped (forecaster not called).
  - Empty forecasts skip the product.
  - Reference scenario: stock 50, 30 × 10 units/day → critical, order 390.
  - Urgency bands at days 7 / 14 / 21 and beyond.
  - Stock lasting the horizon → low urgency, no stockout date, no lost revenue.
  - Nothing emitted when stock already covers demand + safety stock.
  - Output sorted critical → low, stable for ties.
  - Provider contract violations raise ProviderContractError, including
    forecasts that skip days or do not start the day after the history.
  - Idempotence: identical input → identical output.

find_stockout() / classify_urgency():
  - Stockout requires cumulative demand to strictly exceed stock.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from commerce_advisor.advisors.restock import (
    classify_urgency,
    find_stockout,
    generate_restock_recommendations,
)
from commerce_advisor.config import RestockConfig
from commerce_advisor.models.signals import ForecastPoint
from commerce_advisor.providers.base import ProviderContractError
from commerce_advisor.taxonomy.tiers import Urgency

from conftest import ConstantForecaster, EmptyForecaster


def _stock_for_stockout_on(day: int, daily: float = 10.0) -> float:
    """Stock that runs out exactly on ``day`` with a flat daily forecast."""
    return daily * (day - 1)


# ── Eligibility ───────────────────────────────────────────────────────────────

class TestEligibility:
    def test_short_history_skipped(self, make_product, constant_forecaster):
        product = make_product(quantities=[10.0] * 6)
        assert generate_restock_recommendations([product], constant_forecaster) == []
        assert constant_forecaster.calls == []

    def test_seven_days_is_enough(self, make_product, constant_forecaster):
        product = make_product(quantities=[10.0] * 7)
        recs = generate_restock_recommendations([product], constant_forecaster)
        assert len(recs) == 1
        assert constant_forecaster.calls == [(7, 30)]

    def test_empty_forecast_skipped(self, make_product):
        product = make_product()
        assert generate_restock_recommendations([product], EmptyForecaster()) == []

    def test_empty_input(self, constant_forecaster):
        assert generate_restock_recommendations([], constant_forecaster) == []


# ── Reference scenario ────────────────────────────────────────────────────────

class TestReferenceScenario:
    def test_stock_50_flat_demand(self, make_product, constant_forecaster):
        product = make_product(current_stock=50.0, price=20.0, quantities=[10.0] * 10)
        [rec] = generate_restock_recommendations([product], constant_forecaster)

        assert rec.id == "restock-SKU-1"
        assert rec.urgency == Urgency.CRITICAL
        # ceil(300 + 10 * 14 - 50)
        assert rec.recommended_quantity == 390
        assert rec.confidence == pytest.approx(0.9)
        # Cumulative demand first exceeds 50 on forecast day 6 (60 > 50).
        last_history = date(2025, 1, 10)
        assert rec.estimated_stockout_date == last_history + timedelta(days=6)
        assert rec.potential_lost_revenue == pytest.approx((300 - 50) * 20.0)

    def test_reasoning_mentions_window_demand_and_date(self, make_product, constant_forecaster):
        product = make_product(current_stock=50.0, quantities=[10.0] * 10)
        [rec] = generate_restock_recommendations([product], constant_forecaster)
        assert rec.reasoning.startswith("Based on 10 days of sales data")
        assert "300 units over next 30 days" in rec.reasoning
        assert "Jan 16" in rec.reasoning


# ── Urgency bands ─────────────────────────────────────────────────────────────

class TestUrgencyBands:
    @pytest.mark.parametrize(
        "stockout_day, expected",
        [
            (1, Urgency.CRITICAL),
            (7, Urgency.CRITICAL),
            (8, Urgency.HIGH),
            (14, Urgency.HIGH),
            (15, Urgency.MEDIUM),
            (21, Urgency.MEDIUM),
            (22, Urgency.LOW),
        ],
    )
    def test_band_edges(self, make_product, constant_forecaster, stockout_day, expected):
        product = make_product(current_stock=_stock_for_stockout_on(stockout_day))
        [rec] = generate_restock_recommendations([product], constant_forecaster)
        assert rec.urgency == expected

    def test_classify_never_out_is_low(self):
        assert classify_urgency(None, RestockConfig()) == Urgency.LOW

    def test_stock_lasting_horizon(self, make_product, constant_forecaster):
        # 300 units of demand, 400 on hand, but safety stock (140) still needed.
        product = make_product(current_stock=400.0)
        [rec] = generate_restock_recommendations([product], constant_forecaster)
        assert rec.urgency == Urgency.LOW
        assert rec.estimated_stockout_date is None
        assert rec.potential_lost_revenue is None
        assert rec.recommended_quantity == 40
        assert "run out" not in rec.reasoning

    def test_fully_stocked_not_emitted(self, make_product, constant_forecaster):
        product = make_product(current_stock=440.0)
        assert generate_restock_recommendations([product], constant_forecaster) == []


class TestFindStockout:
    def _forecast(self, quantities):
        start = date(2025, 2, 1)
        return [
            ForecastPoint(date=start + timedelta(days=i), predicted_quantity=q, confidence=0.5)
            for i, q in enumerate(quantities)
        ]

    def test_equal_is_not_stockout(self):
        assert find_stockout(self._forecast([5.0, 5.0]), 10.0) == (None, None)

    def test_first_exceeding_day(self):
        day, when = find_stockout(self._forecast([5.0, 5.0, 1.0]), 10.0)
        assert day == 3
        assert when == date(2025, 2, 3)


# ── Ordering and determinism ──────────────────────────────────────────────────

class TestOrdering:
    def test_sorted_by_urgency_then_input_order(self, make_product, constant_forecaster):
        products = [
            make_product(sku="LOW", current_stock=_stock_for_stockout_on(25)),
            make_product(sku="CRIT-A", current_stock=_stock_for_stockout_on(3)),
            make_product(sku="MED", current_stock=_stock_for_stockout_on(18)),
            make_product(sku="CRIT-B", current_stock=_stock_for_stockout_on(5)),
            make_product(sku="HIGH", current_stock=_stock_for_stockout_on(10)),
        ]
        recs = generate_restock_recommendations(products, constant_forecaster)
        assert [r.sku for r in recs] == ["CRIT-A", "CRIT-B", "HIGH", "MED", "LOW"]
        ranks = [r.urgency.rank for r in recs]
        assert ranks == sorted(ranks, reverse=True)

    def test_idempotent(self, make_product):
        products = [
            make_product(sku="A", current_stock=30.0),
            make_product(sku="B", current_stock=150.0),
        ]
        first = generate_restock_recommendations(products, ConstantForecaster())
        second = generate_restock_recommendations(products, ConstantForecaster())
        assert [r.model_dump_json() for r in first] == [r.model_dump_json() for r in second]


# ── Provider contract ─────────────────────────────────────────────────────────

class _OverlongForecaster:
    def forecast(self, series, horizon_days):
        return ConstantForecaster().forecast(series, horizon_days + 1)


class _BadConfidenceForecaster:
    def forecast(self, series, horizon_days):
        return [{"date": "2025-02-01", "predicted_quantity": 1.0, "confidence": -0.2}]


class _WeeklyForecaster:
    def forecast(self, series, horizon_days):
        last = series[-1][0]
        return [
            ForecastPoint(
                date=last + timedelta(days=1, weeks=i), predicted_quantity=10.0, confidence=0.9
            )
            for i in range(4)
        ]


class _LaggingForecaster:
    def forecast(self, series, horizon_days):
        return ConstantForecaster().forecast(series[:-3], horizon_days)


class TestProviderContract:
    def test_weekly_points_raise(self, make_product):
        with pytest.raises(ProviderContractError, match="consecutive days"):
            generate_restock_recommendations([make_product()], _WeeklyForecaster())

    def test_forecast_must_start_after_history(self, make_product):
        with pytest.raises(ProviderContractError, match="expected 2025-01-11"):
            generate_restock_recommendations([make_product()], _LaggingForecaster())

    def test_too_many_points_raises(self, make_product):
        with pytest.raises(ProviderContractError, match="_OverlongForecaster"):
            generate_restock_recommendations([make_product()], _OverlongForecaster())

    def test_negative_confidence_raises(self, make_product):
        with pytest.raises(ProviderContractError, match="malformed"):
            generate_restock_recommendations([make_product()], _BadConfidenceForecaster())
