"""
Baseline collaborators: a smoothed-trend forecaster and a z-score anomaly
detector.

These exist so the batch runner and CLI work end-to-end without an external
forecasting service.  The advisors depend only on the protocols in
``providers.base``; swap either class for a production model without
touching advisor code.

  SmoothedTrendForecaster → "Demand follows a linear trend once day-to-day
                             noise is smoothed away."
                             Exponential smoothing (alpha = 0.3), then an
                             ordinary least squares line through the smoothed
                             series, extrapolated one point per day.
                             Confidence = clamp(r² × 0.9, 0.10, 0.95).

  ZScoreAnomalyDetector   → "A value more than ``sensitivity`` population
                             standard deviations from the mean is unusual."
                             Severity is the absolute z-score.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date

from commerce_advisor.models.signals import AnomalyPoint, ForecastPoint
from commerce_advisor.utils.time_utils import following_days


def exponential_smoothing(values: Sequence[float], alpha: float = 0.3) -> list[float]:
    """Simple exponential smoothing; the first value seeds the level."""
    if not values:
        return []
    smoothed = [float(values[0])]
    for v in values[1:]:
        smoothed.append(alpha * v + (1.0 - alpha) * smoothed[-1])
    return smoothed


def linear_trend(y: Sequence[float]) -> tuple[float, float, float]:
    """Least squares fit of ``y`` against its index.

    Returns:
        ``(slope, intercept, r2)``.  ``r2`` is 0.0 when ``y`` is constant
        (the fit is exact but explains no variance).
    """
    n = len(y)
    if n == 0:
        return 0.0, 0.0, 0.0
    x_mean = (n - 1) / 2.0
    y_mean = sum(y) / n
    sxx = sum((i - x_mean) ** 2 for i in range(n))
    sxy = sum((i - x_mean) * (v - y_mean) for i, v in enumerate(y))
    slope = sxy / sxx if sxx > 0 else 0.0
    intercept = y_mean - slope * x_mean

    ss_tot = sum((v - y_mean) ** 2 for v in y)
    if ss_tot == 0:
        return slope, intercept, 0.0
    ss_res = sum((v - (slope * i + intercept)) ** 2 for i, v in enumerate(y))
    return slope, intercept, 1.0 - ss_res / ss_tot


class SmoothedTrendForecaster:
    """Smoothed linear-trend demand forecaster.

    Returns ``[]`` when fewer than ``min_points`` observations are supplied.
    """

    def __init__(self, alpha: float = 0.3, min_points: int = 7) -> None:
        self._alpha = alpha
        self._min_points = min_points

    def forecast(
        self,
        series: Sequence[tuple[date, float]],
        horizon_days: int,
    ) -> list[ForecastPoint]:
        if len(series) < self._min_points or horizon_days < 1:
            return []

        quantities = [float(q) for _, q in series]
        smoothed = exponential_smoothing(quantities, self._alpha)
        slope, intercept, r2 = linear_trend(smoothed)
        confidence = round(min(0.95, max(0.1, r2 * 0.9)), 2)

        last_date = series[-1][0]
        points: list[ForecastPoint] = []
        for i, target in enumerate(following_days(last_date, horizon_days), start=1):
            future_index = len(series) + i - 1
            predicted = max(0.0, slope * future_index + intercept)
            points.append(
                ForecastPoint(
                    date=target,
                    predicted_quantity=round(predicted, 2),
                    confidence=confidence,
                )
            )
        return points


class ZScoreAnomalyDetector:
    """Population z-score outlier detector.

    A constant (or single-value) series has zero spread and yields no
    anomalies.
    """

    def detect_anomalies(
        self,
        series: Sequence[float],
        sensitivity: float,
    ) -> list[AnomalyPoint]:
        n = len(series)
        if n == 0:
            return []
        mean = sum(series) / n
        std = math.sqrt(sum((v - mean) ** 2 for v in series) / n)
        if std == 0:
            return []

        anomalies: list[AnomalyPoint] = []
        for index, value in enumerate(series):
            z = abs((value - mean) / std)
            if z > sensitivity:
                anomalies.append(
                    AnomalyPoint(index=index, value=float(value), severity=round(z, 4))
                )
        return anomalies
