"""
Collaborator contracts consumed by the advisors.

The advisors never forecast or detect anomalies themselves.  They call a
``ForecastProvider`` / ``AnomalyProvider`` and then validate what came back
with ``check_forecast()`` / ``check_anomalies()``.

Interface contract
------------------
  forecast(series, horizon_days) -> list[ForecastPoint]
    ``series`` is an ordered sequence of ``(date, quantity)`` pairs.  Must
    return one point per consecutive calendar day, starting the day after the
    last observation, at most ``horizon_days`` of them.  Returns ``[]`` if the
    series is insufficient.

  detect_anomalies(series, sensitivity) -> list[AnomalyPoint]
    ``series`` is a sequence of numbers; ``sensitivity`` is a deviation
    multiplier (e.g. 2.0 standard deviations).  ``AnomalyPoint.index``
    refers positionally into ``series``.

Raising vs returning
--------------------
A provider that breaks the contract is a boundary error: the advisor has no
way to judge the business meaning of corrupt points, so ``check_*`` raise
``ProviderContractError`` instead of filtering.  Insufficient input is not a
violation; an empty result is always acceptable.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from commerce_advisor.models.signals import AnomalyPoint, ForecastPoint


# ── Custom exceptions ─────────────────────────────────────────────────────────


class ProviderContractError(ValueError):
    """Raised when a collaborator returns data that violates its contract.

    Attributes:
        provider: Name of the offending provider (its class name).
        detail:   What was wrong with the output.
    """

    def __init__(self, provider: str, detail: str) -> None:
        self.provider = provider
        self.detail   = detail
        super().__init__(f"Provider '{provider}' violated its contract: {detail}")


# ── Protocols ─────────────────────────────────────────────────────────────────


@runtime_checkable
class ForecastProvider(Protocol):
    """Produces per-day demand forecasts with confidence."""

    def forecast(
        self,
        series: Sequence[tuple[date, float]],
        horizon_days: int,
    ) -> Sequence[ForecastPoint]: ...


@runtime_checkable
class AnomalyProvider(Protocol):
    """Flags statistically unusual points in a numeric series."""

    def detect_anomalies(
        self,
        series: Sequence[float],
        sensitivity: float,
    ) -> Sequence[AnomalyPoint]: ...


# ── Contract checks ───────────────────────────────────────────────────────────


def check_forecast(
    points: Sequence[Any],
    horizon_days: int,
    provider: str = "ForecastProvider",
    last_observed: date | None = None,
) -> list[ForecastPoint]:
    """Validate forecast output and return it as a list of ``ForecastPoint``.

    Dict payloads are coerced through ``ForecastPoint`` so a provider backed
    by a remote service can return raw JSON objects.

    Args:
        points:        Provider output.
        horizon_days:  Horizon the provider was asked for.
        provider:      Name used in error messages.
        last_observed: Last date of the input series.  When given, the first
                       point must fall on the following day.

    Returns:
        The validated points, in the order received.

    Raises:
        ProviderContractError: On malformed points, more points than the
            horizon, or dates that skip or repeat a day.
    """
    validated = [_coerce(ForecastPoint, p, provider) for p in points]

    if len(validated) > horizon_days:
        raise ProviderContractError(
            provider,
            f"returned {len(validated)} points for a {horizon_days}-day horizon.",
        )

    if validated and last_observed is not None:
        expected = last_observed + timedelta(days=1)
        if validated[0].date != expected:
            raise ProviderContractError(
                provider,
                f"forecast starts on {validated[0].date}, expected {expected}.",
            )

    for prev, curr in zip(validated, validated[1:]):
        if curr.date != prev.date + timedelta(days=1):
            raise ProviderContractError(
                provider,
                f"forecast dates not on consecutive days ({prev.date} then {curr.date}).",
            )

    return validated


def check_anomalies(
    points: Sequence[Any],
    series_length: int,
    provider: str = "AnomalyProvider",
) -> list[AnomalyPoint]:
    """Validate anomaly output against the series it was computed over.

    Raises:
        ProviderContractError: On malformed points, an index outside
            ``[0, series_length)``, or the same index reported twice.
    """
    validated = [_coerce(AnomalyPoint, p, provider) for p in points]

    seen: set[int] = set()
    for point in validated:
        if point.index >= series_length:
            raise ProviderContractError(
                provider,
                f"anomaly index {point.index} out of range for a series of "
                f"length {series_length}.",
            )
        if point.index in seen:
            raise ProviderContractError(
                provider, f"anomaly index {point.index} reported more than once."
            )
        seen.add(point.index)

    return validated


def _coerce(model: type, value: Any, provider: str):
    if isinstance(value, model):
        return value
    if isinstance(value, dict):
        try:
            return model.model_validate(value)
        except ValidationError as exc:
            raise ProviderContractError(provider, f"malformed point: {exc}") from exc
    raise ProviderContractError(
        provider, f"expected {model.__name__}, got {type(value).__name__}."
    )
