"""
Signal points produced by the external collaborators.

``ForecastPoint`` is produced only by a ``ForecastProvider``;
``AnomalyPoint`` only by an ``AnomalyProvider``.  Both are frozen and
range-checked at construction so a provider cannot hand the advisors a
negative demand or a confidence outside [0, 1].
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class ForecastPoint(BaseModel):
    """Predicted demand for one future day.

    Attributes:
        date: Forecast target date.
        predicted_quantity: Expected units (non-negative).
        confidence: Provider confidence in [0, 1].
    """

    model_config = ConfigDict(frozen=True)

    date: date
    predicted_quantity: float = Field(ge=0)
    confidence: float = Field(ge=0.0, le=1.0)


class AnomalyPoint(BaseModel):
    """A statistically unusual value in a numeric series.

    Attributes:
        index: Position of the value in the series passed to the provider.
        value: The flagged value.
        severity: Deviation magnitude (e.g. absolute z-score), non-negative.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    value: float
    severity: float = Field(ge=0.0)
