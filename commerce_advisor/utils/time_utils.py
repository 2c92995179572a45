"""
Date helpers shared by the advisors and the baseline providers.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def format_short_date(d: date) -> str:
    """Render a date as ``"Mar 05"`` for use in reasoning text."""
    return d.strftime("%b %d")


def following_days(last: date, count: int) -> list[date]:
    """Return the ``count`` calendar days after ``last``, in order.

    Raises:
        ValueError: If ``count`` is negative.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}.")
    return [last + timedelta(days=i) for i in range(1, count + 1)]


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)
