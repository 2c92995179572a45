"""
Ordinal tiers and type tags shared by every advisor output.

Two families of enum live here:
  - Severity tiers (``Urgency``, ``Priority``, ``Impact``) - ordinal buckets
    used to rank output lists.  Each exposes an integer ``rank`` so that
    sorting never relies on string comparison.
  - Type tags (``MarketingActionType``, ``InsightType``) - what kind of
    action or insight a record describes.

This module has NO imports from any other ``commerce_advisor`` package.
"""

from enum import StrEnum


class Urgency(StrEnum):
    """How soon a product must be restocked."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """critical=4, high=3, medium=2, low=1."""
        return _URGENCY_RANK[self]


class Priority(StrEnum):
    """Marketing recommendation priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _THREE_TIER_RANK[self.value]


class Impact(StrEnum):
    """Expected business impact of an insight."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _THREE_TIER_RANK[self.value]


class MarketingActionType(StrEnum):
    """Campaign-scoped action a marketing recommendation proposes."""

    CAMPAIGN_OPTIMIZATION = "campaign_optimization"
    AUDIENCE_TARGETING = "audience_targeting"
    BUDGET_ALLOCATION = "budget_allocation"
    CREATIVE_REFRESH = "creative_refresh"


class InsightType(StrEnum):
    """Category of a business insight."""

    OPPORTUNITY = "opportunity"
    RISK = "risk"
    OPTIMIZATION = "optimization"
    TREND = "trend"


_URGENCY_RANK: dict[Urgency, int] = {
    Urgency.CRITICAL: 4,
    Urgency.HIGH:     3,
    Urgency.MEDIUM:   2,
    Urgency.LOW:      1,
}

_THREE_TIER_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}
