"""
Marketing advisor: triages ad campaigns by ROAS and CTR.

Per-campaign rules (independent; a campaign yields 0–2 recommendations)
-----------------------------------------------------------------------
    roas = revenue / spend        ctr = clicks / impressions

    OPTIMIZE : active AND roas < 2      → campaign_optimization
               priority high if roas < 1, else medium
    REFRESH  : active AND ctr < 0.01    → creative_refresh, medium
    SCALE    : active AND roas > 3      → budget_allocation, high,
               estimated cost = 0.5 × spend

Zero-spend campaigns have no defined ROAS and skip OPTIMIZE / SCALE;
zero-impression campaigns have no defined CTR and skip REFRESH.

Portfolio rule
--------------
    avg_roas = Σ revenue / Σ spend  (all campaigns, active or not)
    REALLOCATE : avg_roas < 2.5 → budget_allocation, high

Output is sorted by priority rank descending, stable for ties.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from commerce_advisor.config import MarketingConfig
from commerce_advisor.models.commerce import CampaignMetrics
from commerce_advisor.models.recommendation import MarketingRecommendation
from commerce_advisor.taxonomy.tiers import MarketingActionType, Priority

logger = logging.getLogger(__name__)

_OPTIMIZE_ACTIONS = [
    "Review and refine audience targeting",
    "Test new ad creative variations",
    "Adjust bidding strategy",
    "Consider pausing if ROAS remains below 1.0",
]

_REFRESH_ACTIONS = [
    "Create new ad creative variations",
    "Test different value propositions",
    "Update product imagery",
    "A/B test headlines and descriptions",
]

_SCALE_ACTIONS = [
    "Increase daily budget by 25-50%",
    "Expand to similar audiences",
    "Test lookalike audiences",
    "Monitor performance closely during scaling",
]

_REALLOCATE_ACTIONS = [
    "Pause campaigns with ROAS < 1.5",
    "Increase budget for campaigns with ROAS > 3.0",
    "Test new campaign concepts",
    "Implement automated bidding strategies",
]


def campaign_roas(campaign: CampaignMetrics) -> float | None:
    """Return revenue / spend, or ``None`` for a zero-spend campaign."""
    if campaign.spend <= 0:
        return None
    return campaign.revenue / campaign.spend


def campaign_ctr(campaign: CampaignMetrics) -> float | None:
    """Return clicks / impressions, or ``None`` with no impressions."""
    if campaign.impressions <= 0:
        return None
    return campaign.clicks / campaign.impressions


def generate_marketing_recommendations(
    campaigns: Sequence[CampaignMetrics],
    config: MarketingConfig | None = None,
) -> list[MarketingRecommendation]:
    """Build campaign and portfolio recommendations, highest priority first.

    Args:
        campaigns: Campaign metrics.
        config:    Thresholds; defaults to ``MarketingConfig()``.

    Returns:
        Recommendations sorted by priority (high → low), stable for ties.
    """
    cfg = config or MarketingConfig()
    recommendations: list[MarketingRecommendation] = []

    for campaign in campaigns:
        if not campaign.is_active:
            continue
        roas = campaign_roas(campaign)
        ctr  = campaign_ctr(campaign)
        if roas is None:
            logger.debug("Marketing: %s has zero spend; ROAS rules skipped", campaign.campaign_id)

        if roas is not None and roas < cfg.roas_target:
            recommendations.append(
                MarketingRecommendation(
                    id=f"optimize-{campaign.campaign_id}",
                    type=MarketingActionType.CAMPAIGN_OPTIMIZATION,
                    title=f"Optimize Low-Performing Campaign: {campaign.name}",
                    description=(
                        f"Campaign has ROAS of {roas:.2f}, below the "
                        f"{cfg.roas_target:.1f} target. Consider adjusting targeting, "
                        f"creative, or pausing."
                    ),
                    priority=Priority.HIGH if roas < cfg.roas_critical else Priority.MEDIUM,
                    expected_roi=1.5,
                    timeframe="1-2 weeks",
                    action_items=list(_OPTIMIZE_ACTIONS),
                )
            )

        if ctr is not None and ctr < cfg.ctr_floor:
            recommendations.append(
                MarketingRecommendation(
                    id=f"creative-{campaign.campaign_id}",
                    type=MarketingActionType.CREATIVE_REFRESH,
                    title=f"Refresh Creative for {campaign.name}",
                    description=(
                        f"Low CTR of {ctr * 100:.2f}% suggests creative fatigue. "
                        f"New creative could improve performance."
                    ),
                    priority=Priority.MEDIUM,
                    expected_roi=1.3,
                    timeframe="1 week",
                    action_items=list(_REFRESH_ACTIONS),
                )
            )

        if roas is not None and roas > cfg.roas_scale:
            recommendations.append(
                MarketingRecommendation(
                    id=f"scale-{campaign.campaign_id}",
                    type=MarketingActionType.BUDGET_ALLOCATION,
                    title=f"Scale High-Performing Campaign: {campaign.name}",
                    description=(
                        f"Excellent ROAS of {roas:.2f} suggests opportunity to "
                        f"increase budget and scale."
                    ),
                    priority=Priority.HIGH,
                    expected_roi=2.5,
                    estimated_cost=campaign.spend * cfg.scale_budget_share,
                    timeframe="Immediate",
                    action_items=list(_SCALE_ACTIONS),
                )
            )

    total_spend = sum(c.spend for c in campaigns)
    if total_spend > 0:
        avg_roas = sum(c.revenue for c in campaigns) / total_spend
        if avg_roas < cfg.portfolio_roas_target:
            recommendations.append(
                MarketingRecommendation(
                    id="budget-reallocation",
                    type=MarketingActionType.BUDGET_ALLOCATION,
                    title="Reallocate Budget to High-Performing Campaigns",
                    description=(
                        f"Overall ROAS of {avg_roas:.2f} can be improved by shifting "
                        f"budget from low to high performers."
                    ),
                    priority=Priority.HIGH,
                    expected_roi=1.8,
                    timeframe="1 week",
                    action_items=list(_REALLOCATE_ACTIONS),
                )
            )

    logger.info(
        "Marketing: %d recommendations from %d campaigns",
        len(recommendations), len(campaigns),
        extra={
            "advisor": "marketing",
            "emitted": len(recommendations),
            "considered": len(campaigns),
        },
    )
    return sorted(recommendations, key=lambda r: r.priority.rank, reverse=True)
