"""
Advisors: pure batch functions that turn business records into ranked,
typed recommendation lists.

Modules
-------
restock    : generate_restock_recommendations() - forecast-driven stockout
             urgency and reorder quantity.
pricing    : estimate_elasticity() + generate_pricing_recommendations() -
             two-point elasticity, margin and competitor rules.
marketing  : generate_marketing_recommendations() - ROAS / CTR campaign triage
             plus a portfolio reallocation check.
cross_sell : build_basket_stats() + generate_cross_sell_recommendations() -
             market-basket co-occurrence with confidence and lift thresholds.
insights   : generate_business_insights() - revenue trend, margin, customer
             concentration and anomaly signals merged into one feed.

Every function takes explicit inputs plus an optional config section, holds
no state between calls, and never mutates its inputs.
"""
