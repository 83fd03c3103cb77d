"""
Analytics Package

Statistical primitives, pattern detection, cash flow forecasting and
insight generation. Every function here is pure: it takes a snapshot
of the transaction list and returns new values, with no I/O.
"""

from finsight.analytics.forecast import forecast_cash_flow
from finsight.analytics.insights import (
    best_month,
    financial_risk,
    generate_insights,
    rank_insights,
)
from finsight.analytics.patterns import classify_trend, detect_patterns
from finsight.analytics.primitives import (
    cash_flow_entropy,
    consistency_score,
    financial_velocity,
    linear_trend,
    recent_trend,
    signed_amount,
    volatility,
)

__all__ = [
    "best_month",
    "cash_flow_entropy",
    "classify_trend",
    "consistency_score",
    "detect_patterns",
    "financial_risk",
    "financial_velocity",
    "forecast_cash_flow",
    "generate_insights",
    "linear_trend",
    "rank_insights",
    "recent_trend",
    "signed_amount",
    "volatility",
]
