"""
Cash-Flow Forecaster

Projects weekly inflows and outflows for the coming weeks.

Each week is estimated from transactions that fell in the same calendar
month in any past year (a seasonal proxy), scaled by the slope of the
most recent cash flows. Confidence follows how consistent the amounts
in that month have been.
"""

from datetime import datetime, timedelta
from typing import Optional, Sequence

from finsight.analytics.primitives import (
    cash_flow_only,
    consistency_score,
    recent_trend,
    sort_by_date,
)
from finsight.models.analytics import CashFlowPrediction
from finsight.models.transaction import Transaction


FORECAST_WEEKS = 12
MIN_FORECAST_TRANSACTIONS = 5
RECENT_WINDOW = 10
TREND_WEIGHT = 0.1
MIN_CONFIDENCE = 20.0
MAX_CONFIDENCE = 95.0


def _trend_label(slope: float) -> str:
    if slope > 0:
        return "positive"
    if slope < 0:
        return "negative"
    return "stable"


def forecast_cash_flow(
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
    weeks: int = FORECAST_WEEKS,
    min_transactions: int = MIN_FORECAST_TRANSACTIONS,
) -> list[CashFlowPrediction]:
    """
    Predict inflow and outflow for each of the next `weeks` weeks.

    Args:
        transactions: Full transaction list (not modified)
        now: Reference time; defaults to the wall clock, not the
             latest transaction date
        weeks: Number of weekly predictions
        min_transactions: Below this many transactions nothing is
                          predicted

    Returns:
        Exactly `weeks` predictions, or an empty list on sparse data
    """
    if len(transactions) < min_transactions:
        return []

    now = now or datetime.now()
    ordered = sort_by_date(transactions)
    slope = recent_trend(cash_flow_only(ordered)[-RECENT_WINDOW:])

    predictions = []
    for week in range(1, weeks + 1):
        target = now + timedelta(days=7 * week)

        same_month = [t for t in ordered if t.date.month == target.month]
        divisor = max(1, len(same_month))
        avg_inflow = sum(t.amount for t in same_month if t.type.is_inflow) / divisor
        avg_outflow = sum(t.amount for t in same_month if t.type.is_outflow) / divisor

        trend_factor = 1 + slope * week * TREND_WEIGHT
        consistency = consistency_score([t.amount for t in same_month])
        confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, consistency * 100))

        predictions.append(CashFlowPrediction(
            date=target,
            predicted_inflow=avg_inflow * trend_factor,
            predicted_outflow=avg_outflow * trend_factor,
            confidence=confidence,
            factors=[
                f"Seasonal pattern ({target.month}/{target.year})",
                f"Historical trend: {_trend_label(slope)}",
                f"Data consistency: {consistency * 100:.0f}%",
            ],
        ))

    return predictions
