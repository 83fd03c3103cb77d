"""
Pattern Detector

Groups transactions by category and describes each recurring one:
how often it happens, how large it usually is, and where its amounts
are heading.
"""

from collections import defaultdict
from typing import Optional, Sequence

from finsight.analytics.primitives import (
    days_between,
    linear_trend,
    mean,
    sort_by_date,
)
from finsight.models.analytics import FinancialPattern, Trend
from finsight.models.transaction import Transaction


MIN_PATTERN_TRANSACTIONS = 3
TREND_THRESHOLD = 0.1


def classify_trend(slope: float) -> Trend:
    if slope > TREND_THRESHOLD:
        return Trend.INCREASING
    if slope < -TREND_THRESHOLD:
        return Trend.DECREASING
    return Trend.STABLE


def detect_patterns(
    transactions: Sequence[Transaction],
    min_transactions: Optional[int] = None,
) -> list[FinancialPattern]:
    """
    Detect one pattern per category with enough transactions.

    Categories below the threshold are left out entirely. The trend is
    the regression slope of amounts against their position in date
    order (not against the dates themselves), and the next amount is a
    one-step extrapolation clamped at zero.

    Returns:
        Patterns sorted by average amount, largest first
    """
    threshold = MIN_PATTERN_TRANSACTIONS if min_transactions is None else min_transactions

    groups: dict[str, list[Transaction]] = defaultdict(list)
    for t in transactions:
        groups[t.category].append(t)

    patterns = []
    for category, members in groups.items():
        if len(members) < threshold:
            continue

        ordered = sort_by_date(members)
        intervals = [days_between(a, b) for a, b in zip(ordered, ordered[1:])]
        amounts = [t.amount for t in ordered]
        slope = linear_trend(amounts)

        patterns.append(FinancialPattern(
            pattern=category,
            frequency=mean(intervals),
            average_amount=mean(amounts),
            trend=classify_trend(slope),
            predicted_next=max(0.0, amounts[-1] + slope),
            transaction_count=len(ordered),
        ))

    return sorted(patterns, key=lambda p: p.average_amount, reverse=True)
