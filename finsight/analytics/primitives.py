"""
Statistical Primitives

Small, stateless functions over the transaction list or plain number
sequences. Every function returns 0 instead of raising or producing
NaN when its input is too small or degenerate.

Sign convention: income and sale are inflows (+), expense and purchase
are outflows (-). Investment, asset and liability transactions are
balance-sheet items; they have no cash flow sign and are left out of
every signed aggregation here.
"""

import math
from collections import defaultdict
from typing import Iterable, Sequence

from finsight.models.transaction import Transaction


SECONDS_PER_DAY = 60 * 60 * 24


def signed_amount(transaction: Transaction) -> float:
    """Amount with its cash flow sign (0 for balance-sheet types)."""
    return transaction.signed_amount


def sort_by_date(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return a new list ordered by date, oldest first."""
    return sorted(transactions, key=lambda t: t.date)


def cash_flow_only(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Keep only inflows and outflows."""
    return [t for t in transactions if t.type.is_cash_flow]


def days_between(earlier: Transaction, later: Transaction) -> float:
    """Elapsed time between two transactions, in fractional days."""
    return (later.date - earlier.date).total_seconds() / SECONDS_PER_DAY


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def financial_velocity(transactions: Sequence[Transaction]) -> float:
    """
    Mean absolute amount change per elapsed day.

    Adjacent pairs (in date order) that share a timestamp are skipped.
    Returns 0 with fewer than 2 transactions or no usable pair.
    """
    if len(transactions) < 2:
        return 0.0

    ordered = sort_by_date(transactions)
    rates = []
    for previous, current in zip(ordered, ordered[1:]):
        elapsed = days_between(previous, current)
        if elapsed > 0:
            rates.append(abs(current.amount - previous.amount) / elapsed)

    return mean(rates)


def cash_flow_entropy(transactions: Sequence[Transaction]) -> float:
    """
    Shannon entropy (base 2) of the daily absolute net flow distribution.

    Higher values mean money moves on many days in similar proportions;
    0 means all flow is concentrated on a single day (or there is none).
    """
    daily: dict = defaultdict(float)
    for t in cash_flow_only(transactions):
        daily[t.date.date()] += signed_amount(t)

    if not daily:
        return 0.0

    total = sum(abs(flow) for flow in daily.values())
    if total == 0:
        return 0.0

    entropy = 0.0
    for flow in daily.values():
        probability = abs(flow) / total
        if probability > 0:
            entropy -= probability * math.log2(probability)

    # Bounded by the uniform distribution over the buckets
    return min(entropy, math.log2(len(daily)))


def linear_trend(values: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of values against their index 0..n-1.

    Returns 0 when n < 2, when the denominator vanishes, or when the
    result is not finite.
    """
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    sum_xx = sum(i * i for i in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    return slope if math.isfinite(slope) else 0.0


def recent_trend(transactions: Sequence[Transaction]) -> float:
    """Slope of signed cash flows, taken in date order."""
    flows = [signed_amount(t) for t in sort_by_date(cash_flow_only(transactions))]
    return linear_trend(flows)


def volatility(values: Sequence[float]) -> float:
    """Population standard deviation. 0 for fewer than 2 values."""
    if len(values) < 2:
        return 0.0

    avg = mean(values)
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def consistency_score(values: Sequence[float]) -> float:
    """
    1 minus the coefficient of variation, floored at 0.

    A non-positive mean counts as CoV = 1. Fewer than 2 values score 0.
    """
    if len(values) < 2:
        return 0.0

    avg = mean(values)
    coefficient_of_variation = volatility(values) / avg if avg > 0 else 1.0
    return max(0.0, 1.0 - coefficient_of_variation)
