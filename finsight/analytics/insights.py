"""
Risk & Insight Generator

Rule-based, deterministic insights. Each rule looks at one statistic or
pattern and adds at most one insight; the final list is ranked by
impact weight times confidence.

There is no machine learning here. The "AI" label is the dashboard's.
"""

from collections import defaultdict
from typing import Optional, Sequence

from finsight.analytics.patterns import detect_patterns
from finsight.analytics.primitives import (
    cash_flow_entropy,
    cash_flow_only,
    financial_velocity,
    recent_trend,
    signed_amount,
    volatility,
)
from finsight.config import AnalyticsSettings, get_settings
from finsight.models.analytics import (
    AIInsight,
    FinancialPattern,
    Impact,
    InsightType,
    Trend,
)
from finsight.models.transaction import Transaction


NEUTRAL_RISK = 0.5
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def financial_risk(
    transactions: Sequence[Transaction],
    min_transactions: int = 10,
) -> float:
    """
    Composite risk score in [0, 1].

    Weighted from the share of months with negative net flow (0.4),
    the volatility of monthly net flow (0.4, saturating at 10000) and
    the absolute cash flow trend (0.2, saturating at 1000).

    Sparse data (fewer than `min_transactions`) gets the neutral 0.5
    rather than a confident claim either way.
    """
    if len(transactions) < min_transactions:
        return NEUTRAL_RISK

    monthly: dict[tuple[int, int], float] = defaultdict(float)
    for t in cash_flow_only(transactions):
        monthly[(t.date.year, t.date.month)] += signed_amount(t)

    flows = list(monthly.values())
    negative_share = sum(1 for f in flows if f < 0) / len(flows) if flows else 0.0
    trend_strength = abs(recent_trend(transactions))

    risk = (
        0.4 * negative_share
        + 0.4 * min(1.0, volatility(flows) / 10000)
        + 0.2 * min(1.0, trend_strength / 1000)
    )
    return min(1.0, max(0.0, risk))


def best_month(transactions: Sequence[Transaction]) -> Optional[tuple[int, float]]:
    """
    Calendar month (1-12, any year) with the highest net flow.

    Returns None with fewer than two cash-flow transactions. A history
    inside one month still has that month as its peak.
    """
    cash_flow = cash_flow_only(transactions)
    if len(cash_flow) < 2:
        return None

    by_month: dict[int, float] = defaultdict(float)
    for t in cash_flow:
        by_month[t.date.month] += signed_amount(t)
    return max(by_month.items(), key=lambda item: item[1])


def rank_insights(insights: Sequence[AIInsight]) -> list[AIInsight]:
    """Sort by impact weight x confidence, highest first (stable)."""
    return sorted(insights, key=lambda i: i.score, reverse=True)


def generate_insights(
    transactions: Sequence[Transaction],
    patterns: Optional[Sequence[FinancialPattern]] = None,
    settings: Optional[AnalyticsSettings] = None,
    currency_symbol: str = "Rs.",
) -> list[AIInsight]:
    """
    Run every insight rule over the transaction list.

    Args:
        transactions: Full transaction list (not modified)
        patterns: Precomputed patterns; detected here when omitted
        settings: Rule thresholds; defaults to the configured ones
        currency_symbol: Prefix for amounts in descriptions

    Returns:
        Ranked insights (possibly empty)
    """
    rules = settings or get_settings().analytics
    if patterns is None:
        patterns = detect_patterns(transactions, rules.min_pattern_transactions)

    insights = []

    velocity = financial_velocity(transactions)
    if velocity > rules.velocity_warning:
        insights.append(AIInsight(
            id="velocity-high",
            type=InsightType.WARNING,
            title="High Financial Velocity Detected",
            description=(
                f"Your transaction velocity is {velocity:.0f} {currency_symbol}/day. "
                "This indicates rapid financial changes that may require closer monitoring."
            ),
            impact=Impact.HIGH,
            confidence=85,
            category="Cash Flow Management",
            value=velocity,
        ))

    entropy = cash_flow_entropy(transactions)
    if entropy > rules.entropy_opportunity:
        insights.append(AIInsight(
            id="entropy-high",
            type=InsightType.OPPORTUNITY,
            title="Financial Flow Optimization Opportunity",
            description=(
                f"Your cash flow entropy is {entropy:.2f}, suggesting irregular patterns. "
                "Smoothing these could improve predictability by up to 30%."
            ),
            impact=Impact.MEDIUM,
            confidence=78,
            category="Financial Stability",
            value=entropy,
        ))

    for pattern in patterns:
        if pattern.trend == Trend.INCREASING and pattern.average_amount > rules.pattern_growth_amount:
            growth = (pattern.predicted_next - pattern.average_amount) / pattern.average_amount * 100
            insights.append(AIInsight(
                id=f"pattern-{pattern.pattern}",
                type=InsightType.PREDICTION,
                title=f"{pattern.pattern} Growth Trajectory",
                description=(
                    f"Your {pattern.pattern} category shows a {growth:.1f}% growth trend. "
                    f"Next predicted amount: {currency_symbol}{pattern.predicted_next:.0f}"
                ),
                impact=Impact.HIGH,
                confidence=82,
                category="Growth Analysis",
                value=pattern.predicted_next,
            ))

    peak = best_month(transactions)
    if peak is not None and peak[1] > 0:
        month, net = peak
        insights.append(AIInsight(
            id="seasonal-peak",
            type=InsightType.OPTIMIZATION,
            title="Seasonal Performance Peak Identified",
            description=(
                f"{MONTH_NAMES[month - 1]} is your strongest month with "
                f"{currency_symbol}{net:.0f} net flow. "
                "Consider scaling operations during this period."
            ),
            impact=Impact.HIGH,
            confidence=90,
            category="Seasonal Strategy",
            value=net,
        ))

    risk = financial_risk(transactions, rules.min_risk_transactions)
    if risk > rules.risk_warning:
        insights.append(AIInsight(
            id="risk-assessment",
            type=InsightType.WARNING,
            title="Elevated Financial Risk Detected",
            description=(
                f"Risk score: {risk * 100:.0f}%. "
                "Consider diversifying income sources and building emergency reserves."
            ),
            impact=Impact.HIGH,
            confidence=88,
            category="Risk Management",
            value=risk,
        ))

    return rank_insights(insights)
