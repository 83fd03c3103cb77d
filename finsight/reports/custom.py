"""
Custom Report Engine

Filters the transaction list by type, category and date range, then
aggregates the matches along one grouping dimension.

DESIGN DECISION: Each grouping dimension produces its own typed group
record (see models.reports.ReportGroup), so a "type" breakdown and a
"category" breakdown never share an untyped dictionary.
"""

from datetime import datetime
from typing import Optional, Sequence

from finsight.models.reports import (
    CategoryGroup,
    CustomReport,
    GroupBy,
    MonthGroup,
    PaymentMethodGroup,
    ReportCriteria,
    ReportGroup,
    TypeGroup,
)
from finsight.models.transaction import Transaction, TransactionType
from finsight.reports.builders import add_to_breakdown


def filter_transactions(
    transactions: Sequence[Transaction],
    criteria: ReportCriteria,
) -> list[Transaction]:
    """Apply the type, category and (inclusive) date range filters."""
    matches = []
    for t in transactions:
        if criteria.types and t.type not in criteria.types:
            continue
        if criteria.categories and t.category not in criteria.categories:
            continue
        if criteria.date_from and t.date < criteria.date_from:
            continue
        if criteria.date_to and t.date > criteria.date_to:
            continue
        matches.append(t)
    return matches


def group_transactions(
    transactions: Sequence[Transaction],
    group_by: GroupBy,
) -> list[ReportGroup]:
    """
    Aggregate transactions along one dimension.

    Ordering: categories by total activity, months newest first, types
    and payment methods by amount, largest first.
    """
    if group_by == GroupBy.CATEGORY:
        categories: dict[str, CategoryGroup] = {}
        for t in transactions:
            add_to_breakdown(categories.setdefault(t.category, CategoryGroup(key=t.category)), t)
        return sorted(categories.values(), key=lambda g: g.total_activity, reverse=True)

    if group_by == GroupBy.MONTH:
        months: dict[str, MonthGroup] = {}
        for t in transactions:
            add_to_breakdown(months.setdefault(t.month_key, MonthGroup(key=t.month_key)), t)
        return sorted(months.values(), key=lambda g: g.key, reverse=True)

    if group_by == GroupBy.TYPE:
        types: dict[TransactionType, TypeGroup] = {}
        for t in transactions:
            group = types.setdefault(t.type, TypeGroup(key=t.type))
            group.amount += t.amount
            group.count += 1
        return sorted(types.values(), key=lambda g: g.amount, reverse=True)

    methods: dict[str, PaymentMethodGroup] = {}
    for t in transactions:
        group = methods.setdefault(t.payment_method, PaymentMethodGroup(key=t.payment_method))
        group.amount += t.amount
        group.count += 1
    return sorted(methods.values(), key=lambda g: g.amount, reverse=True)


def custom_report(
    transactions: Sequence[Transaction],
    criteria: ReportCriteria,
    generated_at: Optional[datetime] = None,
) -> CustomReport:
    """
    Build a custom report.

    Args:
        transactions: Full transaction list; coverage is measured against it
        criteria: Filters and grouping dimension
        generated_at: Report timestamp, defaults to now

    Returns:
        Totals, typed groups and derived ratios for the matching subset
    """
    matches = filter_transactions(transactions, criteria)

    def total(type_: TransactionType) -> float:
        return sum(t.amount for t in matches if t.type == type_)

    income = total(TransactionType.INCOME)
    expenses = total(TransactionType.EXPENSE)
    sales = total(TransactionType.SALE)
    purchases = total(TransactionType.PURCHASE)
    revenue = income + sales
    costs = expenses + purchases
    net = revenue - costs

    return CustomReport(
        criteria=criteria,
        generated_at=generated_at or datetime.now(),
        total_income=income,
        total_expenses=expenses,
        total_sales=sales,
        total_purchases=purchases,
        total_revenue=revenue,
        total_costs=costs,
        net_amount=net,
        transaction_count=len(matches),
        groups=group_transactions(matches, criteria.group_by),
        profit_margin=net / revenue * 100 if revenue > 0 else 0.0,
        average_transaction=(revenue + costs) / len(matches) if matches else 0.0,
        data_coverage=len(matches) / len(transactions) * 100 if transactions else 0.0,
    )
