"""
Summary and Report Builders

Pure projections of the transaction list into the typed report records.
Nothing here reads or writes storage.
"""

from collections import defaultdict
from typing import Callable, Sequence

from finsight.models.reports import (
    CashFlowReport,
    CategoryReport,
    CategoryTotals,
    FinancialSummary,
    FlowBreakdown,
    MonthlyCashFlow,
    MonthlyReport,
    MonthlyTotals,
    ProfitLossReport,
    TaxDeduction,
    TaxReport,
)
from finsight.models.transaction import Transaction, TransactionType


TAX_BRACKETS = {"low": 0.15, "medium": 0.25, "high": 0.35}

# Which FlowBreakdown field each cash flow type accumulates into
_BREAKDOWN_FIELD = {
    TransactionType.INCOME: "income",
    TransactionType.EXPENSE: "expenses",
    TransactionType.SALE: "sales",
    TransactionType.PURCHASE: "purchases",
}


def add_to_breakdown(breakdown: FlowBreakdown, transaction: Transaction) -> None:
    """Count a transaction and add its amount to the matching type total."""
    breakdown.count += 1
    field = _BREAKDOWN_FIELD.get(transaction.type)
    if field:
        setattr(breakdown, field, getattr(breakdown, field) + transaction.amount)


def _total(transactions: Sequence[Transaction], type_: TransactionType) -> float:
    return sum(t.amount for t in transactions if t.type == type_)


def _sum_by(
    transactions: Sequence[Transaction],
    key: Callable[[Transaction], str],
) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    for t in transactions:
        totals[key(t)] += t.amount
    return dict(totals)


def _percent_change(current: float, previous: float) -> float:
    return (current - previous) / previous * 100 if previous > 0 else 0.0


def _margin(profit: float, revenue: float) -> float:
    return profit / revenue * 100 if revenue > 0 else 0.0


def monthly_report(transactions: Sequence[Transaction]) -> MonthlyReport:
    """Per-month totals with revenue growth over the previous recorded month."""
    buckets: dict[str, MonthlyTotals] = {}
    for t in sorted(transactions, key=lambda t: t.date):
        month = t.month_key
        if month not in buckets:
            buckets[month] = MonthlyTotals(month=month)
        add_to_breakdown(buckets[month], t)

    months = [buckets[key] for key in sorted(buckets)]
    for previous, current in zip(months, months[1:]):
        current.growth = _percent_change(current.total_revenue, previous.total_revenue)

    return MonthlyReport(months=months, transaction_count=len(transactions))


def build_summary(transactions: Sequence[Transaction]) -> FinancialSummary:
    """
    Headline totals.

    Net profit is revenue (income + sales) minus costs (expenses +
    purchases); balance-sheet types do not enter it. Monthly growth is
    the latest month's revenue growth, 0 when it cannot be computed.
    """
    income = _total(transactions, TransactionType.INCOME)
    expenses = _total(transactions, TransactionType.EXPENSE)
    sales = _total(transactions, TransactionType.SALE)
    purchases = _total(transactions, TransactionType.PURCHASE)

    revenue = income + sales
    net_profit = revenue - (expenses + purchases)

    months = monthly_report(transactions).months

    return FinancialSummary(
        total_income=income,
        total_expenses=expenses,
        total_sales=sales,
        total_purchases=purchases,
        net_profit=net_profit,
        cash_flow=net_profit,
        profit_margin=_margin(net_profit, revenue),
        monthly_growth=months[-1].growth if months else 0.0,
    )


def profit_loss_report(transactions: Sequence[Transaction]) -> ProfitLossReport:
    by_type = {
        type_: [t for t in transactions if t.type == type_]
        for type_ in _BREAKDOWN_FIELD
    }
    income = sum(t.amount for t in by_type[TransactionType.INCOME])
    expenses = sum(t.amount for t in by_type[TransactionType.EXPENSE])
    sales = sum(t.amount for t in by_type[TransactionType.SALE])
    purchases = sum(t.amount for t in by_type[TransactionType.PURCHASE])

    revenue = income + sales
    costs = expenses + purchases
    gross_profit = revenue - costs

    def by_category(type_: TransactionType) -> dict[str, float]:
        return _sum_by(by_type[type_], lambda t: t.category)

    return ProfitLossReport(
        total_income=income,
        total_expenses=expenses,
        total_sales=sales,
        total_purchases=purchases,
        total_revenue=revenue,
        total_costs=costs,
        gross_profit=gross_profit,
        profit_margin=_margin(gross_profit, revenue),
        income_by_category=by_category(TransactionType.INCOME),
        sales_by_category=by_category(TransactionType.SALE),
        expenses_by_category=by_category(TransactionType.EXPENSE),
        purchases_by_category=by_category(TransactionType.PURCHASE),
        transaction_count=sum(len(v) for v in by_type.values()),
    )


def cash_flow_report(transactions: Sequence[Transaction]) -> CashFlowReport:
    inflows = [t for t in transactions if t.type.is_inflow]
    outflows = [t for t in transactions if t.type.is_outflow]

    def label(t: Transaction) -> str:
        return f"{t.category} ({t.type.value})"

    monthly: dict[str, MonthlyCashFlow] = {}
    for t in sorted(transactions, key=lambda t: t.date):
        bucket = monthly.setdefault(t.month_key, MonthlyCashFlow())
        if t.type.is_inflow:
            bucket.inflows += t.amount
        elif t.type.is_outflow:
            bucket.outflows += t.amount

    total_inflows = sum(t.amount for t in inflows)
    total_outflows = sum(t.amount for t in outflows)

    return CashFlowReport(
        total_inflows=total_inflows,
        total_outflows=total_outflows,
        net_cash_flow=total_inflows - total_outflows,
        inflows_by_category=_sum_by(inflows, label),
        outflows_by_category=_sum_by(outflows, label),
        monthly={key: monthly[key] for key in sorted(monthly)},
    )


def tax_report(transactions: Sequence[Transaction]) -> TaxReport:
    """Tax-deductible transactions and the savings they imply per bracket."""
    deductible = [t for t in transactions if t.tax_deductible]
    total = sum(t.amount for t in deductible)

    by_category: dict[str, TaxDeduction] = {}
    for t in deductible:
        entry = by_category.setdefault(t.category, TaxDeduction(category=t.category))
        entry.amount += t.amount
        entry.count += 1
        entry.transaction_ids.append(t.id)

    monthly = _sum_by(deductible, lambda t: t.month_key)

    return TaxReport(
        total_deductions=total,
        deduction_count=len(deductible),
        deductions_by_category=by_category,
        estimated_savings={name: total * rate for name, rate in TAX_BRACKETS.items()},
        monthly_deductions={key: monthly[key] for key in sorted(monthly)},
    )


def category_report(transactions: Sequence[Transaction]) -> CategoryReport:
    """Per-category totals, most active category first."""
    categories: dict[str, CategoryTotals] = {}
    for t in transactions:
        entry = categories.get(t.category)
        if entry is None:
            entry = categories[t.category] = CategoryTotals(
                category=t.category,
                last_transaction=t.date,
            )
        add_to_breakdown(entry, t)
        if t.date > entry.last_transaction:
            entry.last_transaction = t.date

    ordered = sorted(categories.values(), key=lambda c: c.total_activity, reverse=True)
    return CategoryReport(categories=ordered)
