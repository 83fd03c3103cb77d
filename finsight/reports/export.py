"""
Export Formats

Turns transactions, summaries and reports into downloadable text:
CSV for spreadsheets, a plain-text summary, and a full JSON dump.
"""

import csv
import io
import json
from datetime import datetime
from typing import Optional, Sequence

from pydantic import BaseModel

from finsight.models.reports import FinancialSummary
from finsight.models.transaction import Transaction, UserProfile


CSV_HEADERS = [
    "Date",
    "Type",
    "Category",
    "Subcategory",
    "Description",
    "Amount",
    "Payment Method",
    "Tax Deductible",
]

RECENT_TRANSACTION_COUNT = 10


def format_amount(value: float, symbol: str = "Rs.") -> str:
    return f"{symbol}{value:,.2f}"


def transactions_to_csv(transactions: Sequence[Transaction]) -> str:
    """One row per transaction, in the order given."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for t in transactions:
        writer.writerow([
            t.date.date().isoformat(),
            t.type.value,
            t.category,
            t.subcategory,
            t.description,
            t.amount,
            t.payment_method,
            "Yes" if t.tax_deductible else "No",
        ])
    return buffer.getvalue()


def summary_to_text(
    summary: FinancialSummary,
    transactions: Sequence[Transaction],
    generated_at: Optional[datetime] = None,
    currency_symbol: str = "Rs.",
) -> str:
    """Plain-text financial summary followed by the latest transactions."""
    generated_at = generated_at or datetime.now()
    recent = sorted(transactions, key=lambda t: t.date)[-RECENT_TRANSACTION_COUNT:]

    lines = [
        "FINANCIAL SUMMARY REPORT",
        f"Generated: {generated_at.date().isoformat()}",
        "",
        "SUMMARY:",
        f"Total Income: {format_amount(summary.total_income, currency_symbol)}",
        f"Total Expenses: {format_amount(summary.total_expenses, currency_symbol)}",
        f"Total Sales: {format_amount(summary.total_sales, currency_symbol)}",
        f"Total Purchases: {format_amount(summary.total_purchases, currency_symbol)}",
        f"Net Profit: {format_amount(summary.net_profit, currency_symbol)}",
        f"Profit Margin: {summary.profit_margin:.2f}%",
        "",
        "RECENT TRANSACTIONS:",
    ]
    for t in recent:
        lines.append(
            f"{t.date.date().isoformat()} | {t.type.value.upper()} | {t.category} | "
            f"{format_amount(t.amount, currency_symbol)} | {t.description}"
        )
    return "\n".join(lines) + "\n"


def report_to_text(
    title: str,
    report: BaseModel,
    generated_at: Optional[datetime] = None,
) -> str:
    """Title, date and the report body as indented JSON."""
    generated_at = generated_at or datetime.now()
    body = json.dumps(report.model_dump(mode="json"), indent=2)
    return f"{title}\nGenerated: {generated_at.date().isoformat()}\n\n{body}\n"


def report_filename(title: str) -> str:
    """Download name for a report: lowercase, whitespace runs become dashes."""
    return "-".join(title.lower().split()) + ".txt"


def export_all_json(
    summary: FinancialSummary,
    transactions: Sequence[Transaction],
    user_type: Optional[UserProfile] = None,
    export_date: Optional[datetime] = None,
) -> str:
    """Everything the dashboard knows, as one JSON document."""
    payload = {
        "summary": summary.model_dump(mode="json", by_alias=True),
        "transactions": [t.to_record() for t in transactions],
        "userType": user_type.value if user_type else None,
        "exportDate": (export_date or datetime.now()).isoformat(),
    }
    return json.dumps(payload, indent=2)
