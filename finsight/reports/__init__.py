"""Summary, report and export package."""

from finsight.reports.builders import (
    build_summary,
    cash_flow_report,
    category_report,
    monthly_report,
    profit_loss_report,
    tax_report,
)
from finsight.reports.custom import (
    custom_report,
    filter_transactions,
    group_transactions,
)
from finsight.reports.export import (
    export_all_json,
    format_amount,
    report_filename,
    report_to_text,
    summary_to_text,
    transactions_to_csv,
)

__all__ = [
    "build_summary",
    "cash_flow_report",
    "category_report",
    "custom_report",
    "export_all_json",
    "filter_transactions",
    "format_amount",
    "group_transactions",
    "monthly_report",
    "profit_loss_report",
    "report_filename",
    "report_to_text",
    "summary_to_text",
    "tax_report",
    "transactions_to_csv",
]
