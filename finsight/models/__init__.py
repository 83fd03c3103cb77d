"""
Data Models Package

This package contains all Pydantic models used in FinSight.
All data flowing through the system must conform to these schemas.
"""

from finsight.models.transaction import (
    CASH_FLOW_TYPES,
    PROFILE_CONFIG,
    ProfileConfig,
    Transaction,
    TransactionType,
    UserProfile,
)
from finsight.models.analytics import (
    AIInsight,
    CashFlowPrediction,
    FinancialPattern,
    Impact,
    InsightType,
    Trend,
)
from finsight.models.reports import (
    CashFlowReport,
    CategoryGroup,
    CategoryReport,
    CategoryTotals,
    CustomReport,
    FinancialSummary,
    FlowBreakdown,
    GroupBy,
    MonthGroup,
    MonthlyCashFlow,
    MonthlyReport,
    MonthlyTotals,
    PaymentMethodGroup,
    ProfitLossReport,
    ReportCriteria,
    ReportGroup,
    TaxDeduction,
    TaxReport,
    TypeGroup,
)
from finsight.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Transaction models
    "CASH_FLOW_TYPES",
    "PROFILE_CONFIG",
    "ProfileConfig",
    "Transaction",
    "TransactionType",
    "UserProfile",
    # Analytics models
    "AIInsight",
    "CashFlowPrediction",
    "FinancialPattern",
    "Impact",
    "InsightType",
    "Trend",
    # Report models
    "CashFlowReport",
    "CategoryGroup",
    "CategoryReport",
    "CategoryTotals",
    "CustomReport",
    "FinancialSummary",
    "FlowBreakdown",
    "GroupBy",
    "MonthGroup",
    "MonthlyCashFlow",
    "MonthlyReport",
    "MonthlyTotals",
    "PaymentMethodGroup",
    "ProfitLossReport",
    "ReportCriteria",
    "ReportGroup",
    "TaxDeduction",
    "TaxReport",
    "TypeGroup",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
