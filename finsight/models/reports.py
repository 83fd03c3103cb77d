"""
Report Models

Typed aggregates for the summary and report builders.

DESIGN DECISION: Custom report groups are a discriminated union keyed
by `kind`. Each grouping dimension carries its own aggregate record,
so consumers never have to guess the shape of a group from the
parameter that produced it.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from finsight.models.transaction import TransactionType, to_naive_utc


# =============================================================================
# SUMMARY
# =============================================================================

class FinancialSummary(BaseModel):
    """Headline totals for the dashboard."""

    total_income: float = 0.0
    total_expenses: float = 0.0
    total_sales: float = 0.0
    total_purchases: float = 0.0
    net_profit: float = 0.0
    cash_flow: float = 0.0
    profit_margin: float = Field(
        default=0.0,
        description="Net profit as a percentage of revenue (0 without revenue)"
    )
    monthly_growth: float = Field(
        default=0.0,
        description="Revenue growth of the latest month over the previous one, in percent"
    )

    @property
    def total_revenue(self) -> float:
        return self.total_income + self.total_sales

    @property
    def total_costs(self) -> float:
        return self.total_expenses + self.total_purchases


# =============================================================================
# STANDARD REPORTS
# =============================================================================

class FlowBreakdown(BaseModel):
    """Per-type totals for one bucket of transactions."""

    income: float = 0.0
    expenses: float = 0.0
    sales: float = 0.0
    purchases: float = 0.0
    count: int = 0

    @property
    def inflow(self) -> float:
        return self.income + self.sales

    @property
    def outflow(self) -> float:
        return self.expenses + self.purchases

    @property
    def net(self) -> float:
        return self.inflow - self.outflow

    @property
    def total_activity(self) -> float:
        return self.inflow + self.outflow

    @property
    def average_amount(self) -> float:
        return self.total_activity / self.count if self.count else 0.0


class ProfitLossReport(BaseModel):
    total_income: float
    total_expenses: float
    total_sales: float
    total_purchases: float
    total_revenue: float
    total_costs: float
    gross_profit: float
    profit_margin: float
    income_by_category: dict[str, float] = Field(default_factory=dict)
    sales_by_category: dict[str, float] = Field(default_factory=dict)
    expenses_by_category: dict[str, float] = Field(default_factory=dict)
    purchases_by_category: dict[str, float] = Field(default_factory=dict)
    transaction_count: int = 0


class MonthlyCashFlow(BaseModel):
    inflows: float = 0.0
    outflows: float = 0.0

    @property
    def net(self) -> float:
        return self.inflows - self.outflows


class CashFlowReport(BaseModel):
    total_inflows: float
    total_outflows: float
    net_cash_flow: float
    inflows_by_category: dict[str, float] = Field(
        default_factory=dict,
        description='Keyed by "<category> (<type>)"'
    )
    outflows_by_category: dict[str, float] = Field(default_factory=dict)
    monthly: dict[str, MonthlyCashFlow] = Field(
        default_factory=dict,
        description="Keyed by YYYY-MM, in chronological order"
    )


class TaxDeduction(BaseModel):
    category: str
    amount: float = 0.0
    count: int = 0
    transaction_ids: list[str] = Field(default_factory=list)


class TaxReport(BaseModel):
    total_deductions: float
    deduction_count: int
    deductions_by_category: dict[str, TaxDeduction] = Field(default_factory=dict)
    estimated_savings: dict[str, float] = Field(
        default_factory=dict,
        description="Savings at the low (15%), medium (25%) and high (35%) brackets"
    )
    monthly_deductions: dict[str, float] = Field(default_factory=dict)


class MonthlyTotals(FlowBreakdown):
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    growth: float = Field(
        default=0.0,
        description="Revenue growth over the previous recorded month, in percent"
    )

    @property
    def total_revenue(self) -> float:
        return self.inflow


class MonthlyReport(BaseModel):
    months: list[MonthlyTotals] = Field(
        default_factory=list,
        description="Chronological order"
    )
    transaction_count: int = 0


class CategoryTotals(FlowBreakdown):
    category: str
    last_transaction: datetime


class CategoryReport(BaseModel):
    categories: list[CategoryTotals] = Field(
        default_factory=list,
        description="Sorted by total activity, highest first"
    )


# =============================================================================
# CUSTOM REPORTS
# =============================================================================

class GroupBy(str, Enum):
    CATEGORY = "category"
    TYPE = "type"
    MONTH = "month"
    PAYMENT_METHOD = "paymentMethod"


class ReportCriteria(BaseModel):
    """Filters and grouping chosen in the custom report builder."""

    types: list[TransactionType] = Field(
        default_factory=list,
        description="Empty means all types"
    )
    categories: list[str] = Field(
        default_factory=list,
        description="Empty means all categories"
    )
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    group_by: GroupBy = GroupBy.CATEGORY

    @field_validator('date_from', 'date_to')
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v else v

    @model_validator(mode='after')
    def validate_range(self) -> 'ReportCriteria':
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("Report end date cannot be before start date")
        return self


class CategoryGroup(FlowBreakdown):
    kind: Literal["category"] = "category"
    key: str


class MonthGroup(FlowBreakdown):
    kind: Literal["month"] = "month"
    key: str


class TypeGroup(BaseModel):
    kind: Literal["type"] = "type"
    key: TransactionType
    amount: float = 0.0
    count: int = 0


class PaymentMethodGroup(BaseModel):
    kind: Literal["paymentMethod"] = "paymentMethod"
    key: str
    amount: float = 0.0
    count: int = 0


ReportGroup = Annotated[
    Union[CategoryGroup, MonthGroup, TypeGroup, PaymentMethodGroup],
    Field(discriminator="kind"),
]


class CustomReport(BaseModel):
    criteria: ReportCriteria
    generated_at: datetime
    total_income: float
    total_expenses: float
    total_sales: float
    total_purchases: float
    total_revenue: float
    total_costs: float
    net_amount: float
    transaction_count: int
    groups: list[ReportGroup] = Field(default_factory=list)
    profit_margin: float = 0.0
    average_transaction: float = 0.0
    data_coverage: float = Field(
        default=0.0,
        description="Share of all transactions that matched the filters, in percent"
    )
