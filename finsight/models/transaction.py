"""
Core Data Models for FinSight

These models define the strict schemas for the transaction list and the
user profile selector. They are designed to:
1. Reject malformed numbers (NaN, Infinity, negatives) at the boundary
2. Serialize to the same camelCase layout the dashboard backups use
3. Keep dates comparable and round-trippable through text

DESIGN DECISION: Transactions are frozen. An edit replaces the record
wholesale, it never mutates one in place.
"""

from datetime import date as date_type
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Supported transaction types.

    Inflows (income, sale) and outflows (expense, purchase) drive every
    cash flow computation. Balance-sheet types are recorded but carry no
    cash flow sign.
    """
    INCOME = "income"
    EXPENSE = "expense"
    SALE = "sale"
    PURCHASE = "purchase"
    INVESTMENT = "investment"
    ASSET = "asset"
    LIABILITY = "liability"

    @property
    def is_inflow(self) -> bool:
        return self in (TransactionType.INCOME, TransactionType.SALE)

    @property
    def is_outflow(self) -> bool:
        return self in (TransactionType.EXPENSE, TransactionType.PURCHASE)

    @property
    def is_cash_flow(self) -> bool:
        return self.is_inflow or self.is_outflow

    @property
    def sign(self) -> int:
        """+1 for inflows, -1 for outflows, 0 for balance-sheet types."""
        if self.is_inflow:
            return 1
        if self.is_outflow:
            return -1
        return 0


CASH_FLOW_TYPES = (
    TransactionType.INCOME,
    TransactionType.EXPENSE,
    TransactionType.SALE,
    TransactionType.PURCHASE,
)


class UserProfile(str, Enum):
    """The kind of user the dashboard is tailored to."""
    FREELANCER = "freelancer"
    ENTREPRENEUR = "entrepreneur"
    SALARIED = "salaried"
    BUSINESS_OWNER = "business-owner"


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# =============================================================================
# TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded transaction.

    The id is assigned by the store when the transaction is added and is
    never reused. Amounts are magnitudes: the sign comes from the type.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Unique transaction ID"
    )
    type: TransactionType = Field(
        ...,
        description="Transaction type"
    )
    amount: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Non-negative amount in currency units"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Grouping label used by pattern detection"
    )
    subcategory: str = Field(default="", max_length=200)
    description: str = Field(default="", max_length=1000)
    date: datetime = Field(
        ...,
        description="When the transaction happened (naive, UTC if converted)"
    )
    payment_method: str = Field(default="", max_length=100)
    currency: str = Field(default="INR", max_length=10)
    tax_deductible: bool = False

    # Freelancer metadata
    client: Optional[str] = None
    project: Optional[str] = None
    attachments: list[str] = Field(default_factory=list)

    @field_validator('date', mode='before')
    @classmethod
    def accept_plain_dates(cls, v: Any) -> Any:
        """Accept calendar dates ("2024-03-01" or date objects) as midnight."""
        if isinstance(v, date_type) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day)
        if isinstance(v, str) and len(v.strip()) == 10:
            return datetime.combine(date_type.fromisoformat(v.strip()), datetime.min.time())
        return v

    @field_validator('date')
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        """Convert aware datetimes to naive UTC so all dates compare."""
        return to_naive_utc(v)

    @property
    def signed_amount(self) -> float:
        """Amount with the cash flow sign applied (0 for balance-sheet types)."""
        return self.amount * self.type.sign

    @property
    def month_key(self) -> str:
        """Calendar month as YYYY-MM."""
        return f"{self.date.year}-{self.date.month:02d}"

    def to_record(self) -> dict:
        """Serialize to the camelCase JSON layout used for storage and backups."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# PROFILE CONFIGURATION
# =============================================================================

class ProfileConfig(BaseModel):
    """Display configuration for a user profile."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    categories: dict[TransactionType, list[str]]
    metrics: list[str]


PROFILE_CONFIG: dict[UserProfile, ProfileConfig] = {
    UserProfile.FREELANCER: ProfileConfig(
        title="Freelancer",
        description="Project-based income tracking and client management",
        categories={
            TransactionType.INCOME: ["Client Payments", "Royalties", "Licensing", "Consulting"],
            TransactionType.EXPENSE: ["Equipment", "Software", "Marketing", "Professional Development", "Home Office"],
            TransactionType.SALE: ["Services", "Digital Products", "Courses", "Consultations"],
            TransactionType.PURCHASE: ["Tools", "Software Licenses", "Equipment", "Materials"],
        },
        metrics=["Project Profitability", "Client Payment Cycles", "Hourly Rates", "Utilization Rate"],
    ),
    UserProfile.ENTREPRENEUR: ProfileConfig(
        title="Entrepreneur",
        description="Business growth metrics and investment tracking",
        categories={
            TransactionType.INCOME: ["Revenue", "Investment Returns", "Partnerships", "Licensing"],
            TransactionType.EXPENSE: ["Operations", "Marketing", "R&D", "Legal", "Staff"],
            TransactionType.SALE: ["Products", "Services", "Subscriptions", "Partnerships"],
            TransactionType.PURCHASE: ["Inventory", "Equipment", "Technology", "Raw Materials"],
        },
        metrics=["ROI", "Customer Acquisition Cost", "Lifetime Value", "Burn Rate"],
    ),
    UserProfile.SALARIED: ProfileConfig(
        title="Salaried Professional",
        description="Personal budget optimization and side income tracking",
        categories={
            TransactionType.INCOME: ["Salary", "Bonuses", "Side Hustle", "Investments", "Dividends"],
            TransactionType.EXPENSE: ["Living", "Transportation", "Healthcare", "Education", "Entertainment"],
            TransactionType.SALE: ["Side Business", "Freelance Work", "Resale Items"],
            TransactionType.PURCHASE: ["Personal", "Investment", "Education", "Health"],
        },
        metrics=["Savings Rate", "Debt-to-Income", "Emergency Fund", "Investment Growth"],
    ),
    UserProfile.BUSINESS_OWNER: ProfileConfig(
        title="Small Business Owner",
        description="Comprehensive financial health and operations tracking",
        categories={
            TransactionType.INCOME: ["Sales Revenue", "Service Income", "Interest", "Other Income"],
            TransactionType.EXPENSE: ["COGS", "Operating Expenses", "Payroll", "Taxes", "Interest"],
            TransactionType.SALE: ["Products", "Services", "Wholesale", "Online Sales"],
            TransactionType.PURCHASE: ["Inventory", "Supplies", "Equipment", "Services"],
        },
        metrics=["Gross Margin", "Operating Margin", "Working Capital", "Inventory Turnover"],
    ),
}
