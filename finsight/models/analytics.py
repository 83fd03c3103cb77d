"""
Analytics Output Models

Derived records produced by the analytics package. None of these are
persisted: they are rebuilt from the full transaction list every time
the list changes.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Trend(str, Enum):
    """Direction of a category's amounts over time."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class InsightType(str, Enum):
    WARNING = "warning"
    OPPORTUNITY = "opportunity"
    PREDICTION = "prediction"
    OPTIMIZATION = "optimization"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        """Ranking weight: high=3, medium=2, low=1."""
        return {Impact.HIGH: 3, Impact.MEDIUM: 2, Impact.LOW: 1}[self]


class FinancialPattern(BaseModel):
    """Recurring behaviour of one category (three or more transactions)."""
    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., description="Category name")
    frequency: float = Field(
        ...,
        ge=0,
        description="Mean interval between transactions, in days"
    )
    average_amount: float
    trend: Trend
    predicted_next: float = Field(
        ...,
        ge=0,
        description="One-step linear extrapolation of the amount"
    )
    transaction_count: int = Field(..., ge=0)


class AIInsight(BaseModel):
    """
    A ranked, human-readable observation about the transaction list.

    Insights are rule-based. Fixed ids (e.g. "velocity-high") are reused
    across runs so a UI can track dismissals.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    type: InsightType
    title: str
    description: str
    impact: Impact
    confidence: float = Field(..., ge=0, le=100)
    actionable: bool = True
    category: str
    value: Optional[float] = None

    @property
    def score(self) -> float:
        """Ranking score used to order insights."""
        return self.impact.weight * self.confidence


class CashFlowPrediction(BaseModel):
    """Projected inflow and outflow for one future week."""
    model_config = ConfigDict(frozen=True)

    date: datetime
    predicted_inflow: float
    predicted_outflow: float
    confidence: float = Field(..., ge=20, le=95)
    factors: list[str] = Field(default_factory=list)

    @property
    def net(self) -> float:
        return self.predicted_inflow - self.predicted_outflow
