"""
Tests for FinSight models

Test strategy:
1. Unit tests for individual models (schemas, constraints, helpers)
2. Boundary values for every numeric constraint
3. Serialization layout matches the backup format
"""

import math
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from finsight.models import (
    AIInsight,
    CASH_FLOW_TYPES,
    CashFlowPrediction,
    CategoryGroup,
    CustomReport,
    FinancialPattern,
    FinancialSummary,
    GroupBy,
    Impact,
    InsightType,
    PROFILE_CONFIG,
    ReportCriteria,
    Transaction,
    TransactionType,
    Trend,
    TypeGroup,
    UserProfile,
    ValidationIssue,
    ValidationResult,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction creation with only the required fields."""
        t = Transaction(
            type="income",
            amount=500,
            category="Salary",
            date=datetime(2024, 3, 1, 9, 30),
        )
        assert t.type == TransactionType.INCOME
        assert t.amount == 500.0
        assert t.currency == "INR"
        assert t.tax_deductible is False
        assert t.attachments == []
        assert t.id

    def test_transaction_ids_are_unique_by_default(self):
        """Test that default ids differ between transactions."""
        a = Transaction(type="income", amount=1, category="A", date=datetime(2024, 1, 1))
        b = Transaction(type="income", amount=1, category="A", date=datetime(2024, 1, 1))
        assert a.id != b.id

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from the category."""
        t = Transaction(type="expense", amount=1, category="  Rent  ", date=datetime(2024, 1, 1))
        assert t.category == "Rent"

    @pytest.mark.parametrize("amount", [-1, math.nan, math.inf, -math.inf])
    def test_transaction_rejects_bad_amounts(self, amount):
        """Test that negative and non-finite amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(type="income", amount=amount, category="A", date=datetime(2024, 1, 1))

    def test_transaction_accepts_zero_amount(self):
        """Test that zero is a valid amount."""
        t = Transaction(type="expense", amount=0, category="A", date=datetime(2024, 1, 1))
        assert t.amount == 0

    def test_transaction_rejects_unknown_type(self):
        """Test that unknown transaction types are rejected."""
        with pytest.raises(ValidationError):
            Transaction(type="gift", amount=1, category="A", date=datetime(2024, 1, 1))

    def test_transaction_requires_category(self):
        """Test that an empty category is rejected."""
        with pytest.raises(ValidationError):
            Transaction(type="income", amount=1, category="", date=datetime(2024, 1, 1))

    def test_transaction_is_frozen(self):
        """Test that a transaction cannot be mutated in place."""
        t = Transaction(type="income", amount=1, category="A", date=datetime(2024, 1, 1))
        with pytest.raises(ValidationError):
            t.amount = 2

    def test_transaction_accepts_plain_dates(self):
        """Test that date objects and date strings become midnight."""
        from_date = Transaction(type="income", amount=1, category="A", date=date(2024, 3, 5))
        from_text = Transaction(type="income", amount=1, category="A", date="2024-03-05")
        assert from_date.date == datetime(2024, 3, 5)
        assert from_text.date == datetime(2024, 3, 5)

    def test_transaction_normalizes_aware_dates(self):
        """Test that aware datetimes are converted to naive UTC."""
        ist = timezone(timedelta(hours=5, minutes=30))
        t = Transaction(
            type="income",
            amount=1,
            category="A",
            date=datetime(2024, 3, 5, 5, 30, tzinfo=ist),
        )
        assert t.date == datetime(2024, 3, 5, 0, 0)
        assert t.date.tzinfo is None

    def test_transaction_parses_iso_strings_with_z(self):
        """Test that browser-style ISO strings are accepted."""
        t = Transaction(type="income", amount=1, category="A", date="2024-03-05T10:15:00.000Z")
        assert t.date == datetime(2024, 3, 5, 10, 15)

    def test_signed_amount(self):
        """Test sign convention per transaction type."""
        def signed(type_):
            return Transaction(type=type_, amount=10, category="A", date=datetime(2024, 1, 1)).signed_amount

        assert signed("income") == 10
        assert signed("sale") == 10
        assert signed("expense") == -10
        assert signed("purchase") == -10
        assert signed("investment") == 0
        assert signed("asset") == 0
        assert signed("liability") == 0

    def test_month_key(self):
        """Test the YYYY-MM month key."""
        t = Transaction(type="income", amount=1, category="A", date=datetime(2024, 3, 9))
        assert t.month_key == "2024-03"

    def test_to_record_uses_camel_case(self):
        """Test that serialization uses the backup field names."""
        t = Transaction(
            id="abc",
            type="expense",
            amount=12.5,
            category="Software",
            date=datetime(2024, 3, 5, 10, 0),
            payment_method="card",
            tax_deductible=True,
        )
        record = t.to_record()
        assert record["paymentMethod"] == "card"
        assert record["taxDeductible"] is True
        assert record["type"] == "expense"
        assert record["date"] == "2024-03-05T10:00:00"
        assert "payment_method" not in record

    def test_record_round_trip(self):
        """Test that a record parses back to an equal transaction."""
        t = Transaction(
            type="sale",
            amount=99.99,
            category="Services",
            date=datetime(2024, 3, 5, 10, 0, 0, 123000),
            client="Acme",
        )
        assert Transaction.model_validate(t.to_record()) == t


class TestTransactionType:
    """Tests for TransactionType helpers."""

    def test_cash_flow_types(self):
        """Test that exactly the four flow types count as cash flow."""
        assert set(CASH_FLOW_TYPES) == {t for t in TransactionType if t.is_cash_flow}
        assert len(CASH_FLOW_TYPES) == 4

    def test_inflow_and_outflow_are_disjoint(self):
        """Test that no type is both an inflow and an outflow."""
        for type_ in TransactionType:
            assert not (type_.is_inflow and type_.is_outflow)


class TestProfiles:
    """Tests for user profile configuration."""

    def test_every_profile_is_configured(self):
        """Test that each profile has a configuration entry."""
        assert set(PROFILE_CONFIG) == set(UserProfile)

    def test_profiles_suggest_cash_flow_categories(self):
        """Test that each profile suggests categories for every flow type."""
        for config in PROFILE_CONFIG.values():
            for type_ in CASH_FLOW_TYPES:
                assert config.categories[type_]

    def test_business_owner_value(self):
        """Test the stored value of the business owner profile."""
        assert UserProfile("business-owner") == UserProfile.BUSINESS_OWNER


class TestAnalyticsModels:
    """Tests for analytics output models."""

    def test_insight_score(self):
        """Test that score is impact weight times confidence."""
        insight = AIInsight(
            id="x",
            type=InsightType.WARNING,
            title="t",
            description="d",
            impact=Impact.MEDIUM,
            confidence=80,
            category="c",
        )
        assert insight.score == 160
        assert insight.actionable is True

    def test_impact_weights(self):
        """Test impact weights."""
        assert Impact.HIGH.weight == 3
        assert Impact.MEDIUM.weight == 2
        assert Impact.LOW.weight == 1

    def test_insight_confidence_bounds(self):
        """Test that confidence must be within 0-100."""
        with pytest.raises(ValidationError):
            AIInsight(
                id="x",
                type=InsightType.WARNING,
                title="t",
                description="d",
                impact=Impact.LOW,
                confidence=101,
                category="c",
            )

    def test_prediction_confidence_bounds(self):
        """Test that prediction confidence is limited to 20-95."""
        with pytest.raises(ValidationError):
            CashFlowPrediction(
                date=datetime(2024, 1, 1),
                predicted_inflow=1,
                predicted_outflow=1,
                confidence=10,
            )

    def test_prediction_net(self):
        """Test net flow of a prediction."""
        prediction = CashFlowPrediction(
            date=datetime(2024, 1, 1),
            predicted_inflow=300,
            predicted_outflow=100,
            confidence=50,
        )
        assert prediction.net == 200

    def test_pattern_rejects_negative_prediction(self):
        """Test that predicted_next cannot be negative."""
        with pytest.raises(ValidationError):
            FinancialPattern(
                pattern="Rent",
                frequency=30,
                average_amount=100,
                trend=Trend.DECREASING,
                predicted_next=-1,
                transaction_count=3,
            )


class TestReportModels:
    """Tests for report models."""

    def test_summary_defaults(self):
        """Test that an empty summary is all zeros."""
        summary = FinancialSummary()
        assert summary.total_revenue == 0
        assert summary.total_costs == 0
        assert summary.profit_margin == 0

    def test_criteria_rejects_inverted_range(self):
        """Test that the end date cannot precede the start date."""
        with pytest.raises(ValidationError, match="end date cannot be before start date"):
            ReportCriteria(date_from=datetime(2024, 2, 1), date_to=datetime(2024, 1, 1))

    def test_criteria_defaults(self):
        """Test default criteria select everything grouped by category."""
        criteria = ReportCriteria()
        assert criteria.types == []
        assert criteria.group_by == GroupBy.CATEGORY

    def test_report_groups_are_tagged(self):
        """Test that serialized groups parse back to the right variant."""
        report = CustomReport(
            criteria=ReportCriteria(),
            generated_at=datetime(2024, 1, 1),
            total_income=0,
            total_expenses=0,
            total_sales=0,
            total_purchases=0,
            total_revenue=0,
            total_costs=0,
            net_amount=0,
            transaction_count=0,
            groups=[
                CategoryGroup(key="Rent", expenses=100, count=1),
                TypeGroup(key=TransactionType.EXPENSE, amount=100, count=1),
            ],
        )
        parsed = CustomReport.model_validate(report.model_dump(mode="json"))
        assert isinstance(parsed.groups[0], CategoryGroup)
        assert isinstance(parsed.groups[1], TypeGroup)
        assert parsed.groups[1].key == TransactionType.EXPENSE


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            schema_valid=True,
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be non-negative",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test result with only warnings."""
        result = ValidationResult(
            schema_valid=True,
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date is in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert len(result.warnings) == 1

    def test_validation_issue_rejects_unknown_severity(self):
        """Test that severity is limited to error, warning and info."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")
