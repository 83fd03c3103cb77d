"""Tests for the statistical primitives."""

import math
from datetime import datetime, timedelta

import pytest

from finsight.analytics.primitives import (
    cash_flow_entropy,
    consistency_score,
    financial_velocity,
    linear_trend,
    recent_trend,
    signed_amount,
    sort_by_date,
    volatility,
)


class TestSignedAmount:
    """Tests for the cash flow sign convention."""

    def test_inflow_positive_outflow_negative(self, make_transaction):
        """Test signs of inflows and outflows."""
        assert signed_amount(make_transaction("income", 50)) == 50
        assert signed_amount(make_transaction("sale", 50)) == 50
        assert signed_amount(make_transaction("expense", 50)) == -50
        assert signed_amount(make_transaction("purchase", 50)) == -50

    def test_balance_sheet_types_are_zero(self, make_transaction):
        """Test that investments, assets and liabilities carry no sign."""
        for type_ in ("investment", "asset", "liability"):
            assert signed_amount(make_transaction(type_, 50)) == 0

    def test_matches_transaction_property(self, make_transaction):
        """Test the helper and the model agree for every type."""
        for type_ in ("income", "sale", "expense", "purchase", "investment", "asset", "liability"):
            t = make_transaction(type_, 75)
            assert signed_amount(t) == t.signed_amount


class TestFinancialVelocity:
    """Tests for financial_velocity."""

    def test_needs_two_transactions(self, make_transaction):
        """Test that fewer than two transactions give 0."""
        assert financial_velocity([]) == 0
        assert financial_velocity([make_transaction()]) == 0

    def test_mean_rate_of_change(self, make_transaction):
        """Test mean |delta amount| per day over adjacent pairs."""
        ts = [
            make_transaction(amount=100, date=datetime(2024, 1, 1)),
            make_transaction(amount=300, date=datetime(2024, 1, 3)),
            make_transaction(amount=0, date=datetime(2024, 1, 4)),
        ]
        # (200 / 2 + 300 / 1) / 2
        assert financial_velocity(ts) == pytest.approx(200)

    def test_order_independent(self, make_transaction):
        """Test that input order does not matter."""
        ts = [
            make_transaction(amount=0, date=datetime(2024, 1, 4)),
            make_transaction(amount=100, date=datetime(2024, 1, 1)),
            make_transaction(amount=300, date=datetime(2024, 1, 3)),
        ]
        assert financial_velocity(ts) == pytest.approx(200)

    def test_same_timestamp_pairs_skipped(self, make_transaction):
        """Test that pairs with zero elapsed time are ignored."""
        same = datetime(2024, 1, 1)
        ts = [make_transaction(amount=100, date=same), make_transaction(amount=900, date=same)]
        assert financial_velocity(ts) == 0

    def test_does_not_mutate_input(self, make_transaction):
        """Test that the input list keeps its order."""
        ts = [
            make_transaction(amount=1, date=datetime(2024, 2, 1)),
            make_transaction(amount=2, date=datetime(2024, 1, 1)),
        ]
        before = list(ts)
        financial_velocity(ts)
        assert ts == before


class TestCashFlowEntropy:
    """Tests for cash_flow_entropy."""

    def test_empty_is_zero(self):
        """Test no transactions give 0."""
        assert cash_flow_entropy([]) == 0

    def test_single_day_is_zero(self, make_transaction):
        """Test that all flow on one day has no entropy."""
        ts = [
            make_transaction("income", 100, date=datetime(2024, 1, 1, 9)),
            make_transaction("expense", 30, date=datetime(2024, 1, 1, 17)),
        ]
        assert cash_flow_entropy(ts) == 0

    def test_zero_net_flow_is_zero(self, make_transaction):
        """Test that days netting to zero give 0."""
        ts = [
            make_transaction("income", 100, date=datetime(2024, 1, 1)),
            make_transaction("expense", 100, date=datetime(2024, 1, 1)),
        ]
        assert cash_flow_entropy(ts) == 0

    def test_two_equal_days_is_one_bit(self, make_transaction):
        """Test two equally sized days give exactly 1 bit."""
        ts = [
            make_transaction("income", 100, date=datetime(2024, 1, 1)),
            make_transaction("expense", 100, date=datetime(2024, 1, 2)),
        ]
        assert cash_flow_entropy(ts) == pytest.approx(1.0)

    def test_alternating_twenty_days(self, make_transaction):
        """Test 20 alternating days stay within (0, log2 20]."""
        start = datetime(2024, 1, 1)
        ts = [
            make_transaction(
                "income" if i % 2 == 0 else "expense",
                100 + 10 * i,
                date=start + timedelta(days=i),
            )
            for i in range(20)
        ]
        entropy = cash_flow_entropy(ts)
        assert 0 < entropy <= math.log2(20)

    def test_balance_sheet_types_ignored(self, make_transaction):
        """Test that asset entries do not create buckets."""
        ts = [
            make_transaction("income", 100, date=datetime(2024, 1, 1)),
            make_transaction("asset", 5000, date=datetime(2024, 1, 2)),
        ]
        assert cash_flow_entropy(ts) == 0


class TestLinearTrend:
    """Tests for linear_trend."""

    def test_short_inputs(self):
        """Test that fewer than two values give 0."""
        assert linear_trend([]) == 0
        assert linear_trend([5]) == 0

    def test_exact_line(self):
        """Test the slope of an exact line."""
        assert linear_trend([1000 + 50 * i for i in range(12)]) == pytest.approx(50)

    def test_constant_is_zero(self):
        """Test a flat series has no slope."""
        assert linear_trend([7, 7, 7, 7]) == 0

    def test_decreasing(self):
        """Test a decreasing series has a negative slope."""
        assert linear_trend([10, 8, 6, 4]) == pytest.approx(-2)

    def test_non_finite_is_zero(self):
        """Test that overflowing sums give 0 rather than NaN."""
        assert linear_trend([1e308, 1e308, -1e308]) == 0


class TestRecentTrend:
    """Tests for recent_trend."""

    def test_uses_date_order(self, make_transaction):
        """Test that flows are ordered by date before fitting."""
        ts = [
            make_transaction("income", 300, date=datetime(2024, 1, 3)),
            make_transaction("income", 100, date=datetime(2024, 1, 1)),
            make_transaction("income", 200, date=datetime(2024, 1, 2)),
        ]
        assert recent_trend(ts) == pytest.approx(100)

    def test_outflows_pull_down(self, make_transaction):
        """Test that a shift from inflow to outflow gives a negative slope."""
        ts = [
            make_transaction("income", 100, date=datetime(2024, 1, 1)),
            make_transaction("expense", 100, date=datetime(2024, 1, 2)),
        ]
        assert recent_trend(ts) == pytest.approx(-200)


class TestVolatilityAndConsistency:
    """Tests for volatility and consistency_score."""

    def test_volatility_population(self):
        """Test population standard deviation."""
        assert volatility([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_volatility_short(self):
        """Test fewer than two values give 0."""
        assert volatility([]) == 0
        assert volatility([3]) == 0

    def test_consistency_of_constant_series(self):
        """Test identical values are perfectly consistent."""
        assert consistency_score([100, 100, 100]) == 1

    def test_consistency_bounds(self):
        """Test consistency is floored at zero."""
        assert consistency_score([0, 0, 1000]) == 0

    def test_consistency_non_positive_mean(self):
        """Test a non-positive mean counts as CoV 1."""
        assert consistency_score([0, 0]) == 0

    def test_consistency_short(self):
        """Test fewer than two values give 0."""
        assert consistency_score([100]) == 0


class TestSortByDate:
    """Tests for sort_by_date."""

    def test_returns_new_list(self, make_transaction):
        """Test that sorting returns a copy."""
        ts = [
            make_transaction(date=datetime(2024, 2, 1)),
            make_transaction(date=datetime(2024, 1, 1)),
        ]
        ordered = sort_by_date(ts)
        assert ordered is not ts
        assert ordered[0].date < ordered[1].date
        assert ts[0].date == datetime(2024, 2, 1)
