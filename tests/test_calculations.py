"""
Tests for derived calculations.
"""

import pytest

from finance_tracker.calculations import (
    allocation_is_balanced,
    cashflow_ratio,
    jar_allocations,
    remaining,
    safe_remaining,
    summarize,
    total_assets,
    total_bank,
    total_expense,
    total_income,
    total_percent,
)
from finance_tracker.models import AllocationSettings, FinanceState, Jar, LineItem


def make_state(**kwargs) -> FinanceState:
    for key in ("bank_accounts", "fixed_expenses"):
        if key in kwargs:
            kwargs[key] = [
                LineItem(id=i, name=f"item {i}", amount=amount)
                for i, amount in enumerate(kwargs[key], start=1)
            ]
    return FinanceState(**kwargs)


class TestTotals:
    """Tests for totals."""

    def test_total_assets(self):
        state = make_state(cash=500000, bank_accounts=[1000000, 250000])
        assert total_bank(state) == 1250000
        assert total_assets(state) == 1750000

    def test_total_income(self):
        assert total_income(make_state(salary=10000000, other_income=2000000)) == 12000000

    def test_empty_lists_sum_to_zero(self):
        state = FinanceState()
        assert total_bank(state) == 0
        assert total_expense(state) == 0
        assert total_assets(state) == 0

    def test_malformed_amounts_count_as_zero(self):
        """Test that unvalidated junk contributes 0 rather than raising."""
        state = FinanceState.model_construct(
            cash="oops",
            bank_accounts=[
                LineItem.model_construct(id=1, name="a", amount="abc"),
                LineItem.model_construct(id=2, name="b", amount=None),
                LineItem.model_construct(id=3, name="c", amount=300),
            ],
            salary=None,
            other_income="100",
            fixed_expenses=[LineItem.model_construct(id=4, name="d", amount=float("nan"))],
            allocation_settings=AllocationSettings(),
        )
        assert total_assets(state) == 300
        assert total_income(state) == 100
        assert total_expense(state) == 0


class TestRemainder:
    """Tests for remaining / safe_remaining."""

    def test_negative_remainder_clamps_jars(self):
        state = make_state(salary=10000000, other_income=0, fixed_expenses=[12000000])
        assert remaining(state) == -2000000
        assert safe_remaining(state) == 0
        assert all(jar.amount == 0 for jar in jar_allocations(state))

    def test_zero_income(self):
        state = FinanceState()
        assert remaining(state) == 0
        assert all(jar.amount == 0 for jar in jar_allocations(state))
        assert total_percent(state.allocation_settings) == 100


class TestJars:
    """Tests for jar allocation."""

    def test_default_split_partitions_remainder(self):
        state = make_state(salary=1000000)
        amounts = {jar.jar: jar.amount for jar in jar_allocations(state)}
        assert amounts == {
            Jar.LIVING: 400000,
            Jar.INVEST: 300000,
            Jar.SAVINGS: 200000,
            Jar.PLAY: 100000,
        }
        assert sum(amounts.values()) == safe_remaining(state)

    def test_unbalanced_percentages_are_used_literally(self):
        """Test that jar amounts are not rescaled when percentages miss 100."""
        state = make_state(
            salary=1000000,
            allocation_settings=AllocationSettings(living=50, invest=30, savings=20, play=10),
        )
        amounts = {jar.jar: jar.amount for jar in jar_allocations(state)}
        assert amounts[Jar.LIVING] == 500000
        assert sum(amounts.values()) == 1100000

    def test_total_percent_flag_does_not_mutate(self):
        allocation = AllocationSettings(living=50, invest=30, savings=20, play=10)
        before = allocation.model_dump()
        assert total_percent(allocation) == 110
        assert allocation_is_balanced(allocation) is False
        assert allocation.model_dump() == before

    def test_large_remainder_jars_are_floats(self):
        """Test that jars past 2**53 are float approximations of the remainder."""
        state = make_state(salary=10 ** 20 + 1)
        jars = jar_allocations(state)
        assert all(isinstance(jar.amount, float) for jar in jars)
        assert sum(jar.amount for jar in jars) == pytest.approx(safe_remaining(state))

    def test_balanced_by_default(self):
        assert allocation_is_balanced(AllocationSettings()) is True


class TestCashflowRatio:
    """Tests for the cashflow progress ratio."""

    def test_ratio(self):
        state = make_state(salary=10000000, fixed_expenses=[4000000])
        assert cashflow_ratio(state) == pytest.approx(0.6)

    def test_ratio_zero_income(self):
        assert cashflow_ratio(FinanceState()) == 0.0

    def test_ratio_negative_clamped(self):
        state = make_state(salary=100, fixed_expenses=[200])
        assert cashflow_ratio(state) == 0.0


class TestSummarize:
    """Tests for the summary model."""

    def test_summary(self):
        state = make_state(
            cash=500000,
            bank_accounts=[1000000, 250000],
            salary=15000000,
            other_income=1000000,
            fixed_expenses=[3000000, 200000, 800000],
        )
        summary = summarize(state)
        assert summary.total_assets == 1750000
        assert summary.total_income == 16000000
        assert summary.total_expense == 4000000
        assert summary.remaining == 12000000
        assert summary.safe_remaining == 12000000
        assert summary.jar_amount(Jar.LIVING) == 4800000
        assert summary.jar_amount("play") == 1200000
        assert summary.total_percent == 100
        assert summary.allocation_balanced is True
        assert [jar.label for jar in summary.jars] == [
            "Living expenses", "Investment", "Savings", "Play",
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
