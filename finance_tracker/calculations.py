"""
Derived Calculations

Pure functions from a FinanceState to the figures the form displays.

Every amount passes through to_amount() before it is summed, so an entry
that somehow holds a non-number contributes 0 instead of raising.

DESIGN DECISION: Jar percentages are used literally. If they do not sum
to 100 the jars under- or over-allocate the remainder; the sum is exposed
(total_percent / allocation_is_balanced) so the caller can warn, but it is
never normalized here.
"""

from typing import Iterable

from finance_tracker.entries import LineItem
from finance_tracker.formatting import to_amount
from finance_tracker.models.finance import (
    AllocationSettings,
    FinanceState,
    FinanceSummary,
    Jar,
    JarAllocation,
)


def sum_items(items: Iterable[LineItem]) -> int:
    return sum(to_amount(getattr(item, "amount", 0)) for item in items)


def total_bank(state: FinanceState) -> int:
    return sum_items(state.bank_accounts)


def total_assets(state: FinanceState) -> int:
    """Cash plus every bank balance."""
    return to_amount(state.cash) + total_bank(state)


def total_income(state: FinanceState) -> int:
    return to_amount(state.salary) + to_amount(state.other_income)


def total_expense(state: FinanceState) -> int:
    return sum_items(state.fixed_expenses)


def remaining(state: FinanceState) -> int:
    """Monthly net cashflow: income minus fixed expenses. May be negative."""
    return total_income(state) - total_expense(state)


def safe_remaining(state: FinanceState) -> int:
    """The remainder clamped at zero; what the jars actually split."""
    return max(remaining(state), 0)


def cashflow_ratio(state: FinanceState) -> float:
    """Share of income left after fixed expenses, clamped to [0, 1]."""
    income = total_income(state)
    if income <= 0:
        return 0.0
    return min(max(remaining(state) / income, 0.0), 1.0)


def total_percent(allocation: AllocationSettings) -> int:
    return sum(to_amount(allocation.percent(jar)) for jar in Jar)


def allocation_is_balanced(allocation: AllocationSettings) -> bool:
    """True when the jar percentages sum to exactly 100."""
    return total_percent(allocation) == 100


def jar_amount(amount: int, percent: int) -> float:
    # Float result: above 2**53 the jars stop summing exactly to the remainder.
    # Display rounds each jar to whole units.
    return amount * percent / 100


def jar_allocations(state: FinanceState) -> list[JarAllocation]:
    """
    Split the safe remainder across the jars.

    A negative remainder is clamped first, so every jar is 0 in that case.
    """
    base = safe_remaining(state)
    allocations = []
    for jar in Jar:
        percent = to_amount(state.allocation_settings.percent(jar))
        allocations.append(
            JarAllocation(
                jar=jar,
                label=jar.label,
                percent=percent,
                amount=jar_amount(base, percent),
            )
        )
    return allocations


def summarize(state: FinanceState) -> FinanceSummary:
    """Compute every derived figure for `state` in one pass."""
    return FinanceSummary(
        total_bank=total_bank(state),
        total_assets=total_assets(state),
        total_income=total_income(state),
        total_expense=total_expense(state),
        remaining=remaining(state),
        safe_remaining=safe_remaining(state),
        cashflow_ratio=cashflow_ratio(state),
        jars=jar_allocations(state),
        total_percent=total_percent(state.allocation_settings),
        allocation_balanced=allocation_is_balanced(state.allocation_settings),
    )
