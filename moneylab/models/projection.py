"""
Die with Zero net worth projection engine.

Net worth is simulated month by month from the current age to the end of the
projection horizon. Each month, in this order:

1. monthly compound interest is applied to the opening balance,
2. income active at that age is added,
3. expenses active at that age are subtracted,
4. a snapshot is recorded.

Cash flows land at the end of the month and earn no interest until the next
one. Net worth may go negative; nothing is clamped.
"""

import math
from typing import Iterable, List, Literal, Optional

from pydantic import ConfigDict, Field

from .base import ValueModel
from .time_grid import (
    HorizonPolicy,
    ProjectionCalendar,
    get_age_for_month,
    resolve_calendar,
)


class IncomeExpenseEntry(ValueModel):
    """A recurring cash flow active over the inclusive age range [start_age, end_age]."""

    amount: float = Field(..., description="Amount per period")
    frequency: Literal["monthly", "annual"] = Field(
        ..., description="Whether amount is per month or per year"
    )
    start_age: float = Field(..., description="First age the flow is active")
    end_age: float = Field(..., description="Last age the flow is active")


class CalculatorInputs(ValueModel):
    """Inputs for one net worth projection."""

    current_age: float = Field(..., ge=0, le=150, description="Age at month 0")
    net_worth: float = Field(..., description="Starting net worth (may be negative)")
    interest_rate: float = Field(
        ..., description="Annual interest rate as a percentage (5 means 5%)"
    )
    incomes: List[IncomeExpenseEntry] = Field(default_factory=list)
    expenses: List[IncomeExpenseEntry] = Field(default_factory=list)


class MonthlySnapshot(ValueModel):
    """Net worth at the end of one simulated month."""

    # balances may overflow to infinity with extreme rates
    model_config = ConfigDict(allow_inf_nan=True)

    month: int = Field(..., description="Month offset from the projection start")
    age: int = Field(..., description="Whole age during this month")
    year: int = Field(..., description="Calendar year")
    net_worth: float = Field(..., description="Net worth after this month's flows")


class YearlySnapshot(ValueModel):
    """Net worth at the end of one age-year."""

    model_config = ConfigDict(allow_inf_nan=True)

    year: int
    age: int
    net_worth: float


def get_monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate (12 -> 0.01)."""
    return annual_rate_percent / 100 / 12


def to_monthly_amount(entry: IncomeExpenseEntry) -> float:
    """Convert an income/expense entry to its monthly amount."""
    if entry.frequency == "monthly":
        return entry.amount
    return entry.amount / 12


def is_active_at_age(entry: IncomeExpenseEntry, age: float) -> bool:
    """Check if an entry is active at ``age`` (both ends inclusive)."""
    return entry.start_age <= age <= entry.end_age


def apply_compound_interest(balance: float, monthly_rate: float) -> float:
    """Apply one month of compound interest."""
    return balance * (1 + monthly_rate)


def _active_monthly_total(entries: Iterable[IncomeExpenseEntry], age: float) -> float:
    return sum(
        (to_monthly_amount(entry) for entry in entries if is_active_at_age(entry, age)),
        0.0,
    )


def get_active_income(incomes: Iterable[IncomeExpenseEntry], age: float) -> float:
    """Total monthly income active at ``age``."""
    return _active_monthly_total(incomes, age)


def get_active_expenses(expenses: Iterable[IncomeExpenseEntry], age: float) -> float:
    """Total monthly expenses active at ``age``."""
    return _active_monthly_total(expenses, age)


def get_relevant_max_age(
    current_age: float,
    incomes: Iterable[IncomeExpenseEntry],
    expenses: Iterable[IncomeExpenseEntry],
    horizon: Optional[HorizonPolicy] = None,
) -> float:
    """
    Get the age at which a projection stops.

    Args:
        current_age: Age at month 0 (not used by the built-in policies)
        incomes: Income entries
        expenses: Expense entries
        horizon: Horizon policy (defaults to the dynamic policy)

    Returns:
        Final age of the projection
    """
    horizon = horizon or HorizonPolicy()
    end_ages = [entry.end_age for entry in [*incomes, *expenses]]
    return horizon.resolve_max_age(end_ages)


def get_total_months(current_age: float, max_age: float) -> int:
    """Number of months between ``current_age`` and ``max_age`` (0 if none)."""
    years = max_age - current_age
    if not math.isfinite(years) or years <= 0:
        return 0
    return math.ceil(years * 12)


def calculate_net_worth_projection(
    inputs: CalculatorInputs,
    calendar: Optional[ProjectionCalendar] = None,
    horizon: Optional[HorizonPolicy] = None,
) -> List[MonthlySnapshot]:
    """
    Project net worth month by month from the current age to the horizon.

    Args:
        inputs: Starting position, rate and cash flows
        calendar: Calendar anchor for month 0 (defaults to the current month)
        horizon: Horizon policy (defaults to the dynamic policy)

    Returns:
        One snapshot per simulated month, in month order
    """
    calendar = resolve_calendar(calendar)
    monthly_rate = get_monthly_rate(inputs.interest_rate)
    max_age = get_relevant_max_age(
        inputs.current_age, inputs.incomes, inputs.expenses, horizon
    )
    total_months = get_total_months(inputs.current_age, max_age)

    snapshots: List[MonthlySnapshot] = []
    net_worth = inputs.net_worth

    for month_index in range(total_months):
        age = get_age_for_month(inputs.current_age, month_index)

        net_worth = apply_compound_interest(net_worth, monthly_rate)
        net_worth += get_active_income(inputs.incomes, age)
        net_worth -= get_active_expenses(inputs.expenses, age)

        snapshots.append(
            MonthlySnapshot(
                month=month_index,
                age=math.floor(age),
                year=calendar.year_for_month(month_index),
                net_worth=net_worth,
            )
        )

    return snapshots


def aggregate_to_yearly(monthly: Iterable[MonthlySnapshot]) -> List[YearlySnapshot]:
    """
    Keep the last monthly snapshot of each whole age.

    Args:
        monthly: Monthly snapshots

    Returns:
        One snapshot per age, ascending by age
    """
    last_by_age = {}
    for snapshot in monthly:
        last_by_age[snapshot.age] = snapshot

    return [
        YearlySnapshot(
            year=snapshot.year, age=snapshot.age, net_worth=snapshot.net_worth
        )
        for snapshot in sorted(last_by_age.values(), key=lambda s: s.age)
    ]


DEFAULT_CALCULATOR_INPUTS = CalculatorInputs(
    current_age=40,
    net_worth=1000000,
    interest_rate=5,
    incomes=[
        IncomeExpenseEntry(amount=15000, frequency="monthly", start_age=40, end_age=65)
    ],
    expenses=[
        IncomeExpenseEntry(amount=8000, frequency="monthly", start_age=40, end_age=100)
    ],
)
