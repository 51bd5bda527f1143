"""
Summary metrics for net worth projections.

Turns a projection into the figures the calculator page highlights: peak and
final net worth, the age the money runs out, and the month-by-month
walkthrough shown under "How Your Wealth Evolves".
"""

import math
from typing import Dict, List, Optional, Sequence

import numpy as np
from pydantic import Field

from .base import ValueModel
from .projection import (
    CalculatorInputs,
    MonthlySnapshot,
    YearlySnapshot,
    get_active_expenses,
    get_active_income,
    get_monthly_rate,
)

MILESTONE_AGES = (65, 75, 85)
EXPENSE_REDUCTION_SHARE = 0.2


class ProjectionSummary(ValueModel):
    """Headline figures for a yearly projection."""

    starting_net_worth: float
    peak_net_worth: Optional[float] = None
    peak_age: Optional[int] = None
    final_age: Optional[int] = None
    final_net_worth: Optional[float] = None
    run_out_age: Optional[int] = Field(
        default=None, description="First age ending with negative net worth"
    )
    net_worth_after_5_years: Optional[float] = Field(
        default=None, alias="netWorthAfter5Years"
    )
    net_worth_after_10_years: Optional[float] = Field(
        default=None, alias="netWorthAfter10Years"
    )


class ProjectionBreakdown(ValueModel):
    """Walkthrough of the first month and the key milestones of a projection."""

    monthly_rate: float
    starting_net_worth: float
    initial_monthly_income: float
    initial_monthly_expenses: float
    first_month_net_worth: Optional[float] = None
    net_worth_after_one_year: Optional[float] = None
    milestones: Dict[int, float] = Field(default_factory=dict)
    final_net_worth: Optional[float] = None
    zero_point_age: Optional[int] = None
    runway_years: Optional[int] = None
    suggested_monthly_expense_reduction: Optional[float] = None
    consider_spending_more: bool = False


def find_run_out_age(yearly: Sequence[YearlySnapshot]) -> Optional[int]:
    """First age whose year-end net worth is negative, or None."""
    if not yearly:
        return None
    balances = np.array([snapshot.net_worth for snapshot in yearly], dtype=np.float64)
    negative = np.flatnonzero(balances < 0)
    if negative.size == 0:
        return None
    return yearly[int(negative[0])].age


def _net_worth_at_age(yearly: Sequence[YearlySnapshot], age: float) -> Optional[float]:
    for snapshot in yearly:
        if snapshot.age == age:
            return snapshot.net_worth
    return None


def summarize_projection(
    inputs: CalculatorInputs, yearly: Sequence[YearlySnapshot]
) -> ProjectionSummary:
    """
    Summarize a yearly projection.

    Args:
        inputs: Inputs the projection was run with
        yearly: Output of ``aggregate_to_yearly``

    Returns:
        ProjectionSummary for the page header cards
    """
    if not yearly:
        return ProjectionSummary(starting_net_worth=inputs.net_worth)

    balances = np.array([snapshot.net_worth for snapshot in yearly], dtype=np.float64)
    peak_index = int(np.argmax(balances))

    return ProjectionSummary(
        starting_net_worth=inputs.net_worth,
        peak_net_worth=float(balances[peak_index]),
        peak_age=yearly[peak_index].age,
        final_age=yearly[-1].age,
        final_net_worth=float(balances[-1]),
        run_out_age=find_run_out_age(yearly),
        net_worth_after_5_years=_net_worth_at_age(yearly, inputs.current_age + 5),
        net_worth_after_10_years=_net_worth_at_age(yearly, inputs.current_age + 10),
    )


def _milestones(
    current_age: float, monthly: Sequence[MonthlySnapshot]
) -> Dict[int, float]:
    milestones: Dict[int, float] = {}
    for milestone_age in MILESTONE_AGES:
        if current_age >= milestone_age:
            continue
        for snapshot in monthly:
            if snapshot.age == milestone_age:
                milestones[milestone_age] = snapshot.net_worth
                break
    return milestones


def build_projection_breakdown(
    inputs: CalculatorInputs, monthly: List[MonthlySnapshot]
) -> ProjectionBreakdown:
    """
    Build the month-one walkthrough and milestone figures for a projection.

    The zero point is the first month ending at or below zero. When there is
    one, the suggested cut is a fifth of the expenses active at that age;
    when there is none and the final balance is more than double the start,
    the plan is flagged as leaving money unspent.

    Args:
        inputs: Inputs the projection was run with
        monthly: Output of ``calculate_net_worth_projection``

    Returns:
        ProjectionBreakdown
    """
    current_age = inputs.current_age
    breakdown = {
        "monthly_rate": get_monthly_rate(inputs.interest_rate),
        "starting_net_worth": inputs.net_worth,
        "initial_monthly_income": get_active_income(inputs.incomes, current_age),
        "initial_monthly_expenses": get_active_expenses(inputs.expenses, current_age),
    }
    if not monthly:
        return ProjectionBreakdown(**breakdown)

    breakdown["first_month_net_worth"] = monthly[0].net_worth
    if len(monthly) > 11:
        breakdown["net_worth_after_one_year"] = monthly[11].net_worth
    breakdown["milestones"] = _milestones(current_age, monthly)
    breakdown["final_net_worth"] = monthly[-1].net_worth

    zero_point = next((s for s in monthly if s.net_worth <= 0), None)
    if zero_point is not None:
        breakdown["zero_point_age"] = zero_point.age
        breakdown["runway_years"] = zero_point.age - math.floor(current_age)
        breakdown["suggested_monthly_expense_reduction"] = (
            get_active_expenses(inputs.expenses, zero_point.age)
            * EXPENSE_REDUCTION_SHARE
        )
    else:
        breakdown["consider_spending_more"] = (
            monthly[-1].net_worth > inputs.net_worth * 2
        )

    return ProjectionBreakdown(**breakdown)
