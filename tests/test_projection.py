"""
Tests for the net worth projection engine.

This module covers rate and frequency conversion, the inclusive age ranges of
cash flows, the interest-before-cash-flow ordering, horizon policies and the
yearly aggregation used for charting.
"""

import math

import numpy as np
import pytest
from pydantic import ValidationError

from moneylab.models.projection import (
    DEFAULT_CALCULATOR_INPUTS,
    CalculatorInputs,
    IncomeExpenseEntry,
    MonthlySnapshot,
    aggregate_to_yearly,
    apply_compound_interest,
    calculate_net_worth_projection,
    get_active_expenses,
    get_active_income,
    get_monthly_rate,
    get_relevant_max_age,
    get_total_months,
    is_active_at_age,
    to_monthly_amount,
)
from moneylab.models.time_grid import HorizonPolicy, ProjectionCalendar


def monthly(amount, start_age, end_age):
    return IncomeExpenseEntry(
        amount=amount, frequency="monthly", start_age=start_age, end_age=end_age
    )


def annual(amount, start_age, end_age):
    return IncomeExpenseEntry(
        amount=amount, frequency="annual", start_age=start_age, end_age=end_age
    )


class TestRateAndAmountConversion:
    """Test monthly rate and amount normalization."""

    def test_monthly_rate(self):
        """Test annual percentage to monthly decimal conversion."""
        assert get_monthly_rate(12) == pytest.approx(0.01)
        assert get_monthly_rate(6) == pytest.approx(0.005)
        assert get_monthly_rate(0) == 0
        assert get_monthly_rate(-12) == pytest.approx(-0.01)

    def test_monthly_rate_matches_divide_by_1200(self):
        """Test the conversion for a spread of rates."""
        for rate in [0.5, 3.25, 7, 15, 100]:
            assert get_monthly_rate(rate) == pytest.approx(rate / 1200)

    def test_monthly_amount_passes_through(self):
        """Test that monthly entries are unchanged."""
        assert to_monthly_amount(monthly(5000, 30, 65)) == 5000

    def test_annual_amount_is_divided_by_twelve(self):
        """Test that annual entries are spread over twelve months."""
        assert to_monthly_amount(annual(120000, 30, 65)) == 10000

    def test_entry_accepts_camel_case_keys(self):
        """Test that entries validate from front end JSON."""
        entry = IncomeExpenseEntry.model_validate(
            {"amount": 100, "frequency": "annual", "startAge": 20, "endAge": 30}
        )
        assert entry.start_age == 20
        assert entry.end_age == 30

    def test_entry_rejects_unknown_frequency(self):
        """Test that frequency must be monthly or annual."""
        with pytest.raises(ValueError):
            IncomeExpenseEntry(
                amount=100, frequency="weekly", start_age=20, end_age=30
            )

    def test_entry_is_immutable(self):
        """Test that entries cannot be modified after construction."""
        entry = monthly(5000, 30, 65)
        with pytest.raises(Exception):
            entry.amount = 1


class TestActiveRanges:
    """Test inclusive age range checks and active totals."""

    def test_range_is_inclusive(self):
        """Test both ends of the range are active."""
        entry = monthly(5000, 30, 65)

        assert is_active_at_age(entry, 30) is True
        assert is_active_at_age(entry, 50) is True
        assert is_active_at_age(entry, 65) is True

    def test_outside_range(self):
        """Test ages outside the range are inactive."""
        entry = monthly(5000, 30, 65)

        assert is_active_at_age(entry, 29) is False
        assert is_active_at_age(entry, 29.9) is False
        assert is_active_at_age(entry, 65.5) is False
        assert is_active_at_age(entry, 66) is False

    def test_inverted_range_is_never_active(self):
        """Test that start_age > end_age is accepted but never active."""
        entry = monthly(5000, 65, 30)

        assert not any(is_active_at_age(entry, age) for age in range(20, 90))

    def test_active_income_sums_overlapping_streams(self):
        """Test summing of concurrent income streams."""
        incomes = [monthly(5000, 30, 65), monthly(2000, 35, 50)]

        assert get_active_income(incomes, 30) == 5000
        assert get_active_income(incomes, 35) == 7000
        assert get_active_income(incomes, 50) == 7000
        assert get_active_income(incomes, 51) == 5000
        assert get_active_income(incomes, 66) == 0

    def test_active_expenses_mixes_frequencies(self):
        """Test annual and monthly expenses are summed per month."""
        expenses = [monthly(3000, 30, 90), annual(12000, 40, 60)]

        assert get_active_expenses(expenses, 30) == 3000
        assert get_active_expenses(expenses, 40) == 4000
        assert get_active_expenses(expenses, 60) == 4000
        assert get_active_expenses(expenses, 61) == 3000

    def test_no_entries(self):
        """Test empty lists sum to zero."""
        assert get_active_income([], 40) == 0
        assert get_active_expenses([], 40) == 0


class TestCompoundInterest:
    """Test single-month compounding."""

    def test_positive_rate(self):
        """Test balance grows by the monthly rate."""
        assert apply_compound_interest(100000, 0.005) == pytest.approx(100500)

    def test_zero_rate_is_noop(self):
        """Test zero rate leaves the balance unchanged."""
        assert apply_compound_interest(100000, 0) == 100000

    def test_negative_rate_shrinks_balance(self):
        """Test negative rates reduce the balance."""
        assert apply_compound_interest(100000, -0.01) == pytest.approx(99000)

    def test_negative_balance(self):
        """Test debt compounds too."""
        assert apply_compound_interest(-1000, 0.01) == pytest.approx(-1010)


class TestHorizon:
    """Test projection horizon policies."""

    def test_dynamic_horizon_adds_buffer(self):
        """Test dynamic horizon is latest end age plus five years."""
        incomes = [monthly(5000, 40, 65)]
        expenses = [monthly(3000, 40, 70)]

        assert get_relevant_max_age(40, incomes, expenses) == 75

    def test_dynamic_horizon_is_capped(self):
        """Test dynamic horizon never exceeds the maximum age."""
        expenses = [monthly(3000, 40, 98)]

        assert get_relevant_max_age(40, [], expenses) == 100

    def test_dynamic_horizon_without_entries(self):
        """Test fallback to the maximum age when there are no entries."""
        assert get_relevant_max_age(40, [], []) == 100

    def test_fixed_horizon(self):
        """Test fixed horizon ignores entry end ages."""
        horizon = HorizonPolicy(policy="fixed")

        assert get_relevant_max_age(40, [monthly(1, 40, 50)], [], horizon) == 100

    def test_custom_buffer_and_max_age(self):
        """Test buffer and cap are configurable."""
        horizon = HorizonPolicy(max_age=90, buffer_years=10)

        assert get_relevant_max_age(40, [monthly(1, 40, 70)], [], horizon) == 80
        assert get_relevant_max_age(40, [monthly(1, 40, 85)], [], horizon) == 90

    def test_total_months(self):
        """Test month count for whole and fractional ages."""
        assert get_total_months(40, 100) == 720
        assert get_total_months(40.5, 100) == 714
        assert get_total_months(100, 100) == 0
        assert get_total_months(105, 100) == 0

    def test_total_months_non_finite(self):
        """Test non-finite ages give an empty horizon instead of raising."""
        assert get_total_months(math.nan, 100) == 0
        assert get_total_months(math.inf, 100) == 0
        assert get_total_months(-math.inf, 100) == 0

    def test_projection_with_nan_age_is_empty(self, calendar):
        """Test the engine stays total for unvalidated NaN ages."""
        inputs = CalculatorInputs.model_construct(
            current_age=math.nan,
            net_worth=1000,
            interest_rate=5,
            incomes=[],
            expenses=[],
        )

        assert calculate_net_worth_projection(inputs, calendar) == []


class TestInputValidation:
    """Test calculator input bounds."""

    @pytest.mark.parametrize("age", [math.nan, math.inf, -1, -20000, 151])
    def test_current_age_out_of_range(self, age):
        """Test ages outside 0-150 and non-finite ages are rejected."""
        with pytest.raises(ValidationError):
            CalculatorInputs(
                current_age=age, net_worth=0, interest_rate=0, incomes=[], expenses=[]
            )

    @pytest.mark.parametrize("field", ["net_worth", "interest_rate"])
    def test_non_finite_amounts_rejected(self, field):
        values = {"current_age": 40, "net_worth": 0, "interest_rate": 0}
        values[field] = math.nan

        with pytest.raises(ValidationError):
            CalculatorInputs(**values)

    def test_non_finite_entry_rejected(self):
        with pytest.raises(ValidationError):
            monthly(math.inf, 40, 65)

    def test_age_bounds_inclusive(self):
        """Test 0 and 150 are valid ages."""
        for age in (0, 150):
            inputs = CalculatorInputs(
                current_age=age, net_worth=0, interest_rate=0, incomes=[], expenses=[]
            )
            assert inputs.current_age == age


class TestNetWorthProjection:
    """Test the month-by-month projection."""

    def test_no_cash_flows_runs_to_maximum_age(self, calendar):
        """Test length and growth with no income or expenses."""
        inputs = CalculatorInputs(
            current_age=40, net_worth=100000, interest_rate=5, incomes=[], expenses=[]
        )

        result = calculate_net_worth_projection(inputs, calendar)

        assert len(result) == (100 - 40) * 12
        assert result[0].month == 0
        assert result[0].age == 40
        assert result[0].net_worth > 100000
        assert result[-1].net_worth > result[0].net_worth

    def test_dynamic_horizon_shortens_projection(self, calendar):
        """Test projection stops five years after the last cash flow."""
        inputs = CalculatorInputs(
            current_age=40,
            net_worth=0,
            interest_rate=0,
            incomes=[monthly(1000, 40, 60)],
            expenses=[],
        )

        result = calculate_net_worth_projection(inputs, calendar)

        assert len(result) == (65 - 40) * 12
        assert result[-1].age == 64

    def test_fixed_horizon_projection(self, calendar):
        """Test fixed horizon runs to age 100 regardless of entries."""
        inputs = CalculatorInputs(
            current_age=40,
            net_worth=0,
            interest_rate=0,
            incomes=[monthly(1000, 40, 60)],
            expenses=[],
        )

        result = calculate_net_worth_projection(
            inputs, calendar, HorizonPolicy(policy="fixed")
        )

        assert len(result) == 720

    def test_current_age_past_horizon(self, calendar):
        """Test an empty projection when already past the horizon."""
        inputs = CalculatorInputs(
            current_age=101, net_worth=1000, interest_rate=5, incomes=[], expenses=[]
        )

        assert calculate_net_worth_projection(inputs, calendar) == []

    def test_interest_is_applied_before_cash_flows(
        self, accumulation_inputs, calendar
    ):
        """Test exact values with interest on the opening balance only."""
        result = calculate_net_worth_projection(accumulation_inputs, calendar)

        # 100000 * 1.005 + 5000 - 3000
        assert result[0].net_worth == pytest.approx(102500.00, abs=0.01)
        assert result[1].net_worth == pytest.approx(105012.50, abs=0.01)
        assert result[2].net_worth == pytest.approx(107537.56, abs=0.01)
        assert result[11].net_worth == pytest.approx(130838.91, abs=0.01)

    def test_pure_compound_growth(self, calendar):
        """Test balance follows start * (1 + r) ** n without cash flows."""
        inputs = CalculatorInputs(
            current_age=40, net_worth=100000, interest_rate=6, incomes=[], expenses=[]
        )

        result = calculate_net_worth_projection(inputs, calendar)
        balances = np.array([snapshot.net_worth for snapshot in result])
        expected = 100000 * (1.005 ** np.arange(1, len(result) + 1))

        assert np.allclose(balances, expected, rtol=1e-9)
        assert result[11].net_worth == pytest.approx(106167.78, abs=0.01)
        assert result[23].net_worth == pytest.approx(112715.98, abs=0.01)
        assert result[119].net_worth == pytest.approx(181939.67, abs=0.01)

    def test_zero_interest_is_linear(self, calendar):
        """Test zero interest gives start + n * (income - expenses) exactly."""
        inputs = CalculatorInputs(
            current_age=40,
            net_worth=100000,
            interest_rate=0,
            incomes=[monthly(5000, 40, 100)],
            expenses=[monthly(3000, 40, 100)],
        )

        result = calculate_net_worth_projection(inputs, calendar)

        for snapshot in result[:120]:
            assert snapshot.net_worth == 100000 + (snapshot.month + 1) * 2000
        assert result[11].net_worth == 124000
        assert result[11].age == 40

    def test_annual_and_monthly_income_are_equivalent(self, calendar):
        """Test 60k/year and 5k/month produce identical trajectories at 0%."""
        base = dict(current_age=30, net_worth=0, interest_rate=0, expenses=[])
        annual_inputs = CalculatorInputs(incomes=[annual(60000, 30, 60)], **base)
        monthly_inputs = CalculatorInputs(incomes=[monthly(5000, 30, 60)], **base)

        annual_result = calculate_net_worth_projection(annual_inputs, calendar)
        monthly_result = calculate_net_worth_projection(monthly_inputs, calendar)

        assert [s.net_worth for s in annual_result] == [
            s.net_worth for s in monthly_result
        ]

    def test_net_worth_can_go_negative(self, calendar):
        """Test there is no floor on net worth."""
        inputs = CalculatorInputs(
            current_age=60,
            net_worth=50000,
            interest_rate=4,
            incomes=[],
            expenses=[monthly(5000, 60, 100)],
        )

        result = calculate_net_worth_projection(inputs, calendar)

        assert any(snapshot.net_worth < 0 for snapshot in result)
        assert result[-1].net_worth < result[-2].net_worth

    def test_negative_starting_net_worth(self, calendar):
        """Test debt accrues interest and is paid down by income."""
        inputs = CalculatorInputs(
            current_age=30,
            net_worth=-10000,
            interest_rate=12,
            incomes=[monthly(1000, 30, 40)],
            expenses=[],
        )

        result = calculate_net_worth_projection(inputs, calendar)

        # -10000 * 1.01 + 1000
        assert result[0].net_worth == pytest.approx(-9100)

    def test_income_stops_after_end_age(self, calendar):
        """Test that growth slows once income ends."""
        inputs = CalculatorInputs(
            current_age=40,
            net_worth=100000,
            interest_rate=6,
            incomes=[monthly(10000, 40, 65)],
            expenses=[],
        )

        yearly = aggregate_to_yearly(calculate_net_worth_projection(inputs, calendar))
        by_age = {snapshot.age: snapshot.net_worth for snapshot in yearly}

        assert by_age[40] > 100000 + 12 * 10000
        assert by_age[67] > by_age[66]
        assert by_age[67] < by_age[66] * 1.07

    def test_retirement_drawdown(self, calendar):
        """Test a drawdown that runs out before the horizon."""
        inputs = CalculatorInputs(
            current_age=65,
            net_worth=1000000,
            interest_rate=5,
            incomes=[],
            expenses=[monthly(8000, 65, 100)],
        )

        yearly = aggregate_to_yearly(calculate_net_worth_projection(inputs, calendar))
        by_age = {snapshot.age: snapshot.net_worth for snapshot in yearly}

        assert by_age[75] < by_age[65]
        assert by_age[90] < 0

    def test_fractional_age_is_floored(self, calendar):
        """Test snapshots carry whole ages."""
        inputs = CalculatorInputs(
            current_age=40, net_worth=0, interest_rate=0, incomes=[], expenses=[]
        )

        result = calculate_net_worth_projection(inputs, calendar)

        assert result[6].age == 40
        assert result[11].age == 40
        assert result[12].age == 41
        assert result[18].age == 41

    def test_calendar_years(self):
        """Test calendar years roll over relative to the start month."""
        inputs = CalculatorInputs(
            current_age=40, net_worth=0, interest_rate=0, incomes=[], expenses=[]
        )

        january = calculate_net_worth_projection(
            inputs, ProjectionCalendar(start_year=2025, start_month=1)
        )
        december = calculate_net_worth_projection(
            inputs, ProjectionCalendar(start_year=2025, start_month=12)
        )

        assert january[11].year == 2025
        assert january[12].year == 2026
        assert december[0].year == 2025
        assert december[1].year == 2026

    def test_result_does_not_depend_on_calendar(self, accumulation_inputs):
        """Test net worth values are independent of the calendar anchor."""
        first = calculate_net_worth_projection(
            accumulation_inputs, ProjectionCalendar(start_year=2020, start_month=3)
        )
        second = calculate_net_worth_projection(
            accumulation_inputs, ProjectionCalendar(start_year=2031, start_month=9)
        )

        assert [s.net_worth for s in first] == [s.net_worth for s in second]

    def test_inputs_are_not_mutated(self, accumulation_inputs, calendar):
        """Test repeated calls give the same result."""
        before = accumulation_inputs.model_dump()

        first = calculate_net_worth_projection(accumulation_inputs, calendar)
        second = calculate_net_worth_projection(accumulation_inputs, calendar)

        assert accumulation_inputs.model_dump() == before
        assert first == second

    def test_default_inputs_stay_positive(self, calendar):
        """Test the default scenario never runs out of money."""
        result = calculate_net_worth_projection(DEFAULT_CALCULATOR_INPUTS, calendar)

        assert len(result) == 720
        assert all(snapshot.net_worth > 0 for snapshot in result)


class TestAggregateToYearly:
    """Test downsampling to one point per age."""

    def test_keeps_last_snapshot_per_age(self):
        """Test the last month of each age is kept."""
        snapshots = [
            MonthlySnapshot(month=0, age=40, year=2025, net_worth=100000),
            MonthlySnapshot(month=1, age=40, year=2025, net_worth=105000),
            MonthlySnapshot(month=2, age=41, year=2026, net_worth=110000),
            MonthlySnapshot(month=3, age=41, year=2026, net_worth=115000),
            MonthlySnapshot(month=4, age=42, year=2027, net_worth=120000),
        ]

        yearly = aggregate_to_yearly(snapshots)

        assert len(yearly) == 3
        assert [s.age for s in yearly] == [40, 41, 42]
        assert [s.net_worth for s in yearly] == [105000, 115000, 120000]
        assert [s.year for s in yearly] == [2025, 2026, 2027]

    def test_empty_input(self):
        """Test empty input gives empty output."""
        assert aggregate_to_yearly([]) == []

    def test_full_projection(self, accumulation_inputs, calendar):
        """Test one point per age across a full projection."""
        monthly_result = calculate_net_worth_projection(accumulation_inputs, calendar)

        yearly = aggregate_to_yearly(monthly_result)

        assert [s.age for s in yearly] == list(range(40, 100))
        assert yearly[0].net_worth == monthly_result[11].net_worth
        assert yearly[-1].net_worth == monthly_result[-1].net_worth
