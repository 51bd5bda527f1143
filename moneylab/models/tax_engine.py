"""
Progressive federal income tax.

Each bracket's rate applies only to the slice of income inside that bracket.
"""

from typing import List, Optional

from pydantic import Field

from .base import ValueModel
from .tax_tables import TAX_TABLE_2025, TaxTable


class TaxBracket(ValueModel):
    """Tax owed within one bracket for a given taxable income."""

    rate: float
    min: float
    max: Optional[float] = Field(default=None, description="None for the top bracket")
    tax_amount: float
    income_in_bracket: float


class FederalTaxCalculation(ValueModel):
    """Total tax and the brackets it was drawn from."""

    total_tax: float
    brackets: List[TaxBracket] = Field(default_factory=list)


def calculate_federal_income_tax(
    taxable_income: float, table: TaxTable = TAX_TABLE_2025
) -> FederalTaxCalculation:
    """
    Calculate federal income tax using progressive brackets.

    Args:
        taxable_income: Income after deductions (negative is treated as 0)
        table: Tax table to use

    Returns:
        FederalTaxCalculation with one entry per bracket the income reaches
    """
    income = max(0.0, taxable_income)

    total_tax = 0.0
    brackets: List[TaxBracket] = []

    for bracket in table.brackets:
        if income <= bracket.min:
            break

        income_in_bracket = min(income, bracket.upper_bound) - bracket.min
        tax_amount = income_in_bracket * bracket.rate
        total_tax += tax_amount

        brackets.append(
            TaxBracket(
                rate=bracket.rate,
                min=bracket.min,
                max=bracket.max,
                tax_amount=tax_amount,
                income_in_bracket=income_in_bracket,
            )
        )

    return FederalTaxCalculation(total_tax=max(0.0, total_tax), brackets=brackets)


def apply_standard_deduction(agi: float, table: TaxTable = TAX_TABLE_2025) -> float:
    """Taxable income after the standard deduction, floored at zero."""
    return max(0.0, agi - table.standard_deduction)


def tax_on_agi(agi: float, table: TaxTable = TAX_TABLE_2025) -> float:
    """Total federal tax owed on ``agi`` after the standard deduction."""
    return calculate_federal_income_tax(
        apply_standard_deduction(agi, table), table
    ).total_tax
