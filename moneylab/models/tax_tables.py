"""
Federal tax tables for the tax burden calculator.

Values are for single filers. Bracket minimums are the published inclusive
thresholds (11,926 follows 11,925), and bracket arithmetic uses them as
published.

Updating for a new tax year: add a ``TaxTable`` from the IRS Revenue
Procedure for that year (brackets and standard deduction) and the Form 461
instructions (excess business loss limit), then register it in
``TAX_TABLES``. The §469(i) allowance and phase-out band are not indexed.
"""

import math
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BracketDefinition(BaseModel):
    """One marginal rate bracket; ``max`` is None for the unbounded top bracket."""

    model_config = ConfigDict(frozen=True)

    rate: float = Field(..., ge=0, le=1)
    min: float = Field(..., ge=0)
    max: Optional[float] = None

    @property
    def upper_bound(self) -> float:
        return math.inf if self.max is None else self.max


class TaxTable(BaseModel):
    """Everything the tax engine needs for one tax year."""

    model_config = ConfigDict(frozen=True)

    year: int
    brackets: List[BracketDefinition] = Field(..., min_length=1)
    standard_deduction: float = Field(..., ge=0)
    excess_business_loss_limit: float = Field(
        ..., ge=0, description="Section 461(l) threshold"
    )
    passive_loss_allowance: float = Field(
        default=25000, ge=0, description="Section 469(i) special allowance"
    )
    passive_loss_phase_out_start: float = Field(default=100000, ge=0)
    passive_loss_phase_out_end: float = Field(default=150000, ge=0)

    @field_validator("brackets")
    @classmethod
    def validate_brackets(cls, v: List[BracketDefinition]) -> List[BracketDefinition]:
        """Brackets must ascend and only the last may be unbounded."""
        for lower, upper in zip(v, v[1:]):
            if lower.max is None or upper.min <= lower.min:
                raise ValueError("Brackets must be ascending with only the top unbounded")
        if v[-1].max is not None:
            raise ValueError("Top bracket must be unbounded")
        return v


TAX_TABLE_2025 = TaxTable(
    year=2025,
    # IRS Revenue Procedure 2024-40
    brackets=[
        BracketDefinition(rate=0.10, min=0, max=11925),
        BracketDefinition(rate=0.12, min=11926, max=48475),
        BracketDefinition(rate=0.22, min=48476, max=103350),
        BracketDefinition(rate=0.24, min=103351, max=197300),
        BracketDefinition(rate=0.32, min=197301, max=250525),
        BracketDefinition(rate=0.35, min=250526, max=626350),
        BracketDefinition(rate=0.37, min=626351, max=None),
    ],
    # Raised from 15,000 to 15,750 by the July 2025 act
    standard_deduction=15750,
    excess_business_loss_limit=313000,
    passive_loss_allowance=25000,
    passive_loss_phase_out_start=100000,
    passive_loss_phase_out_end=150000,
)

TAX_TABLES: Dict[int, TaxTable] = {TAX_TABLE_2025.year: TAX_TABLE_2025}


def get_tax_table(year: int) -> TaxTable:
    """
    Look up the tax table for a year.

    Raises:
        KeyError: If no table is registered for ``year``
    """
    try:
        return TAX_TABLES[year]
    except KeyError:
        raise KeyError(f"No tax table for {year}") from None
