"""
Deduction strategies for the tax burden calculator.

Each strategy takes the AGI left by the strategies before it and returns the
reduced AGI and the amount it deducted. AGI never drops below zero.

- Active business loss (IRC §162) limited by the §461(l) excess business
  loss threshold; the excess is reported as an NOL carryforward but not
  deducted this year.
- Rental real estate losses: unlimited for a Real Estate Professional
  (§469(c)(7)); otherwise the §469(i) allowance for active participation,
  phased out linearly across the AGI band.
- Oil & gas working interest: the intangible drilling cost share of the
  investment (§263(c)).

Qualification tests (750-hour rule, material participation, working interest
without liability shield) are taken at face value.
"""

from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import Field

from .base import ValueModel
from .formatting import DEFAULT_FORMATTER, CurrencyFormatter
from .tax_tables import TAX_TABLE_2025, TaxTable


class DeductionApplication(ValueModel):
    """AGI after a single strategy and what it deducted."""

    adjusted_agi: float = Field(..., alias="adjustedAGI")
    deduction_amount: float


class BusinessLossApplication(DeductionApplication):
    """Business loss outcome, including the disallowed excess."""

    nol_carryforward: float = 0.0


def apply_business_loss(
    agi: float,
    loss_amount: float,
    business_income: float = 0.0,
    threshold: float = TAX_TABLE_2025.excess_business_loss_limit,
) -> BusinessLossApplication:
    """
    Apply an active business loss subject to the §461(l) limit.

    Args:
        agi: AGI before the loss
        loss_amount: Total active business losses
        business_income: Business income the losses offset first
        threshold: Excess business loss limit

    Returns:
        BusinessLossApplication with the deductible amount and NOL carryforward
    """
    loss = max(0.0, loss_amount)
    income = max(0.0, business_income)

    net_business_loss = max(0.0, loss - income)
    allowed_deduction = min(net_business_loss, threshold)
    nol_carryforward = max(0.0, net_business_loss - threshold)

    return BusinessLossApplication(
        adjusted_agi=max(0.0, agi - allowed_deduction),
        deduction_amount=allowed_deduction,
        nol_carryforward=nol_carryforward,
    )


def passive_loss_allowance(agi: float, table: TaxTable = TAX_TABLE_2025) -> float:
    """
    §469(i) allowance available at ``agi``.

    The full allowance up to the start of the phase-out band, zero at its end,
    linear in between (125,000 -> 12,500 with the default band).
    """
    allowance = table.passive_loss_allowance
    if agi <= table.passive_loss_phase_out_start:
        return allowance

    phase_out_range = table.passive_loss_phase_out_end - table.passive_loss_phase_out_start
    if phase_out_range <= 0:
        return 0.0
    reduction = (agi - table.passive_loss_phase_out_start) / phase_out_range * allowance
    return min(allowance, max(0.0, allowance - reduction))


def apply_real_estate_professional(
    agi: float,
    is_rep: bool,
    active_participation: bool,
    passive_losses: float,
    table: TaxTable = TAX_TABLE_2025,
) -> DeductionApplication:
    """
    Deduct rental real estate losses.

    Args:
        agi: AGI before the deduction (drives the phase-out)
        is_rep: Qualifies as a Real Estate Professional
        active_participation: Actively participates (used only when not a REP)
        passive_losses: Total passive losses
        table: Tax table supplying the allowance and phase-out band

    Returns:
        DeductionApplication
    """
    losses = max(0.0, passive_losses)

    if is_rep:
        deduction_amount = losses
    elif active_participation:
        deduction_amount = min(losses, passive_loss_allowance(agi, table))
    else:
        return DeductionApplication(adjusted_agi=agi, deduction_amount=0.0)

    return DeductionApplication(
        adjusted_agi=max(0.0, agi - deduction_amount),
        deduction_amount=deduction_amount,
    )


def apply_oil_investment(
    agi: float, investment_amount: float, idc_percentage: float
) -> DeductionApplication:
    """Deduct the intangible drilling cost share (clamped to 0-100%) of an investment."""
    investment = max(0.0, investment_amount)
    percentage = max(0.0, min(100.0, idc_percentage)) / 100

    deduction_amount = investment * percentage
    return DeductionApplication(
        adjusted_agi=max(0.0, agi - deduction_amount),
        deduction_amount=deduction_amount,
    )


class BusinessLossStrategy(ValueModel):
    """Active business loss strategy inputs."""

    display_name: ClassVar[str] = "Active Business Loss"

    kind: Literal["business_loss"] = "business_loss"
    enabled: bool = False
    loss_amount: float = Field(default=0.0, description="Total active business losses")
    business_income: Optional[float] = Field(
        default=0.0, description="Business income offset before the §461(l) limit"
    )

    def is_active(self) -> bool:
        return self.enabled and self.loss_amount > 0

    def apply(
        self, agi: float, table: TaxTable = TAX_TABLE_2025
    ) -> BusinessLossApplication:
        return apply_business_loss(
            agi,
            self.loss_amount,
            self.business_income or 0.0,
            table.excess_business_loss_limit,
        )

    def describe(
        self,
        application: BusinessLossApplication,
        table: TaxTable = TAX_TABLE_2025,
        formatter: CurrencyFormatter = DEFAULT_FORMATTER,
    ) -> str:
        deduction = formatter.format_currency(application.deduction_amount)
        if application.nol_carryforward > 0:
            carryforward = formatter.format_currency(application.nol_carryforward)
            return (
                f"Section 162 business losses: {deduction} deductible "
                f"(§461(l) limit), {carryforward} NOL carryforward"
            )
        return (
            f"Section 162 active trade or business losses of {deduction} "
            f"reduce ordinary income"
        )


class RealEstateProfessionalStrategy(ValueModel):
    """Rental real estate loss strategy inputs."""

    display_name: ClassVar[str] = "Real Estate Professional"

    kind: Literal["real_estate_professional"] = "real_estate_professional"
    enabled: bool = False
    is_rep: bool = Field(default=False, alias="isREP")
    passive_losses: float = 0.0
    active_participation: Optional[bool] = False

    def is_active(self) -> bool:
        return self.enabled and self.passive_losses > 0

    def apply(self, agi: float, table: TaxTable = TAX_TABLE_2025) -> DeductionApplication:
        return apply_real_estate_professional(
            agi,
            self.is_rep,
            bool(self.active_participation),
            self.passive_losses,
            table,
        )

    def describe(
        self,
        application: DeductionApplication,
        table: TaxTable = TAX_TABLE_2025,
        formatter: CurrencyFormatter = DEFAULT_FORMATTER,
    ) -> str:
        deduction = formatter.format_currency(application.deduction_amount)
        if self.is_rep:
            return f"REP status allows {deduction} in passive loss deductions"
        if self.active_participation and application.deduction_amount > 0:
            allowance = formatter.format_currency(table.passive_loss_allowance)
            return (
                f"Active participation allows {deduction} passive loss deduction "
                f"(§469(i) {allowance} allowance)"
            )
        if self.active_participation:
            ceiling = formatter.format_currency(table.passive_loss_phase_out_end)
            return (
                f"Active participation but passive losses phased out due to "
                f"high AGI (>{ceiling})"
            )
        return "No REP or active participation status - passive losses not deductible"


class OilInvestmentStrategy(ValueModel):
    """Oil & gas working interest strategy inputs."""

    display_name: ClassVar[str] = "Oil & Gas Investment"

    kind: Literal["oil_investment"] = "oil_investment"
    enabled: bool = False
    investment_amount: float = 0.0
    idc_percentage: float = Field(
        default=80.0, description="Share of the investment that is IDC (typically 70-85)"
    )

    def is_active(self) -> bool:
        return self.enabled and self.investment_amount > 0

    def apply(self, agi: float, table: TaxTable = TAX_TABLE_2025) -> DeductionApplication:
        return apply_oil_investment(agi, self.investment_amount, self.idc_percentage)

    def describe(
        self,
        application: DeductionApplication,
        table: TaxTable = TAX_TABLE_2025,
        formatter: CurrencyFormatter = DEFAULT_FORMATTER,
    ) -> str:
        percentage = formatter.format_number(self.idc_percentage)
        investment = formatter.format_currency(self.investment_amount)
        deduction = formatter.format_currency(application.deduction_amount)
        return (
            f"Intangible Drilling Costs ({percentage}% of {investment}) "
            f"= {deduction} deduction"
        )


DeductionStrategy = Annotated[
    Union[BusinessLossStrategy, RealEstateProfessionalStrategy, OilInvestmentStrategy],
    Field(discriminator="kind"),
]
