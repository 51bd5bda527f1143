"""
Tax burden calculation with stacked deduction strategies.

Baseline tax is computed once with no strategies. Active strategies are then
applied one after another, each starting from the AGI the previous one left.
A strategy's tax savings is the drop in total tax across that single step, so
savings depend on application order and add up to the overall savings.
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from .base import ValueModel
from .strategies import (
    BusinessLossApplication,
    BusinessLossStrategy,
    DeductionStrategy,
    OilInvestmentStrategy,
    RealEstateProfessionalStrategy,
)
from .tax_engine import (
    TaxBracket,
    apply_standard_deduction,
    calculate_federal_income_tax,
    tax_on_agi,
)
from .tax_tables import TAX_TABLE_2025, TaxTable


class TaxCalculatorInputs(ValueModel):
    """Base income before any strategy."""

    w2_income: float = Field(default=0.0, description="Annual W-2 salary")
    phantom_equity_payout: float = Field(
        default=0.0, description="One-time phantom equity or similar payout"
    )


class TaxCalculatorState(ValueModel):
    """Everything the tax calculator form collects."""

    base_income: TaxCalculatorInputs
    business_loss: BusinessLossStrategy = Field(default_factory=BusinessLossStrategy)
    real_estate_professional: RealEstateProfessionalStrategy = Field(
        default_factory=RealEstateProfessionalStrategy
    )
    oil_investment: OilInvestmentStrategy = Field(default_factory=OilInvestmentStrategy)

    @property
    def total_income(self) -> float:
        return self.base_income.w2_income + self.base_income.phantom_equity_payout

    def strategy_pipeline(self) -> List[DeductionStrategy]:
        """Strategies in application order.

        Business losses go first so the §469(i) phase-out sees the AGI they
        leave behind.
        """
        return [self.business_loss, self.real_estate_professional, self.oil_investment]


class StrategyResult(ValueModel):
    """What one applied strategy deducted and saved."""

    name: str
    enabled: bool
    deduction_amount: float
    tax_savings: float
    description: str
    nol_carryforward: Optional[float] = None

    @model_serializer(mode="wrap")
    def _omit_missing_carryforward(self, handler):
        # only business losses carry a carryforward; others omit the key
        data = handler(self)
        if self.nol_carryforward is None:
            data.pop("nolCarryforward", None)
            data.pop("nol_carryforward", None)
        return data


class StrategyPipelineOutcome(BaseModel):
    """AGI after a pipeline run and the per-strategy results."""

    model_config = ConfigDict(frozen=True)

    adjusted_agi: float
    strategies: List[StrategyResult]


class TaxCalculationResult(ValueModel):
    """Before/after comparison for one tax burden calculation."""

    total_income: float

    baseline_agi: float = Field(..., alias="baselineAGI")
    baseline_taxable_income: float
    baseline_tax: float
    baseline_brackets: List[TaxBracket]

    adjusted_agi: float = Field(..., alias="adjustedAGI")
    adjusted_taxable_income: float
    adjusted_tax: float
    adjusted_brackets: List[TaxBracket]

    strategies: List[StrategyResult]
    total_deductions: float
    total_tax_savings: float

    effective_tax_rate: float
    net_proceeds: float


def apply_strategies(
    agi: float,
    strategies: Sequence[DeductionStrategy],
    table: TaxTable = TAX_TABLE_2025,
) -> StrategyPipelineOutcome:
    """
    Apply strategies in order, attributing marginal tax savings to each.

    Inactive strategies are skipped and produce no result.

    Args:
        agi: Starting AGI
        strategies: Strategies in application order
        table: Tax table to use

    Returns:
        StrategyPipelineOutcome
    """
    results: List[StrategyResult] = []

    for strategy in strategies:
        if not strategy.is_active():
            continue

        before_tax = tax_on_agi(agi, table)
        application = strategy.apply(agi, table)
        agi = application.adjusted_agi
        after_tax = tax_on_agi(agi, table)

        nol_carryforward = None
        if isinstance(application, BusinessLossApplication):
            nol_carryforward = application.nol_carryforward

        results.append(
            StrategyResult(
                name=strategy.display_name,
                enabled=True,
                deduction_amount=application.deduction_amount,
                tax_savings=before_tax - after_tax,
                description=strategy.describe(application, table),
                nol_carryforward=nol_carryforward,
            )
        )

    return StrategyPipelineOutcome(adjusted_agi=agi, strategies=results)


def calculate_tax_burden(
    state: TaxCalculatorState, table: TaxTable = TAX_TABLE_2025
) -> TaxCalculationResult:
    """
    Calculate the tax burden with all active strategies applied.

    Args:
        state: Income and strategy inputs
        table: Tax table to use

    Returns:
        TaxCalculationResult with baseline and adjusted figures
    """
    total_income = state.total_income

    baseline_agi = total_income
    baseline_taxable_income = apply_standard_deduction(baseline_agi, table)
    baseline = calculate_federal_income_tax(baseline_taxable_income, table)

    outcome = apply_strategies(baseline_agi, state.strategy_pipeline(), table)

    adjusted_taxable_income = apply_standard_deduction(outcome.adjusted_agi, table)
    adjusted = calculate_federal_income_tax(adjusted_taxable_income, table)

    total_deductions = sum((s.deduction_amount for s in outcome.strategies), 0.0)
    effective_tax_rate = adjusted.total_tax / total_income if total_income > 0 else 0.0

    return TaxCalculationResult(
        total_income=total_income,
        baseline_agi=baseline_agi,
        baseline_taxable_income=baseline_taxable_income,
        baseline_tax=baseline.total_tax,
        baseline_brackets=baseline.brackets,
        adjusted_agi=outcome.adjusted_agi,
        adjusted_taxable_income=adjusted_taxable_income,
        adjusted_tax=adjusted.total_tax,
        adjusted_brackets=adjusted.brackets,
        strategies=outcome.strategies,
        total_deductions=total_deductions,
        total_tax_savings=baseline.total_tax - adjusted.total_tax,
        effective_tax_rate=effective_tax_rate,
        net_proceeds=total_income - adjusted.total_tax,
    )


DEFAULT_TAX_CALCULATOR_STATE = TaxCalculatorState(
    base_income=TaxCalculatorInputs(w2_income=200000, phantom_equity_payout=500000),
    business_loss=BusinessLossStrategy(enabled=False, loss_amount=0, business_income=0),
    real_estate_professional=RealEstateProfessionalStrategy(
        enabled=False, is_rep=False, passive_losses=0, active_participation=False
    ),
    oil_investment=OilInvestmentStrategy(
        enabled=False, investment_amount=0, idc_percentage=80
    ),
)
