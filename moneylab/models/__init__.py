"""Calculation engines and value types for the site's calculators."""

from .projection import (
    DEFAULT_CALCULATOR_INPUTS,
    CalculatorInputs,
    IncomeExpenseEntry,
    MonthlySnapshot,
    YearlySnapshot,
    aggregate_to_yearly,
    apply_compound_interest,
    calculate_net_worth_projection,
    get_active_expenses,
    get_active_income,
    get_monthly_rate,
    get_relevant_max_age,
    is_active_at_age,
    to_monthly_amount,
)
from .projection_summary import (
    ProjectionBreakdown,
    ProjectionSummary,
    build_projection_breakdown,
    find_run_out_age,
    summarize_projection,
)
from .strategies import (
    BusinessLossStrategy,
    DeductionStrategy,
    OilInvestmentStrategy,
    RealEstateProfessionalStrategy,
    apply_business_loss,
    apply_oil_investment,
    apply_real_estate_professional,
)
from .tax_burden import (
    DEFAULT_TAX_CALCULATOR_STATE,
    StrategyResult,
    TaxCalculationResult,
    TaxCalculatorInputs,
    TaxCalculatorState,
    apply_strategies,
    calculate_tax_burden,
)
from .tax_engine import (
    FederalTaxCalculation,
    TaxBracket,
    apply_standard_deduction,
    calculate_federal_income_tax,
)
from .tax_tables import TAX_TABLE_2025, TAX_TABLES, TaxTable, get_tax_table
from .time_grid import HorizonPolicy, ProjectionCalendar

__all__ = [
    "CalculatorInputs",
    "IncomeExpenseEntry",
    "MonthlySnapshot",
    "YearlySnapshot",
    "DEFAULT_CALCULATOR_INPUTS",
    "calculate_net_worth_projection",
    "aggregate_to_yearly",
    "get_monthly_rate",
    "to_monthly_amount",
    "is_active_at_age",
    "apply_compound_interest",
    "get_active_income",
    "get_active_expenses",
    "get_relevant_max_age",
    "HorizonPolicy",
    "ProjectionCalendar",
    "ProjectionSummary",
    "ProjectionBreakdown",
    "summarize_projection",
    "build_projection_breakdown",
    "find_run_out_age",
    "TaxTable",
    "TAX_TABLE_2025",
    "TAX_TABLES",
    "get_tax_table",
    "TaxBracket",
    "FederalTaxCalculation",
    "calculate_federal_income_tax",
    "apply_standard_deduction",
    "BusinessLossStrategy",
    "RealEstateProfessionalStrategy",
    "OilInvestmentStrategy",
    "DeductionStrategy",
    "apply_business_loss",
    "apply_real_estate_professional",
    "apply_oil_investment",
    "TaxCalculatorInputs",
    "TaxCalculatorState",
    "StrategyResult",
    "TaxCalculationResult",
    "DEFAULT_TAX_CALCULATOR_STATE",
    "apply_strategies",
    "calculate_tax_burden",
]
