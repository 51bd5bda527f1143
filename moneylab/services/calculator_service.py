"""
Calculator service for the site's embedded financial tools.

This service sits between the HTTP layer and the pure calculation engines:
it resolves configuration (projection horizon, tax year), anchors projections
to the calendar, and shapes engine output into response payloads.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Literal, Optional

from moneylab.config import Settings, get_global_settings
from moneylab.models.projection import (
    CalculatorInputs,
    aggregate_to_yearly,
    calculate_net_worth_projection,
    get_relevant_max_age,
)
from moneylab.models.projection_summary import (
    build_projection_breakdown,
    summarize_projection,
)
from moneylab.models.tax_burden import TaxCalculatorState, calculate_tax_burden
from moneylab.models.tax_tables import TaxTable
from moneylab.models.time_grid import HorizonPolicy, ProjectionCalendar

logger = logging.getLogger(__name__)

Granularity = Literal["monthly", "yearly"]


class CalculatorService:
    """Service for running net worth projections and tax burden estimates."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the calculator service.

        Args:
            settings: Application settings (defaults to the global settings)
            clock: Source of today's date, used to anchor projections
        """
        self.settings = settings or get_global_settings()
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    @property
    def horizon(self) -> HorizonPolicy:
        return self.settings.horizon_policy()

    @property
    def tax_table(self) -> TaxTable:
        return self.settings.tax_table()

    def calendar_for(
        self, start_year: Optional[int] = None, start_month: Optional[int] = None
    ) -> ProjectionCalendar:
        """Build the projection calendar, filling gaps from the clock."""
        today = self.clock()
        return ProjectionCalendar(
            start_year=start_year if start_year is not None else today.year,
            start_month=start_month if start_month is not None else today.month,
        )

    def run_projection(
        self,
        inputs: CalculatorInputs,
        granularity: Granularity = "yearly",
        calendar: Optional[ProjectionCalendar] = None,
    ) -> Dict[str, Any]:
        """Run a net worth projection.

        Args:
            inputs: Calculator inputs
            granularity: Return monthly snapshots or one per age
            calendar: Calendar anchor (defaults to the current month)

        Returns:
            Dictionary with snapshots, summary, breakdown and horizon details
        """
        if granularity not in ("monthly", "yearly"):
            raise ValueError(f"Unsupported granularity: {granularity}")

        calendar = calendar or self.calendar_for()
        horizon = self.horizon

        monthly = calculate_net_worth_projection(inputs, calendar, horizon)
        yearly = aggregate_to_yearly(monthly)
        summary = summarize_projection(inputs, yearly)
        breakdown = build_projection_breakdown(inputs, monthly)

        self.logger.info(
            f"Projected {len(monthly)} months from age {inputs.current_age} "
            f"({horizon.policy} horizon), run-out age {summary.run_out_age}"
        )

        snapshots = monthly if granularity == "monthly" else yearly
        return {
            "granularity": granularity,
            "horizon": {
                "policy": horizon.policy,
                "maxAge": get_relevant_max_age(
                    inputs.current_age, inputs.incomes, inputs.expenses, horizon
                ),
                "months": len(monthly),
            },
            "calendar": {
                "startYear": calendar.start_year,
                "startMonth": calendar.start_month,
            },
            "snapshots": [snapshot.to_json_dict() for snapshot in snapshots],
            "summary": summary.to_json_dict(),
            "breakdown": breakdown.to_json_dict(),
        }

    def run_tax_burden(self, state: TaxCalculatorState) -> Dict[str, Any]:
        """Run a tax burden estimate.

        Args:
            state: Tax calculator state

        Returns:
            Dictionary form of the TaxCalculationResult plus the tax year
        """
        table = self.tax_table
        result = calculate_tax_burden(state, table)

        self.logger.info(
            f"Tax burden for {table.year}: income {result.total_income:.0f}, "
            f"{len(result.strategies)} strategies, savings {result.total_tax_savings:.2f}"
        )

        payload = result.to_json_dict()
        payload["taxYear"] = table.year
        return payload
