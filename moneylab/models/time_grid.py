"""
Time grid for monthly net worth projections.

This module maps simulation month offsets onto calendar years and decides how
far into the future a projection runs.
"""

import logging
from datetime import date
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 100
DEFAULT_BUFFER_YEARS = 5


class ProjectionCalendar(BaseModel):
    """Calendar anchor for month zero of a projection."""

    model_config = ConfigDict(frozen=True)

    start_year: int = Field(..., ge=1900, le=2200, description="Calendar year of month 0")
    start_month: int = Field(
        default=1, ge=1, le=12, description="Calendar month of month 0 (1 = January)"
    )

    @classmethod
    def from_date(cls, when: date) -> "ProjectionCalendar":
        """Anchor the projection at the month containing ``when``."""
        return cls(start_year=when.year, start_month=when.month)

    @classmethod
    def today(cls) -> "ProjectionCalendar":
        """Anchor the projection at the current month."""
        return cls.from_date(date.today())

    def year_for_month(self, month_index: int) -> int:
        """Get the calendar year for a month offset."""
        return get_year_for_month(self.start_year, self.start_month, month_index)


class HorizonPolicy(BaseModel):
    """How far a projection runs.

    ``dynamic`` stops ``buffer_years`` after the latest income or expense ends
    (never past ``max_age``); ``fixed`` always runs to ``max_age``.
    """

    model_config = ConfigDict(frozen=True)

    policy: Literal["dynamic", "fixed"] = Field(default="dynamic")
    max_age: int = Field(default=DEFAULT_MAX_AGE, ge=1, le=150)
    buffer_years: int = Field(default=DEFAULT_BUFFER_YEARS, ge=0)

    def resolve_max_age(self, end_ages: Iterable[float]) -> float:
        """
        Resolve the final age of a projection.

        Args:
            end_ages: ``end_age`` of every income and expense entry

        Returns:
            Age at which the projection stops
        """
        if self.policy == "fixed":
            return self.max_age

        end_ages = list(end_ages)
        if not end_ages:
            return self.max_age

        return min(max(end_ages) + self.buffer_years, self.max_age)


def get_year_for_month(start_year: int, start_month: int, month_index: int) -> int:
    """
    Get the calendar year for a given month index.

    Args:
        start_year: Calendar year of month 0
        start_month: Calendar month of month 0 (1-12)
        month_index: Months elapsed since month 0

    Returns:
        Calendar year containing that month
    """
    total_months = (start_month - 1) + month_index
    return start_year + total_months // 12


def get_age_for_month(current_age: float, month_index: int) -> float:
    """Fractional age ``month_index`` months from now (40, 6 -> 40.5)."""
    return current_age + month_index / 12


def resolve_calendar(calendar: Optional[ProjectionCalendar]) -> ProjectionCalendar:
    """Use ``calendar`` when given, otherwise anchor at the current month."""
    if calendar is not None:
        return calendar
    anchored = ProjectionCalendar.today()
    logger.debug(
        f"No calendar supplied, anchoring projection at "
        f"{anchored.start_year}-{anchored.start_month:02d}"
    )
    return anchored
