"""Services coordinating the calculation engines."""

from .calculator_service import CalculatorService

__all__ = ["CalculatorService"]
