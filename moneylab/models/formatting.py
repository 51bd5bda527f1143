"""
Display formatting for calculator output.

Strategy descriptions and breakdowns quote dollar amounts inline, so the
formatting has to match what the site renders elsewhere: thousands
separators, no decimals on whole amounts, and up to three decimals otherwise
(the browser's default number formatting).
"""

from typing import Optional

from pydantic import BaseModel, Field


class CurrencyFormatter(BaseModel):
    """Formats currency values for display."""

    currency_symbol: str = Field(default="$", description="Currency symbol")
    max_decimal_places: int = Field(
        default=3, ge=0, le=10, description="Decimals kept on fractional amounts"
    )
    thousands_separator: str = Field(default=",", description="Thousands separator")
    show_currency_symbol: bool = Field(
        default=True, description="Whether to show currency symbol"
    )

    def format_number(self, amount: float) -> str:
        """
        Format a plain number with grouping.

        Whole values print without a decimal point; fractional values keep at
        most ``max_decimal_places`` digits with trailing zeros dropped.

        Args:
            amount: The number to format

        Returns:
            Formatted number string
        """
        rounded = round(float(amount), self.max_decimal_places)
        if rounded.is_integer():
            formatted = f"{int(rounded):,}"
        else:
            formatted = f"{rounded:,.{self.max_decimal_places}f}".rstrip("0")

        if self.thousands_separator != ",":
            formatted = formatted.replace(",", self.thousands_separator)
        return formatted

    def format_currency(self, amount: float, show_symbol: Optional[bool] = None) -> str:
        """
        Format a currency amount for display.

        Args:
            amount: The amount to format
            show_symbol: Override the default symbol display setting

        Returns:
            Formatted currency string
        """
        show_symbol = (
            show_symbol if show_symbol is not None else self.show_currency_symbol
        )
        formatted = self.format_number(abs(amount))
        sign = "-" if amount < 0 and formatted != "0" else ""

        if show_symbol:
            return f"{sign}{self.currency_symbol}{formatted}"
        return f"{sign}{formatted}"


DEFAULT_FORMATTER = CurrencyFormatter()


def format_currency(amount: float) -> str:
    """Format ``amount`` with the default formatter."""
    return DEFAULT_FORMATTER.format_currency(amount)
