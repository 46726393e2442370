"""
Display formatters for query answers and summaries.
Deterministic string formatting for prices, changes, percentages and day counts.
"""

from datetime import date, datetime
from typing import Optional, Union


class FormatterError(Exception):
    """Raised when formatter input validation fails."""
    pass


def _check_numeric(value, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"{label} must be numeric, got {type(value)}")


def format_price(value: Optional[float]) -> str:
    """
    Format a price in dollars with two decimal places.

    Args:
        value: Dollar amount

    Returns:
        Formatted price string (e.g., "$1,234.50", "-$3.10")
    """
    if value is None:
        return "N/A"

    _check_numeric(value, "Price")

    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_signed_price(value: float) -> str:
    """
    Format a price change with an explicit sign.

    Returns:
        Formatted string (e.g., "+$1.25", "-$0.40")
    """
    _check_numeric(value, "Price change")

    sign = "-" if value < 0 else "+"
    return f"{sign}${abs(value):,.2f}"


def format_percentage(value: Optional[float], decimal_places: int = 1, signed: bool = False) -> str:
    """
    Format a value that is already in percent units.

    Args:
        value: Percentage (1.5 = 1.5%)
        decimal_places: Number of decimal places (default: 1)
        signed: Prefix non-negative values with "+"

    Returns:
        Formatted percentage string (e.g., "1.5%", "+1.5%")
    """
    if value is None:
        return "N/A"

    _check_numeric(value, "Percentage")

    text = f"{value:.{decimal_places}f}%"
    if signed and value >= 0:
        text = "+" + text
    return text


def format_days(count: Union[int, float]) -> str:
    """
    Format a day count, one decimal place when fractional.

    Returns:
        Formatted string (e.g., "1 day", "9 days", "4.5 days")
    """
    _check_numeric(count, "Day count")

    if float(count).is_integer():
        whole = int(count)
        return f"{whole} day" if whole == 1 else f"{whole} days"
    return f"{count:.1f} days"


def format_date(value: Union[str, date, datetime]) -> str:
    """
    Format a date as YYYY-MM-DD.

    Args:
        value: Date as ISO string, date, or datetime

    Returns:
        ISO date string
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            raise FormatterError(f"Invalid date string: {value}")
    raise FormatterError(f"Date must be string, date, or datetime, got {type(value)}")
