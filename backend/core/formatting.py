"""Display formatting for dates and money."""

from datetime import date, datetime


def format_date(value: date | datetime) -> str:
    """Format as e.g. "January 5, 2024"."""
    return f"{value:%B} {value.day}, {value.year}"


def format_currency(amount: float) -> str:
    """Format a USD amount as e.g. "$1,234.50" (negative: "-$3.00")."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
