"""Date parsing utilities."""

from datetime import date
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: Optional[str]) -> date:
    """Parse a date or timestamp string into a date object.

    Sources print dates in different shapes ("2024/01/15",
    "2024-01-15 10:31:02"); only the calendar date is kept.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not date_str.strip():
        raise ValueError("Empty date string")

    try:
        dt = date_parser.parse(date_str.strip(), yearfirst=True)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def recent_months(count: int, today: Optional[date] = None) -> list[date]:
    """Return the first day of the current month and the ``count - 1`` before it.

    The most recent month comes first.
    """
    if today is None:
        today = date.today()
    first = today.replace(day=1)
    return [first - relativedelta(months=i) for i in range(count)]
