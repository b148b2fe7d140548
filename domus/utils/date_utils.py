"""Calendar month helpers"""

import re
from datetime import date, datetime

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def month_key(value: date | datetime) -> str:
    """Year-month of a date or datetime as "YYYY-MM" """
    return f"{value.year:04d}-{value.month:02d}"


def is_valid_month(value: str) -> bool:
    """Check a "YYYY-MM" month string"""
    return bool(MONTH_PATTERN.match(value))


def months_between(earlier: date | datetime, later: date | datetime) -> int:
    """
    Whole calendar months from earlier to later, ignoring the day of month.

    Example:
        2024-01-31 -> 2024-02-01 = 1
        2024-03-15 -> 2024-03-31 = 0
    """
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for non-negative values"""
    return int(value + 0.5)
