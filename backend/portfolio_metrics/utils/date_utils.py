# backend/portfolio_metrics/utils/date_utils.py
"""
Date utility functions for the portfolio metrics engine.

Every calculator works on datetime.date values. This module is the single
place where loosely-typed inputs (ISO strings, datetimes) become dates, and
where day/month offsets are computed, so the day-count conventions stay
consistent between XIRR, accrual and holding-period logic.

Usage:
    from portfolio_metrics.utils.date_utils import parse_date, days_between

    d = parse_date("2024-01-05")
    days = days_between(d, date(2025, 1, 5))  # 366
"""

from datetime import date, datetime
from typing import Any

from portfolio_metrics.services.exceptions import InvalidDateError


def parse_date(value: Any, field: str | None = None) -> date:
    """
    Coerce a date-like value to a date.

    Accepts date, datetime (time part dropped) and ISO strings
    ("2024-01-05" or "2024-01-05T10:30:00"). Anything else fails fast.

    Args:
        value: Raw date input
        field: Name of the input, used in the error message

    Returns:
        The parsed date

    Raises:
        InvalidDateError: If the value is None, empty or not a valid date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDateError(value, field=field)
        try:
            if "T" in text or " " in text:
                return datetime.fromisoformat(text).date()
            return date.fromisoformat(text)
        except ValueError as e:
            raise InvalidDateError(value, field=field) from e

    raise InvalidDateError(value, field=field)


def days_between(start: date, end: date) -> int:
    """
    Whole calendar days from start to end (negative if end is earlier).

    Example:
        >>> days_between(date(2023, 1, 1), date(2024, 1, 1))
        365
    """
    return (end - start).days
