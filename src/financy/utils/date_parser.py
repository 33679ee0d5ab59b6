"""Date parsing and calendar period utilities."""

import calendar
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> datetime:
    """Parse a date string into a datetime at midnight.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "this month", "last month", etc.

    Day-first numeric dates ("15/01/2024") are read the Brazilian way.

    Args:
        date_str: Date string in various formats

    Returns:
        Datetime object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this week": today - timedelta(days=today.weekday()),
        "this month": today.replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last week": today - timedelta(days=today.weekday() + 7),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
    }

    if date_str in relative_dates:
        return to_datetime(relative_dates[date_str])

    try:
        if "/" in date_str:
            return date_parser.parse(date_str, dayfirst=True)
        return date_parser.parse(date_str)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def to_datetime(value: date) -> datetime:
    """Promote a date to a naive datetime at midnight; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def add_months(value: datetime, months: int) -> datetime:
    """Calendar month addition, clamping the day at month end (Jan 31 + 1 -> Feb 29/28)."""
    return value + relativedelta(months=months)


def month_range(month: int, year: int) -> tuple[date, date]:
    """Get the first and last day of a calendar month.

    Raises:
        ValueError: If month is outside 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def get_period_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get the start and end dates of the period enclosing ``today``.

    Args:
        period: One of day, week, month, year
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date), both inclusive. Weeks run Monday to Sunday.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "day":
        return (today, today)

    elif period == "week":
        start_date = today - timedelta(days=today.weekday())
        end_date = start_date + timedelta(days=6)
        return (start_date, end_date)

    elif period == "month":
        return month_range(today.month, today.year)

    elif period == "year":
        return (date(today.year, 1, 1), date(today.year, 12, 31))

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: day, week, month, year")
