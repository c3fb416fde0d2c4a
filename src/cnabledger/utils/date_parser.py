"""Date parsing utilities."""

from datetime import date, time, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_compact_date(value: str) -> date:
    """Parse a fixed-width ``YYYYMMDD`` field.

    Args:
        value: Exactly eight ASCII digits

    Returns:
        Date object

    Raises:
        ValueError: If the field is not eight digits or not a calendar date
    """
    if len(value) != 8 or not value.isascii() or not value.isdigit():
        raise ValueError(f"Expected YYYYMMDD, got '{value}'")
    return date(int(value[0:4]), int(value[4:6]), int(value[6:8]))


def parse_compact_time(value: str) -> time:
    """Parse a fixed-width ``HHMMSS`` field.

    Raises:
        ValueError: If the field is not six digits or not a valid clock time
    """
    if len(value) != 6 or not value.isascii() or not value.isdigit():
        raise ValueError(f"Expected HHMMSS, got '{value}'")
    return time(int(value[0:2]), int(value[2:4]), int(value[4:6]))


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date string into a date object.

    Used for CLI filters. Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", "20240115", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, this-year, last-month, last-year

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year"
        )
