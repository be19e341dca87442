"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("week", "month", "all")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "in 3 days",
      "3 days ago", "next month"

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
        "tomorrow": today + timedelta(days=1),
        "next week": today + timedelta(days=7),
        "next month": today + relativedelta(months=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # "in N days" / "N days ago"
    parts = date_str.split()
    if len(parts) == 3 and parts[0] == "in" and parts[2] in ("day", "days") and parts[1].isdigit():
        return today + timedelta(days=int(parts[1]))
    if len(parts) == 3 and parts[2] == "ago" and parts[1] in ("day", "days") and parts[0].isdigit():
        return today - timedelta(days=int(parts[0]))

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a stored ``YYYY-MM-DD`` value, tolerating empty strings and timestamps."""
    if not value:
        return None
    return date.fromisoformat(str(value)[:10])


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse a stored ISO timestamp (a trailing ``Z`` is accepted)."""
    if not value:
        return datetime.now()
    return date_parser.isoparse(str(value))


def get_date_range(period: str, today: Optional[date] = None) -> tuple[Optional[date], Optional[date]]:
    """Get start and end dates for a summary period.

    Args:
        period: One of "week" (the last seven days onwards), "month" (the
            current calendar month) or "all"
        today: Reference day, defaults to the current date

    Returns:
        Tuple of (start_date, end_date); None means unbounded

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "week":
        return (today - timedelta(days=7), None)

    elif period == "month":
        start_date = today.replace(day=1)
        # Last day of the month (day before first day of next month)
        end_date = start_date + relativedelta(months=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "all":
        return (None, None)

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
