"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIOD_PRESETS = (
    "current-month",
    "last-month",
    "current-quarter",
    "current-year",
    "last-year",
    "all",
)

_MONTH_TOKEN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow"

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
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # ISO dates first so "2024-01-05" is never read day-first
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    # Peruvian documents write dates day-first (15/01/2024)
    try:
        dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def _month_bounds(day: date) -> tuple[date, date]:
    start = day.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def get_period_range(
    period: Optional[str], today: Optional[date] = None
) -> tuple[Optional[date], Optional[date]]:
    """Get start and end dates for a report period.

    Args:
        period: Period preset (current-month, last-month, current-quarter,
            current-year, last-year, all) or an exact month token "YYYY-MM".
            None is treated as "all".
        today: Reference date, defaults to date.today()

    Returns:
        Tuple of (start_date, end_date). Both are None for "all", meaning no
        date bound at all.

    Raises:
        ValueError: If the period string is not recognized
    """
    if period is None:
        return (None, None)

    period = period.strip().lower()
    today = today or date.today()

    match = _MONTH_TOKEN.match(period)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month in period '{period}'")
        return _month_bounds(date(year, month, 1))

    if period == "all":
        return (None, None)

    elif period == "current-month":
        return _month_bounds(today)

    elif period == "last-month":
        return _month_bounds(today - relativedelta(months=1))

    elif period == "current-quarter":
        first_month = 3 * ((today.month - 1) // 3) + 1
        start_date = today.replace(month=first_month, day=1)
        end_date = start_date + relativedelta(months=3) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "current-year":
        return (date(today.year, 1, 1), date(today.year, 12, 31))

    elif period == "last-year":
        return (date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: "
            f"{', '.join(PERIOD_PRESETS)} or YYYY-MM"
        )
