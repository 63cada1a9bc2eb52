"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = ("today", "this-week", "this-month", "last-month", "this-year", "last-year")

_RELATIVE_DAYS = re.compile(r"^(?:(\d+) days? ago|in (\d+) days?)$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Day-first dates as written locally: "15/01/2024", "15 Jan 2024"
    - "today", "yesterday", "tomorrow"
    - "3 days ago", "in 7 days" (handy for due dates)
    - "last monday", "next friday"
    - "this month", "last month", "next month" (first day of that month)

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    if not text:
        raise ValueError("Empty date string")
    today = today or date.today()

    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
    }
    if text in fixed:
        return fixed[text]

    match = _RELATIVE_DAYS.match(text)
    if match:
        ago, ahead = match.groups()
        if ago is not None:
            return today - timedelta(days=int(ago))
        return today + timedelta(days=int(ahead))

    direction, _, day_name = text.partition(" ")
    if direction in ("last", "next") and day_name in WEEKDAYS:
        target = WEEKDAYS.index(day_name)
        if direction == "last":
            return today - timedelta(days=(today.weekday() - target) % 7 or 7)
        return today + timedelta(days=(target - today.weekday()) % 7 or 7)

    # ISO dates are unambiguous; everything else is read day-first
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named reporting period.

    Args:
        period: One of PERIODS
        today: Reference date (defaults to date.today())

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "today":
        return (today, today)
    if period == "this-week":
        return (today - timedelta(days=today.weekday()), today)
    if period == "this-month":
        return (today.replace(day=1), today)
    if period == "last-month":
        first_of_this_month = today.replace(day=1)
        return (first_of_this_month - relativedelta(months=1), first_of_this_month - timedelta(days=1))
    if period == "this-year":
        return (today.replace(month=1, day=1), today)
    if period == "last-year":
        first_of_this_year = today.replace(month=1, day=1)
        return (first_of_this_year - relativedelta(years=1), first_of_this_year - timedelta(days=1))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
