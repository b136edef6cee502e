"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_OFFSET_PATTERN = re.compile(r"^(?:in\s+)?(\d+)\s+(day|week|month|year)s?(\s+ago)?$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "tomorrow", "next friday", "next month",
      "end of month", "in 2 weeks", "3 days ago", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "end of month": today + relativedelta(day=31),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    offset = _OFFSET_PATTERN.match(date_str)
    if offset:
        count, unit, ago = offset.groups()
        delta = relativedelta(**{f"{unit}s": int(count)})
        return today - delta if ago else today + delta

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)
        elif period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7
            if days_ago == 0:
                days_ago = 7
            return today - timedelta(days=days_ago)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)
        elif period == "week":
            return today + timedelta(days=(7 - today.weekday()))
        elif period in WEEKDAYS:
            days_ahead = (WEEKDAYS.index(period) - today.weekday()) % 7
            if days_ahead == 0:
                days_ahead = 7
            return today + timedelta(days=days_ahead)

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_weekday(value: str) -> int:
    """Parse a weekday name or number into 0=Sunday .. 6=Saturday.

    Args:
        value: "sunday", "Mon", "0".."6"

    Returns:
        Weekday number with Sunday as 0

    Raises:
        ValueError: If the value is not a weekday
    """
    value = value.strip().lower()
    if value.isdigit():
        number = int(value)
        if 0 <= number <= 6:
            return number
        raise ValueError(f"Day of week must be between 0 (Sunday) and 6 (Saturday), got {number}")

    for index, name in enumerate(WEEKDAYS):
        if len(value) >= 3 and name.startswith(value):
            return (index + 1) % 7
    raise ValueError(f"Could not parse day of week '{value}'")
