"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from forecastit.utils.date_parser import parse_date, parse_weekday

# A Friday
TODAY = date(2024, 3, 15)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today' without a reference date."""
    assert parse_date("today") == date.today()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", TODAY),
        ("Yesterday", TODAY - timedelta(days=1)),
        ("tomorrow", TODAY + timedelta(days=1)),
        ("end of month", date(2024, 3, 31)),
        ("next month", date(2024, 4, 1)),
        ("last month", date(2024, 2, 1)),
        ("this month", date(2024, 3, 1)),
        ("next year", date(2025, 1, 1)),
        ("this week", date(2024, 3, 11)),
        ("next week", date(2024, 3, 18)),
        ("last week", date(2024, 3, 4)),
        ("next monday", date(2024, 3, 18)),
        ("next friday", date(2024, 3, 22)),
        ("last friday", date(2024, 3, 8)),
        ("last wednesday", date(2024, 3, 13)),
    ],
)
def test_parse_relative_dates(text, expected):
    """Test relative dates against a fixed reference date."""
    assert parse_date(text, today=TODAY) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("in 3 days", date(2024, 3, 18)),
        ("2 weeks", date(2024, 3, 29)),
        ("in 1 month", date(2024, 4, 15)),
        ("10 days ago", date(2024, 3, 5)),
        ("1 year ago", date(2023, 3, 15)),
    ],
)
def test_parse_offsets(text, expected):
    """Test "in N units" and "N units ago"."""
    assert parse_date(text, today=TODAY) == expected


def test_parse_invalid_date():
    """Test that unparseable dates raise ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


@pytest.mark.parametrize(
    "text, expected",
    [("sunday", 0), ("Mon", 1), ("fri", 5), ("Saturday", 6), ("0", 0), ("6", 6)],
)
def test_parse_weekday(text, expected):
    """Weekdays are numbered from Sunday = 0."""
    assert parse_weekday(text) == expected


@pytest.mark.parametrize("text", ["7", "mo", "someday"])
def test_parse_weekday_invalid(text):
    with pytest.raises(ValueError):
        parse_weekday(text)
