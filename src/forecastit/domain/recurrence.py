"""Recurrence date calculation.

Turns a recurring rule definition and a date window into the ordered list of
dates on which the rule fires. Pure functions only: nothing here touches the
database or the clock unless a caller asks for ``dates_until``.
"""

import calendar
from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from forecastit.domain.entities import Frequency, RecurringRule

SEMIMONTHLY_SECOND_DAY = 15

# Step between occurrences for frequencies that stay in phase with the anchor.
PERIODS = {
    Frequency.BIWEEKLY: relativedelta(weeks=2),
    Frequency.QUARTERLY: relativedelta(months=3),
    Frequency.BIYEARLY: relativedelta(months=6),
    Frequency.YEARLY: relativedelta(years=1),
}


def safe_date(year: int, month: int, day: int) -> date:
    """Build a date, clamping ``day`` to the last day of the month.

    Day 31 in April gives April 30, day 30 in February gives the 28th or
    29th depending on the year.
    """
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def sunday_based_weekday(value: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return (value.weekday() + 1) % 7


def month_starts(start: date, end: date):
    """Yield the first day of every calendar month overlapping [start, end]."""
    current = start.replace(day=1)
    while current <= end:
        yield current
        current += relativedelta(months=1)


class RecurrenceCalculator:
    """Calculate occurrence dates for a recurring rule."""

    def __init__(self, rule: RecurringRule):
        """Initialize calculator.

        Args:
            rule: Recurring rule to calculate dates for
        """
        self.rule = rule

    def dates_until(self, end_date: date, today: Optional[date] = None) -> list[date]:
        """Dates from the later of anchor date and today through ``end_date``."""
        today = today or date.today()
        return self.dates_between(max(self.rule.anchor_date, today), end_date)

    def dates_between(self, start_date: date, end_date: date) -> list[date]:
        """Return occurrence dates inside [start_date, end_date].

        The result is ascending and free of duplicates. Nothing before the
        rule's anchor date is ever returned.

        Args:
            start_date: First date of the window (inclusive)
            end_date: Last date of the window (inclusive)

        Returns:
            Sorted list of dates
        """
        if end_date < start_date:
            return []

        frequency = self.rule.frequency
        effective_start = max(start_date, self.rule.anchor_date)

        if frequency == Frequency.DAILY:
            dates = self._daily(effective_start, end_date)
        elif frequency == Frequency.WEEKLY:
            dates = self._weekly(effective_start, end_date)
        elif frequency == Frequency.SEMIMONTHLY:
            dates = self._semimonthly(effective_start, end_date)
        elif frequency == Frequency.MONTHLY:
            dates = self._monthly(effective_start, end_date)
        elif frequency == Frequency.MONTHLY_LAST:
            dates = self._monthly_last(effective_start, end_date)
        elif frequency in PERIODS:
            dates = self._anchored(PERIODS[frequency], effective_start, end_date)
        else:
            raise ValueError(f"Unknown frequency: {frequency!r}")

        in_window = {d for d in dates if effective_start <= d <= end_date}
        return sorted(in_window)

    def _daily(self, start: date, end: date) -> list[date]:
        return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]

    def _weekly(self, start: date, end: date) -> list[date]:
        anchor = self.rule.anchor_date
        target = self.rule.day_of_week
        if target is None:
            target = sunday_based_weekday(anchor)

        current = start + timedelta(days=(target - sunday_based_weekday(start)) % 7)
        if anchor > start and sunday_based_weekday(anchor) == target:
            current = anchor

        dates = []
        while current <= end:
            dates.append(current)
            current += timedelta(weeks=1)
        return dates

    def _semimonthly(self, start: date, end: date) -> list[date]:
        first_day = self.rule.day_of_month or 1
        dates = []
        for month in month_starts(start, end):
            pair = sorted(
                {
                    safe_date(month.year, month.month, first_day),
                    safe_date(month.year, month.month, SEMIMONTHLY_SECOND_DAY),
                }
            )
            dates.extend(pair)
        return dates

    def _monthly(self, start: date, end: date) -> list[date]:
        target_day = self.rule.day_of_month or self.rule.anchor_date.day
        return [safe_date(m.year, m.month, target_day) for m in month_starts(start, end)]

    def _monthly_last(self, start: date, end: date) -> list[date]:
        return [safe_date(m.year, m.month, 31) for m in month_starts(start, end)]

    def _anchored(self, period: relativedelta, start: date, end: date) -> list[date]:
        """Occurrences found by adding the period to the anchor again and again.

        Each step starts from the previous occurrence, so a clamped day sticks:
        a Jan 31 quarterly rule runs Apr 30, Jul 30, Oct 30.
        """
        current = self.rule.anchor_date
        if period.weeks:
            # Day periods never clamp; jump straight to the first one at or after start.
            days = period.weeks * 7
            skipped = max(0, -(-(start - current).days // days))
            current += timedelta(days=skipped * days)

        while current < start:
            current += period

        dates = []
        while current <= end:
            dates.append(current)
            current += period
        return dates
