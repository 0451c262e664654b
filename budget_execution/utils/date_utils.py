"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import Tuple

MONDAY = calendar.MONDAY
SUNDAY = calendar.SUNDAY


def days_in_month(year: int, month: int) -> int:
    """Number of days in a calendar month (month is 1-12)"""
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(day: int, year: int, month: int) -> int:
    """Clamp a preferred day-of-month to the last valid day (e.g. 31 -> 28 in Feb 2023)"""
    return min(day, days_in_month(year, month))


def week_bounds(day: date, week_starts_on: int = MONDAY) -> Tuple[date, date]:
    """Return (first, last) day of the week containing `day`"""
    offset = (day.weekday() - week_starts_on) % 7
    start = day - timedelta(days=offset)
    return start, start + timedelta(days=6)


def week_number(day: date, week_starts_on: int = MONDAY) -> int:
    """
    Week-of-year for `day` under an explicit week-start convention.

    Monday-start uses ISO 8601 numbering. Sunday-start counts the week
    containing January 1st as week 1.
    """
    if week_starts_on == MONDAY:
        return day.isocalendar()[1]

    first_week_start, _ = week_bounds(date(day.year, 1, 1), week_starts_on)
    current_week_start, _ = week_bounds(day, week_starts_on)
    return (current_week_start - first_week_start).days // 7 + 1


def sunday_first_weekday(day: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6"""
    return day.isoweekday() % 7
