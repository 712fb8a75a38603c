"""Calendar helpers shared by the simulator, flow buckets and range presets."""

import calendar
from collections.abc import Iterator
from datetime import date, timedelta


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_start(day: date) -> date:
    """Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_start(day: date) -> date:
    return day.replace(day=1)


def year_start(day: date) -> date:
    return day.replace(month=1, day=1)


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping to the end of shorter months."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def add_years(day: date, years: int) -> date:
    return add_months(day, 12 * years)
