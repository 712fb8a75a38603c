"""
Time range presets for performance comparison windows.

Usage:
    start = start_date_for_range('YTD')
"""

from datetime import date
from typing import Optional

from navledger.utils.dates import add_months, add_years, year_start

DEFAULT_RANGE = "1Y"

# ALL is capped at 20 years of history
TIME_RANGES = {
    "1M": lambda today: add_months(today, -1),
    "6M": lambda today: add_months(today, -6),
    "YTD": year_start,
    "1Y": lambda today: add_years(today, -1),
    "5Y": lambda today: add_years(today, -5),
    "ALL": lambda today: add_years(today, -20),
}


def start_date_for_range(time_range: Optional[str] = None, today: Optional[date] = None) -> date:
    """
    Get the first day of a comparison window.

    Args:
        time_range: One of TIME_RANGES (case-insensitive); None means DEFAULT_RANGE
        today: Reference date (defaults to today)

    Raises:
        ValueError: If the preset is unknown
    """
    today = today or date.today()
    key = (time_range or DEFAULT_RANGE).upper()
    if key not in TIME_RANGES:
        raise ValueError(f"Unknown time range: {time_range!r} (expected one of {', '.join(TIME_RANGES)})")
    return TIME_RANGES[key](today)
