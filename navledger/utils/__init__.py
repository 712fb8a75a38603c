"""
navledger utilities package.

Contains calendar helpers shared across the engine.
"""

from navledger.utils.dates import add_months, add_years, iter_days, month_start, week_start, year_start

__all__ = [
    "add_months",
    "add_years",
    "iter_days",
    "month_start",
    "week_start",
    "year_start",
]
