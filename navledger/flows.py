"""
Flows - Buckets ledger cash flows into week, month and year totals.

Independent of the NAV replay: one pass over the events, each converted at
its own day's FX rate (carry-forward, parity if never quoted).

Usage:
    report = aggregate(events, 'CAD', fx_history)
    report.contributions['month']  # list[FlowBucket]
"""

import logging
from collections.abc import Callable
from datetime import date
from typing import Optional

from navledger.models import DividendBucket, EventType, FlowBucket, FlowReport, LedgerEvent, SeriesMap
from navledger.resolver import quoted_dates, rate_as_of
from navledger.utils.dates import add_months, add_years, month_start, week_start, year_start

logger = logging.getLogger(__name__)


def _fill_gaps(
    buckets: dict[str, FlowBucket | DividendBucket],
    first: date,
    last: date,
    advance: Callable[[date, int], date],
    factory: Callable[[str], FlowBucket | DividendBucket],
) -> None:
    current = first
    while current <= last:
        key = current.isoformat()
        if key not in buckets:
            buckets[key] = factory(key)
        current = advance(current, 1)


def _sorted(buckets: dict) -> list:
    return [buckets[k] for k in sorted(buckets)]


def aggregate(
    events: list[LedgerEvent],
    target_currency: str,
    fx: Optional[SeriesMap] = None,
    today: Optional[date] = None,
) -> FlowReport:
    """
    Sum contributions, withdrawals and dividends per period.

    Args:
        events: Ledger events in date order
        target_currency: Currency of every output amount
        fx: currency -> (date -> rate into target currency)
        today: Last period to gap-fill month/year buckets to (defaults to today)

    Returns:
        FlowReport with ascending buckets keyed by period start date
    """
    fx = fx or {}
    fx_dates = quoted_dates(fx)
    today = today or date.today()
    estimated = 0

    weeks: dict[str, FlowBucket] = {}
    months: dict[str, FlowBucket] = {}
    years: dict[str, FlowBucket] = {}
    div_months: dict[str, DividendBucket] = {}
    div_years: dict[str, DividendBucket] = {}

    for event in events:
        rate, is_estimated = rate_as_of(fx, event.asset_currency, target_currency, event.date_str, fx_dates)
        estimated += is_estimated

        w_key = week_start(event.date).isoformat()
        m_key = month_start(event.date).isoformat()
        y_key = year_start(event.date).isoformat()

        if event.event_type is EventType.DIVIDEND:
            amount = event.quantity * event.price * rate
            for buckets, key in ((div_months, m_key), (div_years, y_key)):
                buckets.setdefault(key, DividendBucket(date=key)).amount += amount
            continue

        if event.event_type is EventType.SPLIT:
            continue

        amount = (abs(event.quantity) * event.price + event.fee) * rate
        for buckets, key in ((weeks, w_key), (months, m_key), (years, y_key)):
            bucket = buckets.setdefault(key, FlowBucket(date=key))
            if event.event_type is EventType.ADD:
                bucket.inflow += amount
            else:
                bucket.outflow += abs(amount)

    if estimated:
        logger.warning(f"{estimated} flows converted at assumed FX parity (no FX history)")

    first = min(e.date for e in events) if events else add_years(today, -1)
    _fill_gaps(months, month_start(first), today, add_months, lambda k: FlowBucket(date=k))
    _fill_gaps(div_months, month_start(first), today, add_months, lambda k: DividendBucket(date=k))
    _fill_gaps(years, year_start(first), today, add_years, lambda k: FlowBucket(date=k))
    _fill_gaps(div_years, year_start(first), today, add_years, lambda k: DividendBucket(date=k))

    return FlowReport(
        contributions={"week": _sorted(weeks), "month": _sorted(months), "year": _sorted(years)},
        dividends={"month": _sorted(div_months), "year": _sorted(div_years)},
    )
