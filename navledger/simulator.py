"""
NAV Simulator - Day-by-day replay of a ledger into a unitized performance index.

Each calendar day is a pure transition over an explicit accumulator:

    state, record = step(state, '2024-01-02', events_on_that_day, context)

`NavSimulator.run()` folds `step` over every day from the start date to today.

Usage:
    simulator = NavSimulator(events, prices, fx, target_currency='CAD')
    records = simulator.run(start_date)
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from navledger.holdings import apply_events, replay_until, split_events
from navledger.models import DailyPerformanceRecord, EventType, HoldingsState, LedgerEvent, SeriesMap
from navledger.resolver import Cursor, resolve, resolve_fx
from navledger.utils.dates import iter_days
from navledger.valuation import ValuationContext, value_holdings

logger = logging.getLogger(__name__)

NAV_SEED = 100.0
# Previous market values at or below this are treated as "nothing invested"
MIN_MARKET_VALUE = 0.01


@dataclass(frozen=True)
class SimulationState:
    """Everything carried from one simulated day to the next."""

    holdings: HoldingsState = field(default_factory=dict)
    units: float = 0.0
    nav: float = NAV_SEED
    last_market_value: float = 0.0
    price_cursor: Cursor = field(default_factory=Cursor)
    fx_cursor: Cursor = field(default_factory=Cursor)


@dataclass
class DayFlows:
    """Cash movements of one day, in target currency."""

    net_flow: float = 0.0
    dividends: float = 0.0
    # value of already-held shares first priced by today's trade
    discovery_inflow: float = 0.0
    is_estimated: bool = False


def _book_flows(
    events: list[LedgerEvent],
    held: HoldingsState,
    date_str: str,
    context: ValuationContext,
    price_cursor: Cursor,
    fx_cursor: Cursor,
) -> DayFlows:
    flows = DayFlows()

    for event in events:
        rate, _, estimated = resolve_fx(
            context.fx, fx_cursor, event.asset_currency, context.target_currency, date_str
        )
        flows.is_estimated = flows.is_estimated or estimated

        if event.event_type is EventType.ADD:
            flows.net_flow += (event.quantity * event.price + event.fee) * rate
        elif event.event_type is EventType.REMOVE:
            flows.net_flow -= (abs(event.quantity) * event.price - event.fee) * rate
        else:
            if event.event_type is EventType.DIVIDEND:
                flows.dividends += event.quantity * event.price * rate
            continue

        # Prime the price cursor for a symbol traded today so that tomorrow's
        # valuation does not mistake it for a newly priced holding. The trade
        # price stands in only when the symbol has no quote yet.
        resolve(context.prices, price_cursor, event.symbol, date_str)
        if not price_cursor.has(event.symbol) and event.price > 0:
            price_cursor.update(event.symbol, event.price)
            # Shares held before the trade were unvalued until now.
            held_before = held.get(event.symbol, 0.0)
            if held_before > 0:
                flows.discovery_inflow += held_before * event.price * rate

    return flows


def step(
    state: SimulationState,
    date_str: str,
    events: list[LedgerEvent],
    context: ValuationContext,
) -> tuple[SimulationState, DailyPerformanceRecord]:
    """
    Advance the simulation by one calendar day.

    Args:
        state: State at the end of the previous day (not modified)
        date_str: ISO date being simulated
        events: Ledger events dated `date_str`, applied as one batch
        context: Market data for the run

    Returns:
        (state at the end of the day, the day's performance record)
    """
    price_cursor = state.price_cursor.copy()
    fx_cursor = state.fx_cursor.copy()

    # Splits first: the day's quotes are already split-adjusted.
    splits, others = split_events(events)
    holdings = apply_events(state.holdings, splits)

    passive = value_holdings(holdings, date_str, context, price_cursor, fx_cursor)
    flows = _book_flows(others, holdings, date_str, context, price_cursor, fx_cursor)
    holdings = apply_events(holdings, others)

    nav = state.nav
    if state.last_market_value > MIN_MARKET_VALUE:
        grown_value = passive.market_value - passive.discovery_inflow + flows.dividends
        nav *= grown_value / state.last_market_value

    discovery_inflow = passive.discovery_inflow + flows.discovery_inflow
    effective_flow = flows.net_flow + discovery_inflow
    final_market_value = passive.market_value + flows.net_flow + flows.discovery_inflow

    units = state.units
    if nav > 0:
        if state.last_market_value <= MIN_MARKET_VALUE:
            # Nothing (or an oversold position) was valued yesterday: mint
            # units for whatever is valued now.
            units = final_market_value / nav
        else:
            units += effective_flow / nav
            # Dividend cash leaves the holdings, so it redeems units at today's NAV.
            units -= flows.dividends / nav

    record = DailyPerformanceRecord(
        date=date_str,
        market_value=final_market_value,
        nav=nav,
        net_flow=effective_flow,
        units=units,
        dividend=flows.dividends,
        discovery_flow=discovery_inflow,
        is_estimated=passive.is_estimated or flows.is_estimated,
    )

    new_state = replace(
        state,
        holdings=holdings,
        units=units,
        nav=nav,
        last_market_value=final_market_value,
        price_cursor=price_cursor,
        fx_cursor=fx_cursor,
    )
    return new_state, record


class NavSimulator:
    """Replays a date-ordered ledger against price and FX history."""

    def __init__(
        self,
        events: list[LedgerEvent],
        prices: SeriesMap,
        fx: SeriesMap,
        target_currency: str,
        symbol_currency: Optional[dict[str, str]] = None,
    ):
        """
        Args:
            events: Ledger events in non-decreasing date order (not validated)
            prices: symbol -> (date -> native price)
            fx: currency -> (date -> rate into target currency)
            target_currency: Currency of every output amount
            symbol_currency: symbol -> native currency (derived from events if None)
        """
        self._events = events
        if symbol_currency is None:
            symbol_currency = {e.symbol: e.asset_currency for e in events}
        self._context = ValuationContext(
            prices=prices,
            fx=fx,
            symbol_currency=symbol_currency,
            target_currency=target_currency,
        )
        self._by_date: dict[str, list[LedgerEvent]] = defaultdict(list)
        for event in events:
            self._by_date[event.date_str].append(event)

    def initial_state(self, start_date: date) -> SimulationState:
        """Build the state in effect at the opening of `start_date`."""
        start_str = start_date.isoformat()
        holdings = replay_until(self._events, start_date)

        price_cursor = Cursor()
        price_cursor.seed(self._context.prices, start_str)
        fx_cursor = Cursor()
        fx_cursor.seed_nearest(self._context.fx, start_str)

        opening = value_holdings(holdings, start_str, self._context, price_cursor, fx_cursor)
        units = opening.market_value / NAV_SEED if opening.market_value > 0 else 0.0

        logger.debug(
            f"Opening state {start_str}: {len(holdings)} symbols, value={opening.market_value:.2f}, units={units:.4f}"
        )
        return SimulationState(
            holdings=holdings,
            units=units,
            nav=NAV_SEED,
            last_market_value=opening.market_value,
            price_cursor=price_cursor,
            fx_cursor=fx_cursor,
        )

    def run(self, start_date: date, end_date: Optional[date] = None) -> list[DailyPerformanceRecord]:
        """
        Simulate every calendar day from `start_date` to `end_date` inclusive.

        Args:
            start_date: First simulated day
            end_date: Last simulated day (defaults to today)

        Returns:
            One record per calendar day, in date order
        """
        end_date = end_date or date.today()
        state = self.initial_state(start_date)
        records: list[DailyPerformanceRecord] = []

        for i, day in enumerate(iter_days(start_date, end_date)):
            date_str = day.isoformat()
            if i % 365 == 0:
                logger.debug(f"Simulating day {i + 1}: {date_str}")
            state, record = step(state, date_str, self._by_date.get(date_str, []), self._context)
            records.append(record)

        estimated_days = sum(1 for r in records if r.is_estimated)
        if estimated_days:
            logger.warning(f"{estimated_days} days valued with assumed FX parity (no FX history)")

        if records:
            last = records[-1]
            logger.info(
                f"Simulated {len(records)} days to {last.date}: value={last.market_value:.2f}, nav={last.nav:.4f}"
            )
        return records
