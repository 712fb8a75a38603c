"""
Portfolio Analytics - Entry points for performance comparison and flow reports.

Usage:
    analytics = PortfolioAnalytics()
    result = await analytics.calculate_comparison_history(events, '^GSPC', start_date, 'CAD')
    flows = await analytics.calculate_flows(events, 'CAD')
"""

import logging
from datetime import date, timedelta
from typing import Optional

from navledger.benchmark import normalize, total_return
from navledger.flows import aggregate
from navledger.market_data import HistoryProvider, YahooHistoryProvider, load_market_data
from navledger.models import ComparisonResult, DailyPerformanceRecord, FlowReport, LedgerEvent, Performer, SeriesMap
from navledger.settings import Settings
from navledger.simulator import NavSimulator
from navledger.utils.dates import add_years

logger = logging.getLogger(__name__)


def portfolio_return(records: list[DailyPerformanceRecord]) -> float:
    """Percent NAV change from the first invested day to the last day."""
    if not records:
        return 0.0
    first = next((r for r in records if r.market_value > 0), records[0])
    last = records[-1]
    if not first.nav:
        return 0.0
    return (last.nav - first.nav) / first.nav * 100


def rank_performers(
    prices: SeriesMap,
    start_str: str,
    count: int = 5,
    exclude: Optional[str] = None,
) -> tuple[list[Performer], list[Performer]]:
    """
    Rank symbols by price change between their first and last quote since `start_str`.

    Returns:
        (top `count` best first, bottom `count` worst first)
    """
    performers = []
    for symbol, series in prices.items():
        if symbol == exclude:
            continue
        dates = sorted(d for d in series if d >= start_str)
        if len(dates) < 2:
            continue
        start_price = series[dates[0]]
        if start_price > 0:
            change = (series[dates[-1]] - start_price) / start_price * 100
            performers.append(Performer(symbol=symbol, return_pct=change))

    performers.sort(key=lambda p: p.return_pct, reverse=True)
    top = performers[:count]
    bottom = list(reversed(performers[-count:])) if count > 0 else []
    return top, bottom


class PortfolioAnalytics:
    """Fetches market data and runs the replay engine for a ledger."""

    def __init__(self, provider: Optional[HistoryProvider] = None, settings: Optional[Settings] = None):
        """
        Initialize with optional dependency injection.

        Args:
            provider: History source (Yahoo Finance if None)
            settings: Settings instance (uses the shared one if None)
        """
        self._provider = provider or YahooHistoryProvider()
        self._settings = settings or Settings()

    async def calculate_comparison_history(
        self,
        events: list[LedgerEvent],
        benchmark_symbol: Optional[str] = None,
        start_date: Optional[date] = None,
        target_currency: Optional[str] = None,
        end_date: Optional[date] = None,
    ) -> ComparisonResult:
        """
        Replay the ledger day by day and compare it with a benchmark index.

        Args:
            events: Ledger events in date order
            benchmark_symbol: Index symbol (settings default if None)
            start_date: First day of the window (one year ago if None)
            target_currency: Output currency (settings default if None)
            end_date: Last day of the window (today if None)

        Returns:
            ComparisonResult with one portfolio and one benchmark record per day
        """
        benchmark_symbol = benchmark_symbol or await self._settings.get("benchmark_symbol")
        target_currency = target_currency or await self._settings.get("target_currency")
        end_date = end_date or date.today()
        start_date = start_date or add_years(end_date, -1)

        lookback_days = await self._settings.get("fetch_lookback_days")
        extra_years = await self._settings.get("benchmark_extra_lookback_years")
        first_activity = min([start_date] + [e.date for e in events])
        from_date = first_activity - timedelta(days=lookback_days)

        symbols = sorted({e.symbol for e in events})
        currencies = sorted({e.asset_currency for e in events})
        logger.info(
            f"Comparison {start_date}..{end_date} in {target_currency}: "
            f"{len(events)} events, {len(symbols)} symbols, benchmark {benchmark_symbol}"
        )

        data = await load_market_data(
            self._provider,
            symbols,
            currencies,
            target_currency,
            from_date,
            benchmark_symbol=benchmark_symbol,
            benchmark_from=add_years(from_date, -extra_years),
            timeout=await self._settings.get("fetch_timeout_seconds"),
            concurrency=await self._settings.get("fetch_concurrency"),
        )

        simulator = NavSimulator(events, data.prices, data.fx, target_currency)
        portfolio = simulator.run(start_date, end_date)
        benchmark = normalize(data.benchmark, [r.date for r in portfolio])

        top, bottom = rank_performers(
            data.prices,
            start_date.isoformat(),
            count=await self._settings.get("performers_count"),
            exclude=benchmark_symbol,
        )

        return ComparisonResult(
            portfolio=portfolio,
            benchmark=benchmark,
            portfolio_return=portfolio_return(portfolio),
            benchmark_return=total_return(benchmark),
            top_performers=top,
            bottom_performers=bottom,
        )

    async def calculate_flows(
        self,
        events: list[LedgerEvent],
        target_currency: Optional[str] = None,
        today: Optional[date] = None,
    ) -> FlowReport:
        """
        Bucket contributions, withdrawals and dividends by week, month and year.

        Only FX history is fetched; asset prices are not needed.
        """
        target_currency = target_currency or await self._settings.get("target_currency")
        today = today or date.today()
        first_activity = min(e.date for e in events) if events else add_years(today, -1)
        from_date = first_activity - timedelta(days=await self._settings.get("fetch_lookback_days"))

        data = await load_market_data(
            self._provider,
            [],
            [e.asset_currency for e in events],
            target_currency,
            from_date,
            timeout=await self._settings.get("fetch_timeout_seconds"),
            concurrency=await self._settings.get("fetch_concurrency"),
        )
        return aggregate(events, target_currency, data.fx, today=today)
