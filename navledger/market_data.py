"""
Market Data - Concurrent fetch of price, FX and benchmark history.

All series are fetched before the replay starts: one fan-out, one barrier.
A failed fetch degrades to an empty series; only the overall timeout raises.

Usage:
    provider = YahooHistoryProvider()
    data = await load_market_data(provider, ['AAPL', 'XIC.TO'], ['USD'], 'CAD', from_date,
                                  benchmark_symbol='^GSPC', benchmark_from=bench_from)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Protocol, runtime_checkable

import pandas as pd
import yfinance as yf

from navledger.models import SeriesMap

logger = logging.getLogger(__name__)


@runtime_checkable
class HistoryProvider(Protocol):
    """Source of sparse daily closes: ISO date -> price."""

    async def get_daily_history(self, symbol: str, from_date: date) -> dict[str, float]:
        ...


class StaticHistoryProvider:
    """In-memory provider over pre-loaded series (tests, offline replays)."""

    def __init__(self, series: Optional[SeriesMap] = None):
        self._series: SeriesMap = {k: dict(v) for k, v in (series or {}).items()}

    async def get_daily_history(self, symbol: str, from_date: date) -> dict[str, float]:
        start = from_date.isoformat()
        return {d: v for d, v in self._series.get(symbol, {}).items() if d >= start}


class YahooHistoryProvider:
    """Daily closes from Yahoo Finance via yfinance."""

    def __init__(self, use_adj_close: bool = False):
        self._use_adj_close = use_adj_close

    def _download(self, symbol: str, from_date: date) -> dict[str, float]:
        raw = yf.download(
            symbol,
            start=from_date.isoformat(),
            progress=False,
            auto_adjust=False,
            group_by="column",
        )
        return frame_to_series(raw, symbol, self._use_adj_close)

    async def get_daily_history(self, symbol: str, from_date: date) -> dict[str, float]:
        return await asyncio.to_thread(self._download, symbol, from_date)


def frame_to_series(raw: pd.DataFrame, symbol: str, use_adj_close: bool = False) -> dict[str, float]:
    """
    Extract one close column from a yfinance frame as ISO date -> price.

    Handles both flat and (field, ticker) MultiIndex columns and strips
    timezones from the index. NaN rows are dropped.
    """
    if raw is None or raw.empty:
        return {}

    if isinstance(raw.index, pd.DatetimeIndex) and raw.index.tz is not None:
        raw = raw.copy()
        raw.index = raw.index.tz_localize(None)

    fields = ["Adj Close", "Close"] if use_adj_close else ["Close", "Adj Close"]
    if isinstance(raw.columns, pd.MultiIndex):
        available = raw.columns.get_level_values(0)
        name = next((f for f in fields if f in available), available[0])
        closes = raw.xs(name, axis=1, level=0)
    else:
        name = next((f for f in fields if f in raw.columns), raw.columns[0])
        closes = raw[name]

    if isinstance(closes, pd.DataFrame):
        column = symbol if symbol in closes.columns else closes.columns[0]
        closes = closes[column]

    closes = closes.dropna()
    return {pd.Timestamp(ts).strftime("%Y-%m-%d"): float(v) for ts, v in closes.items() if v > 0}


def fx_pair_symbol(from_currency: str, to_currency: str) -> str:
    """Yahoo symbol of the FX pair quoting `from_currency` in `to_currency`."""
    return f"{from_currency}{to_currency}=X"


async def fetch_fx_history(
    provider: HistoryProvider,
    from_currency: str,
    to_currency: str,
    from_date: date,
) -> dict[str, float]:
    """
    Fetch rates converting `from_currency` into `to_currency`.

    Falls back to the reverse pair (inverted) when the direct pair is empty.
    """
    symbol = fx_pair_symbol(from_currency, to_currency)
    history = await provider.get_daily_history(symbol, from_date)
    if history:
        return history

    reverse_symbol = fx_pair_symbol(to_currency, from_currency)
    logger.warning(f"Direct FX {symbol} empty, trying reverse {reverse_symbol}")
    reverse = await provider.get_daily_history(reverse_symbol, from_date)
    inverted = {d: 1.0 / rate for d, rate in reverse.items() if rate > 0}
    if inverted:
        logger.info(f"Inverted {len(inverted)} points from {reverse_symbol}")
    return inverted


@dataclass
class MarketData:
    """Every series one run needs, fetched up front."""

    prices: SeriesMap = field(default_factory=dict)
    fx: SeriesMap = field(default_factory=dict)
    benchmark: dict[str, float] = field(default_factory=dict)


async def _guarded(
    semaphore: asyncio.Semaphore,
    label: str,
    fetch: Callable[[], Awaitable[dict[str, float]]],
) -> dict[str, float]:
    async with semaphore:
        try:
            return await fetch()
        except Exception as e:
            logger.error(f"Failed to fetch history for {label}: {e}")
            return {}


async def load_market_data(
    provider: HistoryProvider,
    symbols: list[str],
    currencies: list[str],
    target_currency: str,
    from_date: date,
    benchmark_symbol: Optional[str] = None,
    benchmark_from: Optional[date] = None,
    timeout: Optional[float] = 60.0,
    concurrency: int = 2,
) -> MarketData:
    """
    Fetch asset prices, FX rates and the benchmark concurrently.

    Args:
        provider: History source
        symbols: Asset symbols to price
        currencies: Native currencies needing conversion (target is skipped)
        target_currency: Currency FX rates convert into
        from_date: First date of asset and FX history
        benchmark_symbol: Optional index symbol
        benchmark_from: First date of benchmark history (defaults to from_date)
        timeout: Seconds allowed for the whole fan-out (None = no limit)
        concurrency: Maximum requests in flight

    Raises:
        asyncio.TimeoutError: If the fan-out does not finish within `timeout`
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))
    symbols = sorted(set(symbols))
    currencies = sorted({c for c in currencies if c and c != target_currency})

    logger.info(
        f"Fetching history from {from_date}: {len(symbols)} symbols, FX {currencies}, benchmark {benchmark_symbol}"
    )

    price_tasks = [
        _guarded(semaphore, s, lambda s=s: provider.get_daily_history(s, from_date)) for s in symbols
    ]
    fx_tasks = [
        _guarded(
            semaphore,
            fx_pair_symbol(c, target_currency),
            lambda c=c: fetch_fx_history(provider, c, target_currency, from_date),
        )
        for c in currencies
    ]
    bench_tasks = []
    if benchmark_symbol:
        bench_start = benchmark_from or from_date
        bench_tasks.append(
            _guarded(semaphore, benchmark_symbol, lambda: provider.get_daily_history(benchmark_symbol, bench_start))
        )

    results = await asyncio.wait_for(asyncio.gather(*price_tasks, *fx_tasks, *bench_tasks), timeout=timeout)

    prices = dict(zip(symbols, results[: len(symbols)]))
    fx = dict(zip(currencies, results[len(symbols) : len(symbols) + len(currencies)]))
    benchmark = results[-1] if bench_tasks else {}

    for symbol, series in prices.items():
        if not series:
            logger.warning(f"No price history for {symbol}; it stays unvalued until priced")
    for currency, series in fx.items():
        logger.info(f"FX {currency}{target_currency}: {len(series)} data points")

    return MarketData(prices=prices, fx=fx, benchmark=benchmark)
