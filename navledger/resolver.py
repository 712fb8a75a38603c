"""
Resolver - Carry-forward lookup of prices and FX rates.

A Cursor remembers the last observed value per key (symbol or currency).
It only moves forward with the simulation and belongs to a single run.

Usage:
    cursor = Cursor()
    price, discovered = resolve(prices, cursor, 'AAPL', '2024-01-02')
    rate, discovered, estimated = resolve_fx(fx, fx_cursor, 'USD', 'CAD', '2024-01-02')
"""

from bisect import bisect_right
from typing import Optional

from navledger.models import SeriesMap


# Rate assumed for a currency that has never been quoted.
FX_PARITY = 1.0


class Cursor:
    """Last known value per key for one simulation run."""

    def __init__(self, values: Optional[dict[str, float]] = None):
        self._values: dict[str, float] = dict(values or {})

    def get(self, key: str) -> float:
        return self._values.get(key, 0.0)

    def has(self, key: str) -> bool:
        return self._values.get(key, 0.0) != 0.0

    def update(self, key: str, value: float) -> None:
        self._values[key] = value

    def copy(self) -> "Cursor":
        return Cursor(self._values)

    def as_dict(self) -> dict[str, float]:
        return dict(self._values)

    def seed(self, series_map: SeriesMap, date_str: str) -> None:
        """Seed every key that has an observation exactly on `date_str`."""
        for key, series in series_map.items():
            value = series.get(date_str)
            if value:
                self._values[key] = value

    def seed_nearest(self, series_map: SeriesMap, date_str: str) -> None:
        """
        Seed each key from its closest observation on or before `date_str`.

        Keys whose history starts after `date_str` are seeded with their
        earliest observation. Keys with an empty series stay unset.
        """
        for key, series in series_map.items():
            dates = sorted(d for d, v in series.items() if v)
            if not dates:
                continue
            prior = [d for d in dates if d <= date_str]
            chosen = prior[-1] if prior else dates[0]
            self._values[key] = series[chosen]

    def __repr__(self) -> str:
        return f"Cursor({self._values!r})"


def resolve(
    series_map: SeriesMap,
    cursor: Cursor,
    key: str,
    date_str: str,
    default: float = 0.0,
) -> tuple[float, bool]:
    """
    Resolve the value of `key` on `date_str`, carrying the last one forward.

    Args:
        series_map: key -> (date -> value), sparse
        cursor: Per-run last known values, updated in place
        key: Symbol or currency code
        date_str: ISO date
        default: Returned when nothing has ever been observed

    Returns:
        (value, is_first_discovery). Discovery is True only on the first
        observation for a key whose cursor was still unset.
    """
    observed = series_map.get(key, {}).get(date_str)
    if observed:
        discovered = not cursor.has(key)
        cursor.update(key, observed)
        return observed, discovered

    if cursor.has(key):
        return cursor.get(key), False
    return default, False


def resolve_fx(
    fx_map: SeriesMap,
    cursor: Cursor,
    currency: str,
    target_currency: str,
    date_str: str,
) -> tuple[float, bool, bool]:
    """
    Resolve the rate converting `currency` into `target_currency`.

    Returns:
        (rate, is_first_discovery, is_estimated). `is_estimated` is True when
        no rate was ever seen and parity was assumed.
    """
    if currency == target_currency:
        return 1.0, False, False

    rate, discovered = resolve(fx_map, cursor, currency, date_str, default=0.0)
    if rate:
        return rate, discovered, False
    return FX_PARITY, False, True


def quoted_dates(series_map: SeriesMap) -> dict[str, list[str]]:
    """Sorted dates with a usable quote, per key."""
    return {key: sorted(d for d, v in series.items() if v) for key, series in series_map.items()}


def rate_as_of(
    fx_map: SeriesMap,
    currency: str,
    target_currency: str,
    date_str: str,
    dates: Optional[dict[str, list[str]]] = None,
) -> tuple[float, bool]:
    """
    Latest rate quoted on or before `date_str`, without a cursor.

    Args:
        dates: Output of `quoted_dates(fx_map)`, computed per call if None

    Returns:
        (rate, is_estimated). Parity is assumed when no earlier quote exists.
    """
    if currency == target_currency:
        return 1.0, False

    series = fx_map.get(currency, {})
    if dates is None:
        dates = quoted_dates({currency: series})
    quoted = dates.get(currency, [])
    index = bisect_right(quoted, date_str)
    if index == 0:
        return FX_PARITY, True
    return series[quoted[index - 1]], False
