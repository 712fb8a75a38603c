"""
Valuation - Converts a holdings snapshot into one target-currency value.

Usage:
    context = ValuationContext(prices, fx, symbol_currency, 'CAD')
    valuation = value_holdings(holdings, '2024-01-02', context, price_cursor, fx_cursor)
"""

from dataclasses import dataclass, field

from navledger.models import HoldingsState, SeriesMap
from navledger.resolver import Cursor, resolve, resolve_fx


@dataclass
class ValuationContext:
    """Read-only market data shared by every day of one run."""

    prices: SeriesMap
    fx: SeriesMap
    symbol_currency: dict[str, str]
    target_currency: str

    def currency_of(self, symbol: str) -> str:
        return self.symbol_currency.get(symbol, self.target_currency)


@dataclass
class Valuation:
    market_value: float = 0.0
    discovery_inflow: float = 0.0
    is_estimated: bool = False
    # symbols whose price or FX was observed for the first time
    discovered: list[str] = field(default_factory=list)


def value_holdings(
    holdings: HoldingsState,
    date_str: str,
    context: ValuationContext,
    price_cursor: Cursor,
    fx_cursor: Cursor,
) -> Valuation:
    """
    Value every positive holding on a date.

    Both cursors advance as a side effect. A holding whose price or FX rate is
    discovered today contributes its whole converted value to
    `discovery_inflow` as well as to `market_value`, so the caller can book it
    as a flow instead of growth.
    """
    result = Valuation()

    for symbol, quantity in holdings.items():
        if quantity <= 0:
            continue

        price, price_found = resolve(context.prices, price_cursor, symbol, date_str)
        rate, fx_found, estimated = resolve_fx(
            context.fx, fx_cursor, context.currency_of(symbol), context.target_currency, date_str
        )

        value = quantity * price * rate
        result.market_value += value
        result.is_estimated = result.is_estimated or estimated

        if price_found or fx_found:
            result.discovery_inflow += value
            result.discovered.append(symbol)

    return result
