"""Core types for ledger replay and performance output."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum

# symbol -> quantity
HoldingsState = dict[str, float]
# key (symbol or currency) -> ISO date -> value
SeriesMap = dict[str, dict[str, float]]


class EventType(str, Enum):
    """Kinds of ledger events understood by the replay engine."""

    ADD = "ADD"
    REMOVE = "REMOVE"
    DIVIDEND = "DIVIDEND"
    SPLIT = "SPLIT"

    @classmethod
    def parse(cls, value: str | EventType) -> EventType:
        """Parse an event type, accepting the ledger's activity vocabulary.

        BUY/DEPOSIT map to ADD, SELL/WITHDRAWAL to REMOVE and STOCK_SPLIT to SPLIT.

        Raises:
            ValueError: If the name is not a known event type.
        """
        if isinstance(value, EventType):
            return value
        name = str(value).strip().upper()
        name = _EVENT_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown event type: {value!r}") from None


_EVENT_ALIASES = {
    "BUY": "ADD",
    "DEPOSIT": "ADD",
    "SELL": "REMOVE",
    "WITHDRAWAL": "REMOVE",
    "STOCK_SPLIT": "SPLIT",
}


@dataclass(frozen=True)
class LedgerEvent:
    """A single immutable ledger entry.

    Price and fee are in the asset's native currency. For SPLIT events the
    quantity is the split multiplier (3 for a 3-for-1 split).
    """

    symbol: str
    event_type: EventType
    quantity: float
    price: float
    date: date
    asset_currency: str
    fee: float = 0.0

    @property
    def date_str(self) -> str:
        return self.date.isoformat()


@dataclass
class DailyPerformanceRecord:
    """One simulated day of portfolio performance, in target currency."""

    date: str
    market_value: float
    nav: float
    net_flow: float
    units: float
    dividend: float = 0.0
    discovery_flow: float = 0.0
    is_estimated: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BenchmarkRecord:
    """Benchmark quote aligned to the portfolio date axis."""

    date: str
    raw_value: float
    normalized_value: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class FlowBucket:
    date: str
    inflow: float = 0.0
    outflow: float = 0.0


@dataclass
class DividendBucket:
    date: str
    amount: float = 0.0


@dataclass
class FlowReport:
    """Contribution and dividend totals bucketed by period."""

    contributions: dict[str, list[FlowBucket]] = field(default_factory=dict)
    dividends: dict[str, list[DividendBucket]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "contributions": {k: [asdict(b) for b in v] for k, v in self.contributions.items()},
            "dividends": {k: [asdict(b) for b in v] for k, v in self.dividends.items()},
        }


@dataclass
class Performer:
    symbol: str
    return_pct: float


@dataclass
class ComparisonResult:
    """Portfolio vs benchmark comparison over a date window."""

    portfolio: list[DailyPerformanceRecord]
    benchmark: list[BenchmarkRecord]
    portfolio_return: float = 0.0
    benchmark_return: float = 0.0
    top_performers: list[Performer] = field(default_factory=list)
    bottom_performers: list[Performer] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "portfolio": [r.to_dict() for r in self.portfolio],
            "benchmark": [r.to_dict() for r in self.benchmark],
            "summary": {
                "portfolio_return": self.portfolio_return,
                "benchmark_return": self.benchmark_return,
            },
            "performers": {
                "top": [{"symbol": p.symbol, "return": p.return_pct} for p in self.top_performers],
                "bottom": [{"symbol": p.symbol, "return": p.return_pct} for p in self.bottom_performers],
            },
        }
