"""Pydantic models for the analytics REST API."""

from datetime import date as date_type
from typing import List, Optional

from pydantic import BaseModel, Field

from navledger.models import EventType, LedgerEvent


class LedgerEventIn(BaseModel):
    """One ledger activity as posted by the client."""

    symbol: str
    type: str = Field(description="ADD/REMOVE/DIVIDEND/SPLIT (or BUY/SELL/DEPOSIT/WITHDRAWAL/STOCK_SPLIT)")
    quantity: float
    price: float = 0.0
    fee: float = 0.0
    date: date_type
    currency: str = Field(description="Native currency of the asset")

    def to_event(self) -> LedgerEvent:
        return LedgerEvent(
            symbol=self.symbol.upper(),
            event_type=EventType.parse(self.type),
            quantity=self.quantity,
            price=self.price,
            fee=self.fee or 0.0,
            date=self.date,
            asset_currency=self.currency.upper(),
        )


class BenchmarkRequest(BaseModel):
    """Request for a portfolio vs benchmark comparison."""

    events: List[LedgerEventIn] = Field(default_factory=list)
    benchmark_symbol: Optional[str] = None
    time_range: Optional[str] = Field(default=None, description="1M, 6M, YTD, 1Y, 5Y or ALL")
    start_date: Optional[date_type] = Field(default=None, description="Overrides time_range when set")
    target_currency: Optional[str] = None


class FlowsRequest(BaseModel):
    """Request for bucketed contributions and dividends."""

    events: List[LedgerEventIn] = Field(default_factory=list)
    target_currency: Optional[str] = None


def to_events(items: List[LedgerEventIn]) -> list[LedgerEvent]:
    """Convert posted events into ledger events sorted by date (stable)."""
    return sorted((item.to_event() for item in items), key=lambda e: e.date)
