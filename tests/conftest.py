"""Pytest configuration and fixtures."""

import os
from datetime import date, timedelta

import pytest

from navledger.models import EventType, LedgerEvent
from navledger.settings import Settings


@pytest.fixture(autouse=True)
def clear_settings(monkeypatch):
    """Give every test a fresh Settings instance with no NAVLEDGER_* overrides."""
    for key in list(os.environ):
        if key.startswith("NAVLEDGER_"):
            monkeypatch.delenv(key)
    Settings._clear()
    yield
    Settings._clear()


@pytest.fixture
def make_event():
    """Factory for ledger events.

    Usage:
        event = make_event("ADD", "X", 10, 100.0, D1)
    """

    def _make(
        event_type: str,
        symbol: str,
        quantity: float,
        price: float,
        day: date,
        currency: str = "CAD",
        fee: float = 0.0,
    ) -> LedgerEvent:
        return LedgerEvent(
            symbol=symbol,
            event_type=EventType.parse(event_type),
            quantity=quantity,
            price=price,
            date=day,
            asset_currency=currency,
            fee=fee,
        )

    return _make


@pytest.fixture
def series():
    """Factory for a daily series: series(start, [v0, v1, ...]) -> {iso_date: value}.

    None entries are left out, producing gaps.
    """

    def _series(start: date, values: list) -> dict[str, float]:
        return {
            (start + timedelta(days=i)).isoformat(): v
            for i, v in enumerate(values)
            if v is not None
        }

    return _series
