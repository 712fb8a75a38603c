"""Tests for holdings valuation in target currency."""

import pytest

from navledger.resolver import Cursor
from navledger.valuation import ValuationContext, value_holdings


@pytest.fixture
def context():
    return ValuationContext(
        prices={
            "X": {"2024-01-01": 10.0, "2024-01-02": 11.0},
            "U": {"2024-01-01": 20.0},
            "Z": {"2024-01-02": 5.0},
        },
        fx={"USD": {"2024-01-01": 1.5}},
        symbol_currency={"X": "CAD", "U": "USD", "Z": "CAD"},
        target_currency="CAD",
    )


class TestValueHoldings:
    def test_converts_each_holding(self, context):
        price_cursor = Cursor({"X": 10.0, "U": 20.0})
        fx_cursor = Cursor({"USD": 1.5})
        result = value_holdings({"X": 10, "U": 2}, "2024-01-02", context, price_cursor, fx_cursor)
        # X at 11 CAD, U carried forward at 20 USD * 1.5
        assert result.market_value == pytest.approx(10 * 11.0 + 2 * 20.0 * 1.5)
        assert result.discovery_inflow == 0.0
        assert result.is_estimated is False

    def test_non_positive_holdings_skipped(self, context):
        result = value_holdings({"X": 0, "U": -3}, "2024-01-01", context, Cursor(), Cursor())
        assert result.market_value == 0.0
        assert result.discovered == []

    def test_first_price_counts_as_discovery(self, context):
        price_cursor = Cursor({"X": 10.0})
        result = value_holdings({"X": 1, "Z": 4}, "2024-01-02", context, price_cursor, Cursor())
        assert result.discovery_inflow == pytest.approx(20.0)
        assert result.market_value == pytest.approx(31.0)
        assert result.discovered == ["Z"]
        assert price_cursor.get("Z") == 5.0

    def test_first_fx_counts_as_discovery(self, context):
        """A priced holding whose FX rate appears today is also newly valued."""
        price_cursor = Cursor({"U": 20.0})
        result = value_holdings({"U": 1}, "2024-01-01", context, price_cursor, Cursor())
        assert result.discovery_inflow == pytest.approx(30.0)
        assert result.discovered == ["U"]

    def test_missing_fx_is_estimated(self):
        context = ValuationContext(
            prices={"E": {"2024-01-01": 8.0}},
            fx={},
            symbol_currency={"E": "EUR"},
            target_currency="CAD",
        )
        result = value_holdings({"E": 2}, "2024-01-01", context, Cursor({"E": 8.0}), Cursor())
        assert result.market_value == pytest.approx(16.0)
        assert result.is_estimated is True

    def test_unknown_symbol_currency_defaults_to_target(self, context):
        assert context.currency_of("NEW") == "CAD"
