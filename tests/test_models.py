"""Tests for core types and date helpers."""

from datetime import date

import pytest

from navledger.models import DailyPerformanceRecord, EventType
from navledger.utils import add_months, add_years, iter_days, week_start


class TestEventType:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("ADD", EventType.ADD),
            ("buy", EventType.ADD),
            ("DEPOSIT", EventType.ADD),
            ("SELL", EventType.REMOVE),
            (" withdrawal ", EventType.REMOVE),
            ("DIVIDEND", EventType.DIVIDEND),
            ("STOCK_SPLIT", EventType.SPLIT),
            (EventType.SPLIT, EventType.SPLIT),
        ],
    )
    def test_parse(self, name, expected):
        assert EventType.parse(name) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            EventType.parse("TRANSFER")


class TestLedgerEvent:
    def test_date_str(self, make_event):
        assert make_event("ADD", "X", 1, 1.0, date(2024, 2, 3)).date_str == "2024-02-03"

    def test_frozen(self, make_event):
        event = make_event("ADD", "X", 1, 1.0, date(2024, 2, 3))
        with pytest.raises(AttributeError):
            event.quantity = 2


def test_record_to_dict():
    record = DailyPerformanceRecord(date="2024-01-01", market_value=1.0, nav=100.0, net_flow=1.0, units=0.01)
    assert record.to_dict() == {
        "date": "2024-01-01",
        "market_value": 1.0,
        "nav": 100.0,
        "net_flow": 1.0,
        "units": 0.01,
        "dividend": 0.0,
        "discovery_flow": 0.0,
        "is_estimated": False,
    }


class TestDates:
    def test_week_starts_sunday(self):
        assert week_start(date(2024, 1, 3)) == date(2023, 12, 31)
        assert week_start(date(2023, 12, 31)) == date(2023, 12, 31)
        assert week_start(date(2024, 1, 6)) == date(2023, 12, 31)

    def test_add_months_clamps(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)
        assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)

    def test_iter_days_inclusive(self):
        assert list(iter_days(date(2024, 2, 28), date(2024, 3, 1))) == [
            date(2024, 2, 28),
            date(2024, 2, 29),
            date(2024, 3, 1),
        ]
