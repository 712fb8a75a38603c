"""Tests for comparison window presets."""

from datetime import date

import pytest

from navledger.config.ranges import DEFAULT_RANGE, TIME_RANGES, start_date_for_range

TODAY = date(2024, 3, 31)


class TestStartDateForRange:
    @pytest.mark.parametrize(
        "time_range,expected",
        [
            ("1M", date(2024, 2, 29)),
            ("6M", date(2023, 9, 30)),
            ("YTD", date(2024, 1, 1)),
            ("1Y", date(2023, 3, 31)),
            ("5Y", date(2019, 3, 31)),
            ("ALL", date(2004, 3, 31)),
        ],
    )
    def test_presets(self, time_range, expected):
        assert start_date_for_range(time_range, today=TODAY) == expected

    def test_case_insensitive(self):
        assert start_date_for_range("ytd", today=TODAY) == date(2024, 1, 1)

    def test_default(self):
        assert DEFAULT_RANGE in TIME_RANGES
        assert start_date_for_range(None, today=TODAY) == date(2023, 3, 31)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown time range"):
            start_date_for_range("2W", today=TODAY)
