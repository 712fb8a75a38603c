"""Tests for carry-forward price and FX resolution."""

from navledger.resolver import FX_PARITY, Cursor, quoted_dates, rate_as_of, resolve, resolve_fx

PRICES = {"X": {"2024-01-01": 10.0, "2024-01-04": 12.0}}
FX = {"USD": {"2024-01-02": 1.35, "2024-01-05": 1.36}}


class TestResolve:
    """Price lookup with carry-forward and first-discovery detection."""

    def test_first_observation_is_discovery(self):
        cursor = Cursor()
        assert resolve(PRICES, cursor, "X", "2024-01-01") == (10.0, True)
        assert cursor.get("X") == 10.0

    def test_later_observation_is_not_discovery(self):
        cursor = Cursor()
        resolve(PRICES, cursor, "X", "2024-01-01")
        assert resolve(PRICES, cursor, "X", "2024-01-04") == (12.0, False)

    def test_gap_carries_last_value_forward(self):
        cursor = Cursor()
        resolve(PRICES, cursor, "X", "2024-01-01")
        assert resolve(PRICES, cursor, "X", "2024-01-02") == (10.0, False)
        assert resolve(PRICES, cursor, "X", "2024-01-03") == (10.0, False)

    def test_never_seen_returns_default(self):
        cursor = Cursor()
        assert resolve(PRICES, cursor, "X", "2023-12-31") == (0.0, False)
        assert resolve(PRICES, cursor, "MISSING", "2024-01-01", default=5.0) == (5.0, False)
        assert not cursor.has("MISSING")

    def test_zero_quote_treated_as_missing(self):
        cursor = Cursor({"X": 10.0})
        assert resolve({"X": {"2024-01-02": 0.0}}, cursor, "X", "2024-01-02") == (10.0, False)

    def test_seeded_cursor_suppresses_discovery(self):
        cursor = Cursor()
        cursor.seed(PRICES, "2024-01-01")
        assert resolve(PRICES, cursor, "X", "2024-01-01") == (10.0, False)


class TestResolveFx:
    def test_same_currency_is_identity(self):
        assert resolve_fx(FX, Cursor(), "CAD", "CAD", "2024-01-01") == (1.0, False, False)

    def test_never_quoted_assumes_parity(self):
        rate, discovered, estimated = resolve_fx(FX, Cursor(), "EUR", "CAD", "2024-01-02")
        assert rate == FX_PARITY
        assert discovered is False
        assert estimated is True

    def test_before_first_quote_is_estimated(self):
        _, _, estimated = resolve_fx(FX, Cursor(), "USD", "CAD", "2024-01-01")
        assert estimated is True

    def test_discovery_then_carry_forward(self):
        cursor = Cursor()
        assert resolve_fx(FX, cursor, "USD", "CAD", "2024-01-02") == (1.35, True, False)
        assert resolve_fx(FX, cursor, "USD", "CAD", "2024-01-03") == (1.35, False, False)
        assert resolve_fx(FX, cursor, "USD", "CAD", "2024-01-05") == (1.36, False, False)


class TestRateAsOf:
    """Stateless lookup used for independent flow conversion."""

    def test_latest_prior_quote(self):
        assert rate_as_of(FX, "USD", "CAD", "2024-01-04") == (1.35, False)
        assert rate_as_of(FX, "USD", "CAD", "2024-01-05") == (1.36, False)

    def test_before_history_is_parity(self):
        assert rate_as_of(FX, "USD", "CAD", "2024-01-01") == (FX_PARITY, True)

    def test_same_currency(self):
        assert rate_as_of({}, "CAD", "CAD", "2024-01-01") == (1.0, False)

    def test_precomputed_dates_are_used(self):
        dates = quoted_dates(FX)
        assert dates == {"USD": ["2024-01-02", "2024-01-05"]}
        assert rate_as_of(FX, "USD", "CAD", "2024-01-06", dates) == (1.36, False)
        # Lookups follow the supplied index, not a fresh sort of the series
        assert rate_as_of(FX, "USD", "CAD", "2024-01-06", {"USD": ["2024-01-02"]}) == (1.35, False)
        assert rate_as_of(FX, "EUR", "CAD", "2024-01-06", dates) == (FX_PARITY, True)


class TestCursor:
    """Cursor seeding and isolation."""

    def test_copy_is_independent(self):
        original = Cursor({"X": 1.0})
        clone = original.copy()
        clone.update("X", 2.0)
        assert original.get("X") == 1.0
        assert clone.get("X") == 2.0

    def test_seed_uses_exact_date_only(self):
        cursor = Cursor()
        cursor.seed(PRICES, "2024-01-02")
        assert cursor.as_dict() == {}

    def test_seed_nearest_prefers_prior_observation(self):
        cursor = Cursor()
        cursor.seed_nearest(FX, "2024-01-04")
        assert cursor.get("USD") == 1.35

    def test_seed_nearest_falls_back_to_earliest(self):
        cursor = Cursor()
        cursor.seed_nearest(FX, "2023-06-01")
        assert cursor.get("USD") == 1.35

    def test_seed_nearest_skips_empty_series(self):
        cursor = Cursor()
        cursor.seed_nearest({"EUR": {}}, "2024-01-01")
        assert not cursor.has("EUR")
