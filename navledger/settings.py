"""
Settings - Single source of truth for engine configuration.

Usage:
    settings = Settings()
    currency = await settings.get('target_currency')
    await settings.set('benchmark_symbol', '^GSPTSE')
    all_settings = await settings.all()

Every key can be overridden at startup with an environment variable named
NAVLEDGER_<KEY> (e.g. NAVLEDGER_TARGET_CURRENCY=USD).
"""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = "NAVLEDGER_"

# Default settings - applied on first use, then overridable via environment or set()
DEFAULTS = {
    # Currency every output amount is expressed in
    "target_currency": "CAD",
    # Index used for side-by-side comparison
    "benchmark_symbol": "^GSPC",
    # Market data fan-out
    "fetch_timeout_seconds": 60.0,  # Whole fan-out, not per request
    "fetch_concurrency": 2,  # Symbols fetched at once
    "fetch_lookback_days": 7,  # History fetched before the first activity
    "benchmark_extra_lookback_years": 5,
    # Comparison summary
    "performers_count": 5,  # Top/bottom performers reported
}


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def _env_overrides() -> dict[str, Any]:
    overrides = {}
    for key, default in DEFAULTS.items():
        raw = os.environ.get(ENV_PREFIX + key.upper())
        if raw is None:
            continue
        try:
            overrides[key] = _coerce(raw, default)
        except ValueError:
            logger.warning(f"Ignoring invalid {ENV_PREFIX + key.upper()}={raw!r}")
    return overrides


class Settings:
    """Process-wide settings store seeded from DEFAULTS and the environment."""

    _instance: "Settings | None" = None
    _values: dict[str, Any]

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._values = {**DEFAULTS, **_env_overrides()}
        return cls._instance

    @classmethod
    def _clear(cls) -> None:
        """Drop the shared instance so the next Settings() re-reads the environment."""
        cls._instance = None

    async def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value."""
        value = self._values.get(key)
        if value is None:
            return default if default is not None else DEFAULTS.get(key)
        return value

    async def set(self, key: str, value: Any) -> None:
        """Set a setting value."""
        self._values[key] = value

    async def all(self) -> dict:
        """Get all settings with defaults applied."""
        result = DEFAULTS.copy()
        result.update(self._values)
        return result
