"""
navledger - Time-weighted performance replay for a personal investment ledger.

Usage:
    from navledger import LedgerEvent, EventType, NavSimulator, PortfolioAnalytics

    # Offline replay over series you already have
    simulator = NavSimulator(events, prices, fx, target_currency='CAD')
    records = simulator.run(start_date)

    # Fetch market data and compare against a benchmark
    analytics = PortfolioAnalytics()
    result = await analytics.calculate_comparison_history(events, '^GSPC', start_date)
"""

__version__ = "0.1.0"

from navledger.analytics import PortfolioAnalytics
from navledger.benchmark import normalize
from navledger.flows import aggregate
from navledger.market_data import HistoryProvider, StaticHistoryProvider, YahooHistoryProvider
from navledger.models import (
    BenchmarkRecord,
    ComparisonResult,
    DailyPerformanceRecord,
    EventType,
    FlowReport,
    LedgerEvent,
)
from navledger.settings import Settings
from navledger.simulator import NavSimulator, SimulationState, step

__all__ = [
    "__version__",
    "LedgerEvent",
    "EventType",
    "DailyPerformanceRecord",
    "BenchmarkRecord",
    "FlowReport",
    "ComparisonResult",
    "NavSimulator",
    "SimulationState",
    "step",
    "normalize",
    "aggregate",
    "PortfolioAnalytics",
    "HistoryProvider",
    "StaticHistoryProvider",
    "YahooHistoryProvider",
    "Settings",
]
