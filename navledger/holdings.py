"""
Holdings - Replays ledger events into per-symbol share counts.

Usage:
    state = replay_until(events, start_date)
    state = apply_events(state, todays_events)
"""

from collections.abc import Iterable
from datetime import date

from navledger.models import EventType, HoldingsState, LedgerEvent


def apply_event(state: HoldingsState, event: LedgerEvent) -> None:
    """Apply one event to a holdings map in place."""
    symbol = event.symbol
    if event.event_type is EventType.ADD:
        state[symbol] = state.get(symbol, 0.0) + event.quantity
    elif event.event_type is EventType.REMOVE:
        # Overselling is not clamped; a negative count shows up downstream.
        state[symbol] = state.get(symbol, 0.0) - abs(event.quantity)
    elif event.event_type is EventType.SPLIT:
        state[symbol] = state.get(symbol, 0.0) * event.quantity
    # DIVIDEND leaves share counts untouched


def apply_events(state: HoldingsState, events: Iterable[LedgerEvent]) -> HoldingsState:
    """
    Return a new holdings map with the events applied.

    Args:
        state: Holdings before the events (not modified)
        events: Events for one day, or any date-ordered run of events

    Returns:
        New symbol -> quantity map
    """
    result = dict(state)
    for event in events:
        apply_event(result, event)
    return result


def replay_until(events: Iterable[LedgerEvent], before: date) -> HoldingsState:
    """Replay every event dated strictly before `before`."""
    return apply_events({}, (e for e in events if e.date < before))


def split_events(events: Iterable[LedgerEvent]) -> tuple[list[LedgerEvent], list[LedgerEvent]]:
    """Partition a day's batch into (splits, everything else)."""
    splits: list[LedgerEvent] = []
    others: list[LedgerEvent] = []
    for event in events:
        (splits if event.event_type is EventType.SPLIT else others).append(event)
    return splits, others
