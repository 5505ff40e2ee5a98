# 📄 File: app/shared/events/stream.py

# 🧭 Purpose (Layman Explanation):
# Lets parts of the app "watch" data: whenever a plant is added, edited or deleted,
# everyone watching the plant list automatically gets the new list.

# 🧪 Purpose (Technical Summary):
# Table-invalidation change tracking plus async-generator streams. A ChangeTracker
# wakes subscribers after each committed write; observe_query re-runs a query on
# wake-up and yields only distinct results. StateFlow holds a single observable value.

# 🔗 Dependencies:
# - asyncio: Event signalling between writers and stream consumers
# - typing: Generic stream types

# 🔄 Connected Modules / Calls From:
# Plant repository (observe_* streams), care coordinator (is_loading / error / selection state),
# reminders API (state snapshot)

import asyncio
from typing import AsyncIterator, Awaitable, Callable, Generic, Set, TypeVar

from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

_UNSET = object()


class ChangeTracker:
    """
    Invalidation signal for one logical table.

    Each subscriber owns an ``asyncio.Event``; ``notify`` sets all of them.
    Several notifications before a subscriber wakes collapse into one.
    """

    def __init__(self, name: str = "default"):
        self.name = name
        self._signals: Set[asyncio.Event] = set()

    def subscribe(self) -> asyncio.Event:
        signal = asyncio.Event()
        self._signals.add(signal)
        return signal

    def unsubscribe(self, signal: asyncio.Event) -> None:
        self._signals.discard(signal)

    def notify(self) -> None:
        for signal in list(self._signals):
            signal.set()

    @property
    def subscriber_count(self) -> int:
        return len(self._signals)


async def observe_query(
    tracker: ChangeTracker,
    query: Callable[[], Awaitable[T]],
) -> AsyncIterator[T]:
    """
    Yield the current query result, then every distinct result after a change.

    The subscription is registered before the first query runs so a write
    landing between the read and the wait is never missed.
    """
    signal = tracker.subscribe()
    try:
        last = _UNSET
        while True:
            signal.clear()
            value = await query()
            if last is _UNSET or value != last:
                last = value
                yield value
            await signal.wait()
    finally:
        tracker.unsubscribe(signal)
        logger.debug("Stream closed", table=tracker.name)


class StateFlow(Generic[T]):
    """Observable holder for a single value."""

    def __init__(self, initial: T):
        self._value = initial
        self._tracker = ChangeTracker("state")

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        self._tracker.notify()

    async def _current(self) -> T:
        return self._value

    def subscribe(self) -> AsyncIterator[T]:
        """Stream of the current value followed by each change."""
        return observe_query(self._tracker, self._current)
