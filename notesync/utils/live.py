"""
Change notification primitives for asyncio consumers.

ChangeSignal is a broadcast "something changed" flag: every waiter that
grabbed the current event before a notify() is woken by it. LiveValue
pairs a value with such a signal so readers can re-derive whatever they
computed from it.

Typical usage:
    query = LiveValue(NoteQuery())
    changed = query.changed()
    ...read query.value...
    await changed.wait()   # returns once query.value was replaced
"""

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")


class ChangeSignal:
    """Broadcast change flag. Waiters hold the event current at read time."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def changed(self) -> asyncio.Event:
        """Event that will be set by the next notify()."""
        return self._event

    def notify(self) -> None:
        self._event.set()
        self._event = asyncio.Event()


class LiveValue(Generic[T]):
    """A value whose replacement wakes everyone waiting on changed()."""

    def __init__(self, value: T):
        self._value = value
        self._signal = ChangeSignal()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        self._signal.notify()

    def changed(self) -> asyncio.Event:
        return self._signal.changed()


async def wait_any(*events: asyncio.Event) -> None:
    """Wait until at least one of the events is set."""
    waiters = [asyncio.ensure_future(event.wait()) for event in events]
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for waiter in waiters:
            waiter.cancel()
