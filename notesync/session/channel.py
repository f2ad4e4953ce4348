"""
Outbound effect channel.

Carries UiEffect values from the sign-in orchestrator to the one screen
consuming them: FIFO, each effect delivered once, effects sent before the
consumer attaches are kept until it does. Only one receive() or
iteration may wait at a time. close() tears the channel down:
pending effects are dropped, a waiting consumer is released, and later
sends are ignored.

Typical usage:
    channel = EffectChannel()
    channel.send_nowait(ShowProgress(True))
    async for effect in channel:
        handle(effect)
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

from notesync.models.sign_in import UiEffect

logger = logging.getLogger(__name__)

_CLOSED = object()


class ChannelClosed(Exception):
    """receive() was called on a closed channel."""


class EffectChannel:
    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._consumer_attached = False
        self._receiving = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send_nowait(self, effect: UiEffect) -> None:
        if self._closed:
            logger.debug(f"Dropping {effect!r}: channel closed")
            return
        self._queue.put_nowait(effect)

    async def send(self, effect: UiEffect) -> None:
        if self._closed:
            logger.debug(f"Dropping {effect!r}: channel closed")
            return
        await self._queue.put(effect)

    async def receive(self) -> UiEffect:
        """Next effect in emission order.

        Raises:
            ChannelClosed: If the channel is, or becomes, closed.
            RuntimeError: If another receive() is still waiting.
        """
        if self._closed:
            raise ChannelClosed()
        if self._receiving:
            raise RuntimeError("EffectChannel already has a pending receive")
        self._receiving = True
        try:
            item = await self._queue.get()
        finally:
            self._receiving = False
        if item is _CLOSED:
            raise ChannelClosed()
        return item

    def receive_nowait(self) -> Optional[UiEffect]:
        """Next effect if one is pending, else None."""
        if self._closed or self._queue.empty():
            return None
        item = self._queue.get_nowait()
        return None if item is _CLOSED else item

    async def __aiter__(self) -> AsyncIterator[UiEffect]:
        if self._consumer_attached:
            raise RuntimeError("EffectChannel already has an active consumer")
        self._consumer_attached = True
        try:
            while True:
                try:
                    yield await self.receive()
                except ChannelClosed:
                    return
        finally:
            self._consumer_attached = False

    def close(self) -> None:
        """Drop pending effects and release any waiting consumer."""
        if self._closed:
            return
        self._closed = True
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)
        logger.debug("Effect channel closed")
