"""
==============================================================================
Session Event Delivery Module
==============================================================================

Bridges registry notifications to async consumers.

SessionEventQueue subscribes to a registry and buffers events in a bounded
asyncio.Queue for a single consumer (e.g. the camera WebSocket forwarder).
When the queue is full the oldest pending event is dropped so the newest
state change is always delivered.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from scanflow.domain.events import SessionEvent
from scanflow.session.registry import SessionRegistry


# Module logger
logger = logging.getLogger(__name__)


def marshal_to_owner(
    loop: asyncio.AbstractEventLoop,
    callback: Callable[..., Any],
    *args: Any,
) -> None:
    """
    Schedule ``callback(*args)`` on the owner event loop thread.

    Used by decode callbacks that fire on a foreign thread.
    """
    loop.call_soon_threadsafe(callback, *args)


class SessionEventQueue:
    """
    Bounded single-consumer queue of session events.

    Example:
        >>> events = SessionEventQueue(registry, maxsize=32)
        >>> event = await events.get()
        >>> events.close()
    """

    def __init__(self, registry: SessionRegistry, maxsize: int = 64) -> None:
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._dropped = 0
        self._closed = False
        self._unsubscribe: Optional[Callable[[], None]] = registry.subscribe(self._push)

    @property
    def dropped(self) -> int:
        """Number of events discarded because the queue was full."""
        return self._dropped

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        return self._queue.qsize()

    def _push(self, event: SessionEvent) -> None:
        if self._closed:
            return
        if self._queue.full():
            self._queue.get_nowait()
            self._dropped += 1
            logger.debug(f"Event queue full, dropped oldest event ({self._dropped} total)")
        self._queue.put_nowait(event)

    async def get(self) -> SessionEvent:
        """Wait for the next event."""
        return await self._queue.get()

    def get_nowait(self) -> SessionEvent:
        """
        Return the next pending event.

        Raises:
            asyncio.QueueEmpty: If nothing is pending
        """
        return self._queue.get_nowait()

    def close(self) -> int:
        """
        Unsubscribe and discard every pending event.

        Returns:
            Number of events discarded
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._closed = True

        discarded = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            discarded += 1

        if discarded:
            logger.debug(f"Event queue closed, {discarded} pending event(s) discarded")
        return discarded
