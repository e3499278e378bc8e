# =============================================================================
# File: chatcache/infra/event_bus/in_process_bus.py
# Description: In-process event source with a single ordered consumer
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

log = logging.getLogger("chatcache.event_bus.in_process")

Handler = Callable[[Any], Awaitable[None]]

_STOP = object()


class InProcessEventBus:
    """
    Queue-backed emitter: publish() enqueues, one consumer task delivers.

    Because a single task drains the queue, handlers see events in publish
    order and never run concurrently. Implements on(name, handler) so an
    EventRouter can bind to it.
    """

    def __init__(self, maxsize: int = 0):
        self._handlers: Dict[str, List[Handler]] = {}
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._consumer: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def on(self, name: str, handler: Handler) -> None:
        self._handlers.setdefault(name, []).append(handler)
        log.debug(f"Handler registered for '{name}'")

    async def publish(self, name: str, payload: Any) -> None:
        """Enqueue an event for the consumer task (waits while the queue is full)"""
        await self._queue.put((name, payload))

    async def emit(self, name: str, payload: Any) -> None:
        """Deliver an event to its handlers immediately, bypassing the queue"""
        handlers = self._handlers.get(name)
        if not handlers:
            log.debug(f"No handlers for '{name}', event ignored")
            return
        for handler in handlers:
            try:
                await handler(payload)
            except asyncio.CancelledError:
                raise
            except Exception:
                log.exception(f"Error in handler for '{name}'")

    async def _consume(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is _STOP:
                    return
                name, payload = item
                await self.emit(name, payload)
            finally:
                self._queue.task_done()

    def start(self) -> None:
        if self.is_running:
            return
        self._consumer = asyncio.create_task(self._consume(), name="chatcache-event-consumer")
        log.info("In-process event bus started")

    async def join(self) -> None:
        """Wait until every published event has been delivered"""
        await self._queue.join()

    async def stop(self) -> None:
        """Deliver what is already queued, then stop the consumer"""
        if not self.is_running:
            return
        await self._queue.put(_STOP)
        await self._consumer
        self._consumer = None
        log.info("In-process event bus stopped")
