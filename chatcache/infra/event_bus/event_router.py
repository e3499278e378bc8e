# =============================================================================
# File: chatcache/infra/event_bus/event_router.py
# Description: Dispatch table from ingress event kinds to projector handlers
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Union

from pydantic import ValidationError as PydanticValidationError

from chatcache.infra.cqrs.projector_decorators import ProjectionHandler, get_projection_handlers
from chatcache.infra.metrics.sync_metrics import chatcache_sync_events_total
from chatcache.sync.enums import ORIGIN_EVENT_ALIASES, EventKind
from chatcache.sync.events import EVENT_MODELS
from chatcache.sync.exceptions import UnknownEventKindError

log = logging.getLogger("chatcache.event_bus.router")

Handler = Callable[[Any], Awaitable[None]]


def resolve_kind(kind: Union[str, EventKind]) -> EventKind:
    """Ingress name or origin alias -> EventKind. Raises UnknownEventKindError."""
    if isinstance(kind, EventKind):
        return kind
    if kind in ORIGIN_EVENT_ALIASES:
        return ORIGIN_EVENT_ALIASES[kind]
    try:
        return EventKind(kind)
    except ValueError:
        raise UnknownEventKindError(str(kind)) from None


class EventRouter:
    """
    Routes each event to the projector handler registered for its kind.

    Events are handled one at a time: concurrent dispatch() calls wait on
    a lock and run in the order they reach it. Nothing is batched. A
    failing event is logged, counted and dropped; the next event is
    unaffected.
    """

    def __init__(self, projector: Any):
        self.projector = projector
        self._handlers: Dict[EventKind, ProjectionHandler] = get_projection_handlers(projector)
        self._lock = asyncio.Lock()

        missing = [k.value for k in EventKind if k not in self._handlers]
        if missing:
            log.warning(f"No projection registered for event kinds: {', '.join(missing)}")
        log.info(f"EventRouter ready with {len(self._handlers)} handlers")

    async def dispatch(self, kind: Union[str, EventKind], payload: Any) -> bool:
        """
        Parse and apply one event. Returns True when it was applied.

        An unknown kind raises UnknownEventKindError; everything after that
        point is contained here.
        """
        event_kind = resolve_kind(kind)
        handler = self._handlers.get(event_kind)
        if handler is None:
            log.warning(f"No handler for event kind {event_kind.value}, event dropped")
            chatcache_sync_events_total.labels(event_kind=event_kind.value, status="unhandled").inc()
            return False

        try:
            event = EVENT_MODELS[event_kind].from_payload(payload)
        except PydanticValidationError as e:
            log.error(f"Invalid {event_kind.value} payload, event dropped: {e}")
            chatcache_sync_events_total.labels(event_kind=event_kind.value, status="invalid").inc()
            return False

        try:
            async with self._lock:
                await handler.handler_func(event)
        except Exception as e:
            log.error(
                f"Error applying {event_kind.value} event {event.event_id}, event dropped: {e}",
                exc_info=True,
                extra={"event_kind": event_kind.value},
            )
            chatcache_sync_events_total.labels(event_kind=event_kind.value, status="error").inc()
            return False

        chatcache_sync_events_total.labels(event_kind=event_kind.value, status="success").inc()
        return True

    def handler_for(self, kind: Union[str, EventKind]) -> Handler:
        """Single-argument coroutine for `kind`, suitable for an emitter callback"""
        event_kind = resolve_kind(kind)

        async def _on_event(payload: Any) -> None:
            await self.dispatch(event_kind, payload)

        return _on_event

    def bind(self, source: Any, *, use_origin_names: bool = False) -> None:
        """
        Subscribe to every handled kind on a source exposing on(name, handler).

        With use_origin_names the origin emitter's event names are used
        instead of the ingress names.
        """
        names: Dict[EventKind, str] = {k: k.value for k in self._handlers}
        if use_origin_names:
            names = {kind: name for name, kind in ORIGIN_EVENT_ALIASES.items() if kind in self._handlers}

        for kind, name in names.items():
            source.on(name, self.handler_for(kind))
        log.info(f"EventRouter bound to {type(source).__name__} ({len(names)} event names)")
