# =============================================================================
# File: chatcache/infra/cqrs/projector_decorators.py
# Description: Decorators that mark projector methods as event handlers
#              @projection(kind) - binds a method to one ingress event kind
#              @monitor_projection - latency metric + slow-handler warning
# =============================================================================

import inspect
import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Optional

from chatcache.infra.metrics.sync_metrics import chatcache_sync_event_latency_seconds
from chatcache.sync.enums import EventKind

log = logging.getLogger("chatcache.cqrs.projector_decorators")

SLOW_PROJECTION_WARNING_S = 0.5


@dataclass
class ProjectionHandler:
    """Metadata for a projection handler"""
    handler_func: Callable[[Any], Awaitable[None]]
    event_kind: EventKind
    method_name: str
    projector_class: Optional[type] = None
    description: Optional[str] = None


def projection(event_kind: EventKind, *, description: Optional[str] = None):
    """
    Mark a projector method as the handler for one event kind.

    Usage:
        class SyncProjector:
            @projection(EventKind.CHAT_UPSERT)
            async def on_chats_upsert(self, event: ChatsUpsert):
                ...

    Handlers are collected per instance by get_projection_handlers(), so
    several projectors (e.g. one per session) never share a registry.
    """
    def decorator(func: Callable) -> Callable:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"Projection handler {func.__qualname__} must be async")

        func._projection_event_kind = EventKind(event_kind)
        func._projection_description = description or (func.__doc__ or "").strip() or None
        log.debug(f"Registered projection: {func.__qualname__} for {event_kind.value}")
        return func
    return decorator


def monitor_projection(func: Callable) -> Callable:
    """Record handler latency; warn when a handler is slow. Apply below @projection."""
    @wraps(func)
    async def wrapper(self, event, *args, **kwargs):
        kind = getattr(wrapper, "_projection_event_kind", None)
        label = kind.value if kind is not None else func.__name__
        start = time.perf_counter()
        try:
            return await func(self, event, *args, **kwargs)
        finally:
            duration = time.perf_counter() - start
            chatcache_sync_event_latency_seconds.labels(event_kind=label).observe(duration)
            if duration > SLOW_PROJECTION_WARNING_S:
                log.warning(f"Projection {func.__name__} for {label} took {duration:.3f}s")
    return wrapper


def get_projection_handlers(projector: Any) -> Dict[EventKind, ProjectionHandler]:
    """
    Collect the decorated handlers of a projector instance.

    Raises ValueError when two methods claim the same event kind.
    """
    handlers: Dict[EventKind, ProjectionHandler] = {}
    for name, member in inspect.getmembers(type(projector), predicate=inspect.isfunction):
        kind = getattr(member, "_projection_event_kind", None)
        if kind is None:
            continue
        if kind in handlers:
            raise ValueError(
                f"Duplicate projection for {kind.value}: "
                f"{handlers[kind].method_name} and {name}"
            )
        handlers[kind] = ProjectionHandler(
            handler_func=getattr(projector, name),
            event_kind=kind,
            method_name=name,
            projector_class=type(projector),
            description=getattr(member, "_projection_description", None),
        )
    return handlers
