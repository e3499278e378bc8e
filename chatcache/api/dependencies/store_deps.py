# =============================================================================
# File: chatcache/api/dependencies/store_deps.py
# Description: FastAPI dependencies for the cache components on app.state
# =============================================================================

from typing import Any

from fastapi import HTTPException, Request

from chatcache.config.logging_config import get_logger
from chatcache.infra.event_bus.event_router import EventRouter
from chatcache.sync.exporter import SnapshotExporter
from chatcache.sync.read_views import StoreReadViews

log = get_logger("chatcache.api.dependencies.store")


def _from_state(request: Request, name: str) -> Any:
    component = getattr(request.app.state, name, None)
    if component is None:
        log.error(f"{name} not available - lifespan did not initialize it")
        raise HTTPException(status_code=503, detail="Conversation cache is not initialized.")
    return component


def get_read_views(request: Request) -> StoreReadViews:
    """
    Usage in API routes:
        @router.get("/conversations")
        async def list_conversations(views: StoreReadViews = Depends(get_read_views)):
            ...
    """
    return _from_state(request, "read_views")


def get_event_router(request: Request) -> EventRouter:
    return _from_state(request, "event_router")


def get_exporter(request: Request) -> SnapshotExporter:
    return _from_state(request, "exporter")
