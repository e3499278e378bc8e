# =============================================================================
# File: chatcache/api/routers/store_router.py
# Description: Query and ingest endpoints for the conversation cache
# =============================================================================

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from chatcache import __version__
from chatcache.api.dependencies.store_deps import get_event_router, get_exporter, get_read_views
from chatcache.api.models.store_api_models import EventIngestResponse, HealthResponse
from chatcache.common.exceptions.exceptions import StoreUnavailableError
from chatcache.config.logging_config import get_logger
from chatcache.infra.event_bus.event_router import EventRouter, resolve_kind
from chatcache.sync.enums import MessageDirection
from chatcache.sync.exceptions import (
    ConversationNotFoundError,
    GroupMetadataNotFoundError,
    MessageNotFoundError,
)
from chatcache.sync.exporter import SnapshotExporter
from chatcache.sync.read_views import StoreReadViews

log = get_logger("chatcache.api.store_router")

router = APIRouter()


def to_wire(value: Any) -> Any:
    """Models -> JSON-ready data using the stored (camelCase) field names"""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


# =============================================================================
# Conversations
# =============================================================================

@router.get("/conversations", tags=["conversations"])
async def list_conversations(views: StoreReadViews = Depends(get_read_views)) -> JSONResponse:
    """Summaries of every known conversation that has stored metadata"""
    return JSONResponse(to_wire(await views.get_all_conversation_summaries()))


@router.get("/conversations/known", tags=["conversations"])
async def list_known_conversations(views: StoreReadViews = Depends(get_read_views)) -> List[str]:
    return sorted(await views.get_known_conversations())


@router.get("/conversations/{jid}", tags=["conversations"])
async def get_conversation(jid: str, views: StoreReadViews = Depends(get_read_views)) -> JSONResponse:
    chat = await views.get_conversation_meta(jid)
    if chat is None:
        raise ConversationNotFoundError(jid)
    return JSONResponse(to_wire(chat))


@router.get("/conversations/{jid}/contact", tags=["conversations"])
async def get_contact(jid: str, views: StoreReadViews = Depends(get_read_views)) -> JSONResponse:
    contact = await views.get_contact(jid)
    if contact is None:
        raise ConversationNotFoundError(jid)
    return JSONResponse(to_wire(contact))


@router.get("/conversations/{jid}/messages", tags=["messages"])
async def get_message_window(
        jid: str,
        count: Optional[int] = Query(default=None, ge=0, description="Window size (default from config)"),
        direction: MessageDirection = Query(default=MessageDirection.LATEST),
        views: StoreReadViews = Depends(get_read_views),
) -> JSONResponse:
    """Last (or first) `count` messages of a conversation, oldest first"""
    return JSONResponse(to_wire(await views.get_window(jid, count=count, direction=direction)))


@router.get("/conversations/{jid}/history", tags=["messages"])
async def get_full_history(jid: str, views: StoreReadViews = Depends(get_read_views)) -> JSONResponse:
    return JSONResponse(to_wire(await views.get_messages(jid)))


@router.get("/conversations/{jid}/messages/{message_id}", tags=["messages"])
async def get_message(jid: str, message_id: str, views: StoreReadViews = Depends(get_read_views)) -> JSONResponse:
    message = await views.get_message(jid, message_id)
    if message is None:
        raise MessageNotFoundError(jid, message_id)
    return JSONResponse(to_wire(message))


@router.get("/conversations/{jid}/last-message", tags=["messages"])
async def get_last_message(jid: str, views: StoreReadViews = Depends(get_read_views)) -> JSONResponse:
    digest = await views.most_recent_message(jid)
    if digest is None:
        raise MessageNotFoundError(jid, "latest")
    return JSONResponse(to_wire(digest))


# =============================================================================
# Groups & export
# =============================================================================

@router.get("/groups/{jid}", tags=["groups"])
async def get_group_metadata(jid: str, views: StoreReadViews = Depends(get_read_views)) -> JSONResponse:
    """Stored group metadata; fetched from the origin and cached when missing"""
    meta = await views.get_group_metadata(jid)
    if meta is None:
        raise GroupMetadataNotFoundError(jid)
    return JSONResponse(to_wire(meta))


@router.get("/export", tags=["export"])
async def export_all(exporter: SnapshotExporter = Depends(get_exporter)) -> JSONResponse:
    return JSONResponse(to_wire(await exporter.export_all()))


# =============================================================================
# Ingest
# =============================================================================

@router.post("/events/{kind}", response_model=EventIngestResponse, tags=["events"])
async def ingest_event(
        kind: str,
        payload: Any = Body(...),
        event_router: EventRouter = Depends(get_event_router),
) -> EventIngestResponse:
    """
    Apply one event synchronously. `kind` is an ingress name or an origin
    event name. A payload the handler rejects is dropped and reported with
    applied=false.
    """
    event_kind = resolve_kind(kind)
    applied = await event_router.dispatch(event_kind, payload)
    return EventIngestResponse(event_kind=event_kind.value, applied=applied)


# =============================================================================
# Monitoring
# =============================================================================

@router.get("/health", response_model=HealthResponse, response_model_by_alias=True, tags=["monitoring"])
async def health(request: Request) -> HealthResponse:
    store = getattr(request.app.state, "store", None)
    keys = getattr(request.app.state, "keys", None)
    store_status = "unreachable"
    if store is not None and hasattr(store, "ping"):
        try:
            await store.ping()
            store_status = "connected"
        except StoreUnavailableError as e:
            log.warning(f"Health check: store unreachable: {e}")
    elif store is not None:
        store_status = "connected"

    return HealthResponse(
        status="healthy" if store_status == "connected" else "degraded",
        store=store_status,
        session_id=keys.session_id if keys is not None else None,
        version=__version__,
    )


@router.get("/metrics", tags=["monitoring"])
async def prometheus_metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
