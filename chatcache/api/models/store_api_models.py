# =============================================================================
# File: chatcache/api/models/store_api_models.py
# Description: API models for the cache query and ingest endpoints
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EventIngestResponse(BaseModel):
    """Outcome of a POST /events/{kind} call"""
    model_config = ConfigDict(populate_by_name=True)

    event_kind: str = Field(alias="eventKind")
    applied: bool


class HealthResponse(BaseModel):
    status: str  # healthy | degraded
    store: str  # connected | unreachable
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    version: str

    model_config = ConfigDict(populate_by_name=True)
