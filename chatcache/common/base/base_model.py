# =============================================================================
# File: chatcache/common/base/base_model.py
# Description: Base Pydantic model for ingress events
# =============================================================================

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseEvent(BaseModel):
    """
    Base Pydantic model for every event the sync engine consumes.
    Ensures common metadata fields are present in every event.
    """
    event_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: str  # overridden by Literal in specific event types
    received_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Name of the field that holds the payload when the origin emits a bare list
    list_field: ClassVar[Optional[str]] = None

    model_config = ConfigDict(
        frozen=True,  # events are immutable facts
        populate_by_name=True,
        extra='allow',  # tolerate fields added by newer origin versions
    )

    @classmethod
    def from_payload(cls, payload: Any) -> BaseEvent:
        """Build the event from a raw payload (mapping, bare list, or instance)."""
        if isinstance(payload, cls):
            return payload
        if isinstance(payload, list) and cls.list_field:
            payload = {cls.list_field: payload}
        return cls.model_validate(payload)
