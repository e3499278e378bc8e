# =============================================================================
# File: chatcache/sync/ports/group_metadata_port.py
# Description: Port for on-demand group metadata fetches from the origin
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from chatcache.infra.metrics.sync_metrics import chatcache_remote_fetch_total
from chatcache.sync.read_models import GroupMetadata

log = logging.getLogger("chatcache.sync.group_metadata")


@runtime_checkable
class GroupMetadataPort(Protocol):
    """Origin-service handle able to fetch a group's current metadata"""

    async def fetch_group_metadata(self, jid: str) -> Any:
        """
        Return the group's metadata (GroupMetadata or a raw mapping).
        Adapters raise RemoteFetchFailedError when the origin cannot answer.
        """
        ...


async def fetch_group_metadata_best_effort(
        port: Optional[GroupMetadataPort],
        jid: str,
        *,
        context: str,
) -> Optional[GroupMetadata]:
    """
    Fetch group metadata, turning every failure into None.

    The result always carries `id == jid`, whatever the origin returned.

    Used wherever a fetch enriches a write or a read but must never abort
    it. `context` labels the caller in logs and metrics.
    """
    if port is None:
        return None

    try:
        result = await port.fetch_group_metadata(jid)
    except Exception as e:
        log.warning(f"Group metadata fetch failed for {jid} ({context}): {e}")
        chatcache_remote_fetch_total.labels(context=context, status="failure").inc()
        return None

    if result is None:
        chatcache_remote_fetch_total.labels(context=context, status="empty").inc()
        return None

    if isinstance(result, GroupMetadata):
        meta = result if result.id == jid else result.model_copy(update={"id": jid})
    else:
        try:
            # origin answers may omit the id
            payload = {**result, "id": jid} if isinstance(result, Mapping) else result
            meta = GroupMetadata.model_validate(payload)
        except PydanticValidationError as e:
            log.warning(f"Fetched group metadata for {jid} is invalid ({context}): {e}")
            chatcache_remote_fetch_total.labels(context=context, status="failure").inc()
            return None

    chatcache_remote_fetch_total.labels(context=context, status="success").inc()
    return meta
