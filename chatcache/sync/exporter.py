# =============================================================================
# File: chatcache/sync/exporter.py
# Description: Full dump of everything cached for a session
# =============================================================================

from __future__ import annotations

import logging

from chatcache.sync.read_models import StoreSnapshot
from chatcache.sync.read_views import StoreReadViews

log = logging.getLogger("chatcache.sync.exporter")


class SnapshotExporter:
    """Builds a StoreSnapshot by walking the known conversations"""

    def __init__(self, read_views: StoreReadViews):
        self.read_views = read_views

    async def export_all(self) -> StoreSnapshot:
        conversation_meta = {}
        messages = {}
        contacts = {}

        for jid in sorted(await self.read_views.get_known_conversations()):
            conversation_meta[jid] = await self.read_views.get_conversation_meta(jid)
            messages[jid] = await self.read_views.get_messages(jid)
            contacts[jid] = await self.read_views.get_contact(jid)

        log.info(f"Exported {len(conversation_meta)} conversations")
        return StoreSnapshot(
            conversation_meta=conversation_meta,
            messages=messages,
            contacts=contacts,
        )
