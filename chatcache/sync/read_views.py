# =============================================================================
# File: chatcache/sync/read_views.py
# Description: Query-facing views over the conversation cache
# =============================================================================

from __future__ import annotations

import logging
from typing import List, Optional, Set

from chatcache.infra.persistence.key_space import KeySpace
from chatcache.sync.codec import EntityCodec, default_codec
from chatcache.sync.enums import MessageDirection
from chatcache.sync.ports.group_metadata_port import GroupMetadataPort, fetch_group_metadata_best_effort
from chatcache.sync.ports.list_store_port import KeyValueListStore
from chatcache.sync.read_models import (
    Chat,
    ChatSummary,
    Contact,
    GroupMetadata,
    Message,
    MessageDigest,
)

log = logging.getLogger("chatcache.sync.read_views")


class StoreReadViews:
    """
    Read side of the cache.

    Reads never mutate the store, with one exception: a group metadata
    lookup that misses falls back to the origin and persists what it gets.
    Decode failures surface as CorruptRecordError, store failures as
    StoreUnavailableError.
    """

    def __init__(
            self,
            store: KeyValueListStore,
            keys: KeySpace,
            codec: Optional[EntityCodec] = None,
            metadata_port: Optional[GroupMetadataPort] = None,
            group_suffix: str = "@g.us",
            default_window_size: int = 20,
    ):
        self.store = store
        self.keys = keys
        self.codec = codec or default_codec
        self.metadata_port = metadata_port
        self.group_suffix = group_suffix
        self.default_window_size = default_window_size

    # =========================================================================
    # Single entities
    # =========================================================================

    async def get_known_conversations(self) -> Set[str]:
        return await self.store.set_members(self.keys.known_conversations())

    async def get_conversation_meta(self, jid: str) -> Optional[Chat]:
        return self.codec.decode(Chat, await self.store.get(self.keys.chat_meta(jid)))

    async def get_contact(self, jid: str) -> Optional[Contact]:
        return self.codec.decode(Contact, await self.store.get(self.keys.contact(jid)))

    async def get_group_metadata(self, jid: str) -> Optional[GroupMetadata]:
        """Stored metadata, or one best-effort fetch from the origin (persisted on success)."""
        key = self.keys.group_meta(jid)
        stored = self.codec.decode(GroupMetadata, await self.store.get(key))
        if stored is not None:
            return stored

        fetched = await fetch_group_metadata_best_effort(self.metadata_port, jid, context="read_fallback")
        if fetched is None:
            return None

        await self.store.set(key, self.codec.encode(fetched))
        log.debug(f"Group metadata for {jid} fetched from origin and cached")
        return fetched

    # =========================================================================
    # Conversation list
    # =========================================================================

    def _display_name(self, jid: str, chat: Chat, contact: Optional[Contact]) -> str:
        if contact is not None:
            if contact.name:
                return contact.name
            if contact.notify:
                return contact.notify
        if chat.name:
            return chat.name
        return jid.split("@")[0]

    async def get_all_conversation_summaries(self) -> List[ChatSummary]:
        """
        One summary per known conversation that has stored metadata.

        Every field of the stored chat is kept; on top of it come the
        resolved display name, the contact's picture, a digest of the last
        message, the unread count (0 when unknown) and the group flag.
        Ordered by conversation id.
        """
        summaries: List[ChatSummary] = []
        for jid in sorted(await self.get_known_conversations()):
            chat = await self.get_conversation_meta(jid)
            if chat is None:
                continue
            contact = await self.get_contact(jid)

            fields = chat.model_dump(by_alias=True, exclude_unset=True)
            fields.update(
                jid=jid,
                name=self._display_name(jid, chat, contact),
                unreadCount=chat.unread_count or 0,
                isGroup=jid.endswith(self.group_suffix),
            )
            if contact is not None and contact.img_url:
                fields["profilePictureUrl"] = contact.img_url
            last = await self.most_recent_message(jid)
            if last is not None:
                fields["lastMessage"] = last

            summaries.append(ChatSummary.model_validate(fields))
        return summaries

    # =========================================================================
    # Messages
    # =========================================================================

    async def get_messages(self, jid: str) -> List[Message]:
        raws = await self.store.list_range(self.keys.messages(jid), 0, -1)
        return self.codec.decode_many(Message, raws)

    async def get_message(self, jid: str, message_id: str) -> Optional[Message]:
        for msg in await self.get_messages(jid):
            if msg.key.id == message_id:
                return msg
        return None

    async def most_recent_message(self, jid: str) -> Optional[MessageDigest]:
        raw = await self.store.list_index(self.keys.messages(jid), -1)
        msg = self.codec.decode(Message, raw)
        if msg is None:
            return None
        return MessageDigest.from_message(msg)

    async def get_window(
            self,
            jid: str,
            count: Optional[int] = None,
            direction: MessageDirection = MessageDirection.LATEST,
    ) -> List[Message]:
        """
        Up to `count` messages from one end of the log, in log order.

        LATEST returns the last `count` entries, EARLIEST the first. A log
        shorter than `count` is returned whole; nothing is padded.
        """
        if count is None:
            count = self.default_window_size
        if count <= 0:
            return []

        key = self.keys.messages(jid)
        if MessageDirection(direction) == MessageDirection.LATEST:
            total = await self.store.list_length(key)
            if total == 0:
                return []
            start = max(total - count, 0)
            raws = await self.store.list_range(key, start, total - 1)
        else:
            raws = await self.store.list_range(key, 0, count - 1)
        return self.codec.decode_many(Message, raws)
