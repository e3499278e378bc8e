# =============================================================================
# File: chatcache/sync/projectors.py
# Description: Per-event mutation rules that maintain the conversation cache
# =============================================================================
# Each handler reads what it needs, merges with merge_policy and writes
# back. Nothing here is transactional: concurrent merges on the same key
# resolve last-writer-wins. The message log is only ever appended to.
# =============================================================================

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from chatcache.infra.cqrs.projector_decorators import monitor_projection, projection
from chatcache.infra.metrics.sync_metrics import (
    chatcache_messages_appended_total,
    chatcache_messages_skipped_total,
)
from chatcache.infra.persistence.key_space import KeySpace
from chatcache.sync import merge_policy
from chatcache.sync.codec import EntityCodec, default_codec
from chatcache.sync.enums import EventKind
from chatcache.sync.events import (
    ChatsUpsert,
    ContactsUpsert,
    GroupParticipantsUpdate,
    GroupsUpdate,
    GroupsUpsert,
    HistorySnapshot,
    MessagesUpsert,
)
from chatcache.sync.ports.group_metadata_port import GroupMetadataPort, fetch_group_metadata_best_effort
from chatcache.sync.ports.list_store_port import KeyValueListStore
from chatcache.sync.read_models import (
    Chat,
    Contact,
    GroupMetadata,
    GroupUpdateAnnotation,
    Message,
    ParticipantUpdateAnnotation,
)

log = logging.getLogger("chatcache.sync.projectors")


def epoch_millis() -> int:
    return int(time.time() * 1000)


class SyncProjector:
    """
    Applies ingress events to the store.

    One instance serves one session (its KeySpace). The group metadata port
    is optional; without it every remote fetch is skipped.
    """

    def __init__(
            self,
            store: KeyValueListStore,
            keys: KeySpace,
            codec: Optional[EntityCodec] = None,
            metadata_port: Optional[GroupMetadataPort] = None,
            clock: Callable[[], int] = epoch_millis,
            fetch_group_metadata_on_history: bool = True,
            group_suffix: str = "@g.us",
    ):
        self.store = store
        self.keys = keys
        self.codec = codec or default_codec
        self.metadata_port = metadata_port
        self.clock = clock
        self.fetch_group_metadata_on_history = fetch_group_metadata_on_history
        self.group_suffix = group_suffix

    @property
    def session_id(self) -> str:
        return self.keys.session_id

    def is_group(self, jid: str) -> bool:
        return jid.endswith(self.group_suffix)

    # =========================================================================
    # Shared write paths
    # =========================================================================

    async def _register(self, jid: str) -> None:
        await self.store.set_add(self.keys.known_conversations(), jid)

    def _parse_message(self, entry: Any) -> Optional[Message]:
        if isinstance(entry, Message):
            return entry
        try:
            return Message.model_validate(entry)
        except PydanticValidationError as e:
            log.warning(f"[{self.session_id}] Skipped malformed message: {e.error_count()} validation error(s)")
            chatcache_messages_skipped_total.labels(reason="invalid").inc()
            return None

    async def _append_messages(self, entries: Iterable[Any], event_kind: EventKind) -> int:
        """
        Append content-bearing messages in delivery order; returns the number appended.

        Entries are validated one at a time, so a malformed entry is skipped
        without losing the rest of the batch.
        """
        appended = 0
        for entry in entries:
            msg = self._parse_message(entry)
            if msg is None:
                continue
            if msg.is_undecryptable_stub:
                log.warning(f"[{self.session_id}] Skipped undecryptable message: {msg.key.id}")
                chatcache_messages_skipped_total.labels(reason="undecryptable_stub").inc()
                continue

            jid = msg.conversation_id
            if not jid:
                chatcache_messages_skipped_total.labels(reason="no_conversation").inc()
                continue
            if not msg.has_content:
                chatcache_messages_skipped_total.labels(reason="no_content").inc()
                continue

            await self.store.list_append(self.keys.messages(jid), self.codec.encode(msg))
            await self._register(jid)
            appended += 1

        if appended:
            chatcache_messages_appended_total.labels(event_kind=event_kind.value).inc(appended)
        return appended

    async def _write_chat_authoritative(self, chat: Chat) -> None:
        merged = merge_policy.merge_conversation_meta(None, chat, authoritative=True)
        await self.store.set(self.keys.chat_meta(chat.id), self.codec.encode(merged))
        await self._register(chat.id)

    async def _read_group_meta(self, jid: str) -> Optional[GroupMetadata]:
        raw = await self.store.get(self.keys.group_meta(jid))
        return self.codec.decode(GroupMetadata, raw)

    async def _write_group_meta(self, meta: GroupMetadata) -> None:
        await self.store.set(self.keys.group_meta(meta.id), self.codec.encode(meta))

    # =========================================================================
    # History
    # =========================================================================

    @projection(EventKind.HISTORY_SNAPSHOT)
    @monitor_projection
    async def on_history_snapshot(self, event: HistorySnapshot) -> None:
        """Bulk initial sync: messages, then chats (with group metadata), then contacts."""
        log.info(
            f"[{self.session_id}] History snapshot received. "
            f"Chats: {len(event.chats)}, Contacts: {len(event.contacts)}, "
            f"Messages: {len(event.messages)}",
            extra={"session_id": self.session_id, "event_kind": EventKind.HISTORY_SNAPSHOT.value},
        )

        await self._append_messages(event.messages, EventKind.HISTORY_SNAPSHOT)

        for chat in event.chats:
            await self._write_chat_authoritative(chat)

            if self.fetch_group_metadata_on_history and self.is_group(chat.id):
                meta = await fetch_group_metadata_best_effort(
                    self.metadata_port, chat.id, context="history"
                )
                if meta is not None:
                    await self._write_group_meta(
                        merge_policy.merge_group_metadata(None, meta, None, group_id=chat.id)
                    )

        for contact in event.contacts:
            await self.store.set(self.keys.contact(contact.id), self.codec.encode(contact))

    # =========================================================================
    # Upserts
    # =========================================================================

    @projection(EventKind.MESSAGE_UPSERT)
    @monitor_projection
    async def on_messages_upsert(self, event: MessagesUpsert) -> None:
        await self._append_messages(event.messages, EventKind.MESSAGE_UPSERT)

    @projection(EventKind.CHAT_UPSERT)
    @monitor_projection
    async def on_chats_upsert(self, event: ChatsUpsert) -> None:
        for chat in event.chats:
            await self._write_chat_authoritative(chat)

    @projection(EventKind.CONTACT_UPSERT)
    @monitor_projection
    async def on_contacts_upsert(self, event: ContactsUpsert) -> None:
        """Merge contacts; name fields are never cleared by an empty update."""
        for contact in event.contacts:
            key = self.keys.contact(contact.id)
            existing = self.codec.decode(Contact, await self.store.get(key))
            merged = merge_policy.merge_contact(existing, contact)
            await self.store.set(key, self.codec.encode(merged))

    @projection(EventKind.GROUP_UPSERT)
    @monitor_projection
    async def on_groups_upsert(self, event: GroupsUpsert) -> None:
        for group in event.groups:
            await self._write_group_meta(group)

    # =========================================================================
    # Group changes
    # =========================================================================

    @projection(EventKind.GROUP_UPDATE)
    @monitor_projection
    async def on_groups_update(self, event: GroupsUpdate) -> None:
        for patch in event.groups:
            existing = await self._read_group_meta(patch.id)
            merged = merge_policy.merge_group_metadata(
                existing,
                patch,
                GroupUpdateAnnotation(updated_at=self.clock()),
                group_id=patch.id,
            )
            await self._write_group_meta(merged)

    @projection(EventKind.PARTICIPANT_UPDATE)
    @monitor_projection
    async def on_participants_update(self, event: GroupParticipantsUpdate) -> None:
        """
        Record a participant change on the group's metadata.

        The origin is asked for fresh metadata; participant count and admin
        list come from that answer, or from the stored record when the fetch
        fails. Any failure here is logged and the event is dropped.
        """
        group_id = event.id
        try:
            existing = await self._read_group_meta(group_id)
            latest = await fetch_group_metadata_best_effort(
                self.metadata_port, group_id, context="participant_update"
            )
            freshest = latest if latest is not None else existing

            annotation = ParticipantUpdateAnnotation(
                participants=list(event.participants),
                action=event.action.value,
                updated_at=self.clock(),
                participant_count=merge_policy.participant_count(freshest),
                admin_list=merge_policy.admin_ids(freshest),
            )
            merged = merge_policy.merge_group_metadata(existing, latest, annotation, group_id=group_id)
            await self._write_group_meta(merged)
        except Exception as e:
            log.error(
                f"[{self.session_id}] Participant update for {group_id} not applied: {e}",
                exc_info=True,
                extra={"session_id": self.session_id, "jid": group_id},
            )
