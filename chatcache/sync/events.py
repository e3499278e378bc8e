# =============================================================================
# File: chatcache/sync/events.py
# Description: Ingress events consumed by the sync engine
# =============================================================================

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Literal, Optional, Type

from pydantic import Field

from chatcache.common.base.base_model import BaseEvent
from chatcache.sync.enums import EventKind, ParticipantAction
from chatcache.sync.read_models import Chat, Contact, GroupMetadata


# =============================================================================
# Bulk / history
# =============================================================================

class HistorySnapshot(BaseEvent):
    """Bulk delivery of historical chats, contacts and messages on initial sync"""
    event_type: Literal["history-snapshot"] = "history-snapshot"
    chats: List[Chat] = Field(default_factory=list)
    contacts: List[Contact] = Field(default_factory=list)
    messages: List[Any] = Field(default_factory=list)  # validated one by one when applied
    is_latest: Optional[bool] = Field(default=None, alias="isLatest")
    sync_type: Optional[Any] = Field(default=None, alias="syncType")


# =============================================================================
# Upserts
# =============================================================================

class MessagesUpsert(BaseEvent):
    """New or re-delivered messages"""
    event_type: Literal["message-upsert"] = "message-upsert"
    list_field: ClassVar[Optional[str]] = "messages"
    messages: List[Any] = Field(default_factory=list)  # validated one by one when applied
    type: Optional[str] = None  # origin upsert type: notify | append


class ChatsUpsert(BaseEvent):
    event_type: Literal["chat-upsert"] = "chat-upsert"
    list_field: ClassVar[Optional[str]] = "chats"
    chats: List[Chat] = Field(default_factory=list)


class ContactsUpsert(BaseEvent):
    event_type: Literal["contact-upsert"] = "contact-upsert"
    list_field: ClassVar[Optional[str]] = "contacts"
    contacts: List[Contact] = Field(default_factory=list)


class GroupsUpsert(BaseEvent):
    """Full group metadata records (first seen or full replace)"""
    event_type: Literal["group-upsert"] = "group-upsert"
    list_field: ClassVar[Optional[str]] = "groups"
    groups: List[GroupMetadata] = Field(default_factory=list)


# =============================================================================
# Group changes
# =============================================================================

class GroupsUpdate(BaseEvent):
    """Partial group metadata patches; only the fields present are applied"""
    event_type: Literal["group-update"] = "group-update"
    list_field: ClassVar[Optional[str]] = "groups"
    groups: List[GroupMetadata] = Field(default_factory=list)


class GroupParticipantsUpdate(BaseEvent):
    """Participants added, removed, promoted or demoted in a group"""
    event_type: Literal["participant-update"] = "participant-update"
    id: str
    participants: List[str] = Field(default_factory=list)
    action: ParticipantAction
    author: Optional[str] = None


EVENT_MODELS: Dict[EventKind, Type[BaseEvent]] = {
    EventKind.HISTORY_SNAPSHOT: HistorySnapshot,
    EventKind.MESSAGE_UPSERT: MessagesUpsert,
    EventKind.CHAT_UPSERT: ChatsUpsert,
    EventKind.CONTACT_UPSERT: ContactsUpsert,
    EventKind.GROUP_UPSERT: GroupsUpsert,
    EventKind.GROUP_UPDATE: GroupsUpdate,
    EventKind.PARTICIPANT_UPDATE: GroupParticipantsUpdate,
}
