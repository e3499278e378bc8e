# =============================================================================
# File: chatcache/sync/read_models.py
# Description: Entity models stored by the conversation cache
# =============================================================================
# Stored records keep the origin service's camelCase field names (aliases);
# Python code uses the snake_case attribute names. Unknown fields are kept
# as extras so records round-trip without loss.
# =============================================================================

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from chatcache.sync.enums import MessageStubType


class CacheModel(BaseModel):
    """Base for every stored entity: alias-aware, open to extra fields"""
    model_config = ConfigDict(
        populate_by_name=True,
        extra='allow',
    )


# =============================================================================
# Chats & Contacts
# =============================================================================

class Chat(CacheModel):
    """Conversation metadata (free-form attribute map keyed by `id`)"""
    id: str
    name: Optional[str] = None
    unread_count: Optional[int] = Field(default=None, alias="unreadCount")
    archived: Optional[bool] = None
    pinned: Optional[int] = None  # pin timestamp, origin semantics
    conversation_timestamp: Optional[Union[int, str]] = Field(default=None, alias="conversationTimestamp")


class Contact(CacheModel):
    """Person known to the session. `name` is the display name, `notify` the push name."""
    id: str
    name: Optional[str] = None
    notify: Optional[str] = None
    verified_name: Optional[str] = Field(default=None, alias="verifiedName")
    img_url: Optional[str] = Field(default=None, alias="imgUrl")
    status: Optional[str] = None


# =============================================================================
# Groups
# =============================================================================

class GroupParticipant(CacheModel):
    id: str
    admin: Optional[str] = None  # "admin" | "superadmin" | None


class GroupUpdateAnnotation(CacheModel):
    """Provenance of the last metadata patch"""
    attribute: ClassVar[str] = "last_group_update"

    updated_at: int = Field(alias="updatedAt")


class ParticipantUpdateAnnotation(CacheModel):
    """Provenance of the last participant change"""
    attribute: ClassVar[str] = "last_participant_update"

    participants: List[str] = Field(default_factory=list)
    action: str
    updated_at: int = Field(alias="updatedAt")
    participant_count: int = Field(default=0, alias="participantCount")
    admin_list: List[str] = Field(default_factory=list, alias="adminList")


class GroupMetadata(CacheModel):
    id: str
    subject: Optional[str] = None
    owner: Optional[str] = None
    desc: Optional[str] = None
    creation: Optional[int] = None
    participants: Optional[List[GroupParticipant]] = None
    last_group_update: Optional[GroupUpdateAnnotation] = Field(default=None, alias="lastGroupUpdate")
    last_participant_update: Optional[ParticipantUpdateAnnotation] = Field(
        default=None, alias="lastParticipantUpdate"
    )


# =============================================================================
# Messages
# =============================================================================

class MessageKey(CacheModel):
    remote_jid: Optional[str] = Field(default=None, alias="remoteJid")
    from_me: Optional[bool] = Field(default=None, alias="fromMe")
    id: Optional[str] = None
    participant: Optional[str] = None


class Message(CacheModel):
    """A single message envelope as delivered by the origin client"""
    key: MessageKey
    message: Optional[Dict[str, Any]] = None  # content payload
    message_timestamp: Optional[Union[int, str]] = Field(default=None, alias="messageTimestamp")
    message_stub_type: Optional[int] = Field(default=None, alias="messageStubType")
    push_name: Optional[str] = Field(default=None, alias="pushName")

    @property
    def conversation_id(self) -> Optional[str]:
        return self.key.remote_jid

    @property
    def has_content(self) -> bool:
        return bool(self.message)

    @property
    def is_undecryptable_stub(self) -> bool:
        return not self.has_content and self.message_stub_type == MessageStubType.CIPHERTEXT


class MessageDigest(CacheModel):
    """Cheap view of a message: identity, timestamp and stub type only"""
    key: MessageKey
    message_timestamp: Optional[Union[int, str]] = Field(default=None, alias="messageTimestamp")
    message_stub_type: Optional[int] = Field(default=None, alias="messageStubType")

    @classmethod
    def from_message(cls, message: Message) -> MessageDigest:
        return cls(
            key=message.key,
            message_timestamp=message.message_timestamp,
            message_stub_type=message.message_stub_type,
        )


# =============================================================================
# Derived views
# =============================================================================

class ChatSummary(Chat):
    """Chat metadata enriched with contact name, last message digest and flags"""
    jid: str
    name: str
    profile_picture_url: Optional[str] = Field(default=None, alias="profilePictureUrl")
    last_message: Optional[MessageDigest] = Field(default=None, alias="lastMessage")
    unread_count: int = Field(default=0, alias="unreadCount")
    is_group: bool = Field(default=False, alias="isGroup")


class StoreSnapshot(CacheModel):
    """Aggregate of everything known to one session"""
    conversation_meta: Dict[str, Optional[Chat]] = Field(default_factory=dict, alias="conversationMeta")
    messages: Dict[str, List[Message]] = Field(default_factory=dict)
    contacts: Dict[str, Optional[Contact]] = Field(default_factory=dict)
