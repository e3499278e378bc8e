# =============================================================================
# File: chatcache/sync/enums.py
# Description: Enums for the conversation sync domain
# =============================================================================

from enum import Enum, IntEnum


class EventKind(str, Enum):
    """Ingress event kinds handled by the sync engine"""
    HISTORY_SNAPSHOT = "history-snapshot"
    MESSAGE_UPSERT = "message-upsert"
    CHAT_UPSERT = "chat-upsert"
    CONTACT_UPSERT = "contact-upsert"
    GROUP_UPSERT = "group-upsert"
    GROUP_UPDATE = "group-update"
    PARTICIPANT_UPDATE = "participant-update"


# Event names used by the origin client's emitter
ORIGIN_EVENT_ALIASES = {
    "messaging-history.set": EventKind.HISTORY_SNAPSHOT,
    "messages.upsert": EventKind.MESSAGE_UPSERT,
    "chats.upsert": EventKind.CHAT_UPSERT,
    "contacts.upsert": EventKind.CONTACT_UPSERT,
    "groups.upsert": EventKind.GROUP_UPSERT,
    "groups.update": EventKind.GROUP_UPDATE,
    "group-participants.update": EventKind.PARTICIPANT_UPDATE,
}


class MessageDirection(str, Enum):
    """Which end of a conversation's message log a window is taken from"""
    LATEST = "latest"
    EARLIEST = "earliest"


class ParticipantAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    PROMOTE = "promote"
    DEMOTE = "demote"
    MODIFY = "modify"


class MessageStubType(IntEnum):
    """Subset of the origin's WebMessageInfo.StubType values the store cares about"""
    UNKNOWN = 0
    REVOKE = 1
    CIPHERTEXT = 2  # undecryptable placeholder
