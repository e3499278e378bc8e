# =============================================================================
# File: chatcache/sync/exceptions.py
# Description: Sync domain exceptions
# =============================================================================

from chatcache.common.exceptions.exceptions import NotFoundError, ValidationError


class ConversationNotFoundError(NotFoundError):
    """No metadata stored for the conversation"""

    def __init__(self, jid: str):
        super().__init__(f"Conversation not found: {jid}")
        self.jid = jid


class MessageNotFoundError(NotFoundError):
    def __init__(self, jid: str, message_id: str):
        super().__init__(f"Message {message_id} not found in {jid}")
        self.jid = jid
        self.message_id = message_id


class GroupMetadataNotFoundError(NotFoundError):
    """Group metadata is neither stored nor fetchable"""

    def __init__(self, jid: str):
        super().__init__(f"Group metadata not found: {jid}")
        self.jid = jid


class UnknownEventKindError(ValidationError):
    def __init__(self, kind: str):
        super().__init__(f"Unknown event kind: {kind}")
        self.kind = kind
