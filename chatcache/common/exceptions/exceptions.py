# chatcache/common/exceptions/exceptions.py
# =============================================================================
# Custom exceptions for the chatcache store
# =============================================================================

from typing import Optional


class ChatCacheException(Exception):
    """Base exception for chatcache"""
    pass


class NotFoundError(ChatCacheException):
    """Raised when a resource is not found"""
    pass


class ValidationError(ChatCacheException):
    """Raised when validation fails"""
    pass


class InfrastructureError(ChatCacheException):
    """Raised for infrastructure errors"""
    pass


class StoreUnavailableError(InfrastructureError):
    """Raised when a call to the underlying key/value store fails"""

    def __init__(self, command: str, cause: Optional[Exception] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Store command failed ({command}){detail}")
        self.command = command
        self.cause = cause


class CorruptRecordError(ChatCacheException):
    """Raised when a stored value cannot be decoded into its entity"""

    def __init__(self, entity: str, reason: str):
        super().__init__(f"Corrupt {entity} record: {reason}")
        self.entity = entity
        self.reason = reason


class RemoteFetchFailedError(InfrastructureError):
    """Raised by origin-service adapters when an on-demand fetch fails"""

    def __init__(self, jid: str, reason: str = ""):
        super().__init__(f"Remote fetch failed for {jid}" + (f": {reason}" if reason else ""))
        self.jid = jid
        self.reason = reason
