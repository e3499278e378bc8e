from chatcache.common.exceptions.exceptions import (
    ChatCacheException,
    NotFoundError,
    ValidationError,
    InfrastructureError,
    StoreUnavailableError,
    CorruptRecordError,
    RemoteFetchFailedError,
)

__all__ = [
    "ChatCacheException",
    "NotFoundError",
    "ValidationError",
    "InfrastructureError",
    "StoreUnavailableError",
    "CorruptRecordError",
    "RemoteFetchFailedError",
]
