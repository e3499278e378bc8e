# =============================================================================
# File: chatcache/sync/ports/list_store_port.py
# Description: Port for the key/value + list store backing the cache
# =============================================================================

from __future__ import annotations

from typing import List, Optional, Protocol, Set, runtime_checkable


@runtime_checkable
class KeyValueListStore(Protocol):
    """
    Primitives the sync engine needs from its store.

    Values are text. Every method raises StoreUnavailableError when the
    backend cannot be reached; nothing is retried.
    """

    async def get(self, key: str) -> Optional[str]:
        """Value under key, None when absent"""
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def list_append(self, key: str, value: str) -> int:
        """Atomic append to the tail; returns the new length"""
        ...

    async def list_range(self, key: str, start: int, stop: int) -> List[str]:
        """Inclusive range, negative indices count from the tail"""
        ...

    async def list_index(self, key: str, index: int) -> Optional[str]:
        ...

    async def list_length(self, key: str) -> int:
        ...

    async def set_add(self, key: str, *members: str) -> int:
        ...

    async def set_members(self, key: str) -> Set[str]:
        ...
