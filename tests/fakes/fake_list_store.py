# =============================================================================
# File: tests/fakes/fake_list_store.py
# Description: In-memory implementation of KeyValueListStore for unit testing
# Pattern: Ports & Adapters - Fake adapter
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from chatcache.common.exceptions.exceptions import StoreUnavailableError


@dataclass
class CallRecord:
    """Record of a method call for verification."""
    method: str
    args: tuple


class FakeListStore:
    """
    Dict-backed KeyValueListStore.

    Mirrors Redis semantics for the primitives the cache uses (inclusive
    LRANGE with negative indices, LINDEX returning None out of range).

    Usage:
        store = FakeListStore()
        projector = SyncProjector(store, KeySpace("dev1"))
        ...
        assert store.get_call_count("list_append") == 2
    """

    def __init__(self):
        self.values: Dict[str, str] = {}
        self.lists: Dict[str, List[str]] = {}
        self.sets: Dict[str, Set[str]] = {}

        self._calls: List[CallRecord] = []
        self._should_fail: Dict[str, str] = {}

    # =========================================================================
    # Test Setup Methods
    # =========================================================================

    def configure_failure(self, method: str, error_message: str = "connection refused") -> None:
        """Make `method` raise StoreUnavailableError until cleared."""
        self._should_fail[method] = error_message

    def clear_failures(self) -> None:
        self._should_fail.clear()

    def clear(self) -> None:
        """Reset all state between tests."""
        self.values.clear()
        self.lists.clear()
        self.sets.clear()
        self._calls.clear()
        self._should_fail.clear()

    # =========================================================================
    # Test Verification Methods
    # =========================================================================

    def was_called(self, method: str) -> bool:
        return any(c.method == method for c in self._calls)

    def get_call_count(self, method: str) -> int:
        return sum(1 for c in self._calls if c.method == method)

    def dump(self) -> Dict[str, Any]:
        """Full store content, for equality checks across replays."""
        return {
            "values": dict(self.values),
            "lists": {k: list(v) for k, v in self.lists.items()},
            "sets": {k: set(v) for k, v in self.sets.items()},
        }

    # =========================================================================
    # KeyValueListStore
    # =========================================================================

    async def get(self, key: str) -> Optional[str]:
        self._record_call("get", key)
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._record_call("set", key, value)
        self.values[key] = value

    async def list_append(self, key: str, value: str) -> int:
        self._record_call("list_append", key, value)
        items = self.lists.setdefault(key, [])
        items.append(value)
        return len(items)

    async def list_range(self, key: str, start: int, stop: int) -> List[str]:
        self._record_call("list_range", key, start, stop)
        items = self.lists.get(key, [])
        n = len(items)
        if start < 0:
            start = max(n + start, 0)
        if stop < 0:
            stop = n + stop
        if start > stop or start >= n:
            return []
        return items[start:stop + 1]

    async def list_index(self, key: str, index: int) -> Optional[str]:
        self._record_call("list_index", key, index)
        items = self.lists.get(key, [])
        if -len(items) <= index < len(items):
            return items[index]
        return None

    async def list_length(self, key: str) -> int:
        self._record_call("list_length", key)
        return len(self.lists.get(key, []))

    async def set_add(self, key: str, *members: str) -> int:
        self._record_call("set_add", key, *members)
        existing = self.sets.setdefault(key, set())
        added = len(set(members) - existing)
        existing.update(members)
        return added

    async def set_members(self, key: str) -> Set[str]:
        self._record_call("set_members", key)
        return set(self.sets.get(key, set()))

    async def ping(self) -> bool:
        self._record_call("ping")
        return True

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _record_call(self, method: str, *args) -> None:
        self._calls.append(CallRecord(method=method, args=args))
        if method in self._should_fail:
            raise StoreUnavailableError(method.upper(), ConnectionError(self._should_fail[method]))
