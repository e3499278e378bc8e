# =============================================================================
# File: chatcache/infra/persistence/key_space.py
# Description: Store key layout for one session
# =============================================================================

from __future__ import annotations

from typing import Optional

from chatcache.config.store_config import StoreConfig


class KeySpace:
    """
    Builds every key the cache reads or writes.

    All keys live under ``{namespace}:{session_id}``:

        {prefix}:knownJIDs              set of conversation ids
        {prefix}:chatmeta:{jid}         conversation metadata
        {prefix}:contact:{jid}          contact record
        {prefix}:groupmeta:{jid}        group metadata
        {prefix}:chat:{jid}:messages    message log (list)
    """

    def __init__(self, session_id: str, namespace: str = "wa"):
        self.session_id = session_id
        self.namespace = namespace
        self.prefix = f"{namespace}:{session_id}"

    @classmethod
    def from_config(cls, config: Optional[StoreConfig] = None) -> KeySpace:
        if config is None:
            from chatcache.config.store_config import get_store_config
            config = get_store_config()
        return cls(session_id=config.session_id, namespace=config.key_namespace)

    def known_conversations(self) -> str:
        return f"{self.prefix}:knownJIDs"

    def chat_meta(self, jid: str) -> str:
        return f"{self.prefix}:chatmeta:{jid}"

    def contact(self, jid: str) -> str:
        return f"{self.prefix}:contact:{jid}"

    def group_meta(self, jid: str) -> str:
        return f"{self.prefix}:groupmeta:{jid}"

    def messages(self, jid: str) -> str:
        return f"{self.prefix}:chat:{jid}:messages"

    def __repr__(self) -> str:
        return f"KeySpace(prefix={self.prefix!r})"
