# =============================================================================
# File: chatcache/config/store_config.py
# Description: Configuration for the event-driven conversation store
# =============================================================================

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from chatcache.common.base.base_config import BASE_CONFIG_DICT, BaseConfig


# noinspection PyMethodParameters
class StoreConfig(BaseConfig):
    """
    Settings for the conversation store.

    Every key written by the store is namespaced under
    ``{key_namespace}:{session_id}`` so several sessions can share one Redis.
    """

    model_config = SettingsConfigDict(
        **BASE_CONFIG_DICT,
        env_prefix='CHATCACHE_',
    )

    session_id: str = Field(
        default="unknown_device",
        description="Session/device identifier used in the key prefix"
    )

    key_namespace: str = Field(
        default="wa",
        description="Top-level key namespace"
    )

    default_window_size: int = Field(
        default=20,
        description="Default number of messages returned by a window query"
    )

    group_suffix: str = Field(
        default="@g.us",
        description="Conversation id suffix that marks a group"
    )

    history_fetch_group_metadata: bool = Field(
        default=True,
        description="Fetch group metadata for group chats seen in a history snapshot"
    )

    event_queue_size: int = Field(
        default=10000,
        description="Max pending events in the in-process event bus (0 = unbounded)"
    )

    @field_validator('session_id', 'key_namespace')
    def validate_key_part(cls, v):
        """Key parts must be non-empty and must not contain the separator"""
        if not v:
            raise ValueError("key part cannot be empty")
        if ':' in v:
            raise ValueError("key part cannot contain ':'")
        return v

    @field_validator('default_window_size')
    def validate_window_size(cls, v):
        if v < 1:
            raise ValueError("default_window_size must be at least 1")
        return v


@lru_cache(maxsize=1)
def get_store_config() -> StoreConfig:
    """Get store configuration singleton (cached)."""
    return StoreConfig()


def reset_store_config() -> None:
    """Reset config singleton (for testing)."""
    get_store_config.cache_clear()
