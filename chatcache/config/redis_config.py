# =============================================================================
# File: chatcache/config/redis_config.py
# Description: Configuration for the Redis store client with Pydantic v2
# =============================================================================
from functools import lru_cache
from typing import Optional, Dict, Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import SettingsConfigDict

from chatcache.common.base.base_config import BASE_CONFIG_DICT, BaseConfig


# noinspection PyMethodParameters
class RedisConfig(BaseConfig):
    """
    Configuration for the Redis connection backing the cache.

    This configuration controls:
    - Connection settings
    - Socket behaviour
    - Slow command monitoring

    Store calls are never retried, so there is no retry section.
    """

    model_config = SettingsConfigDict(
        **BASE_CONFIG_DICT,
        env_prefix='REDIS_',
    )

    # =========================================================================
    # Connection Settings
    # =========================================================================

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )

    max_connections: int = Field(
        default=50,
        description="Maximum number of connections in the pool"
    )

    # Socket settings
    socket_timeout: float = Field(
        default=15.0,
        description="Socket timeout in seconds"
    )

    socket_connect_timeout: float = Field(
        default=5.0,
        description="Socket connection timeout in seconds"
    )

    socket_keepalive: bool = Field(
        default=True,
        description="Enable TCP keepalive"
    )

    socket_keepalive_interval: int = Field(
        default=60,
        description="TCP keepalive interval in seconds"
    )

    decode_responses: bool = Field(
        default=True,
        description="Automatically decode responses to strings"
    )

    # =========================================================================
    # Monitoring
    # =========================================================================

    slow_command_threshold_ms: int = Field(
        default=20,
        description="Log store commands slower than this (ms)"
    )

    # =========================================================================
    # Security
    # =========================================================================

    redis_password: Optional[SecretStr] = Field(
        default=None,
        description="Redis password"
    )

    redis_username: Optional[str] = Field(
        default=None,
        description="Redis username (Redis 6+)"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator('redis_url')
    def validate_redis_url(cls, v):
        """Validate Redis URL format"""
        if not v:
            raise ValueError("redis_url cannot be empty")
        if not v.startswith(('redis://', 'rediss://', 'unix://')):
            raise ValueError("redis_url must start with redis://, rediss://, or unix://")
        return v

    @field_validator('max_connections')
    def validate_max_connections(cls, v):
        """Ensure max_connections is reasonable"""
        if v < 1:
            raise ValueError("max_connections must be at least 1")
        if v > 1000:
            raise ValueError("max_connections should not exceed 1000")
        return v

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def get_connection_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for Redis connection"""
        kwargs = {
            'decode_responses': self.decode_responses,
            'socket_timeout': self.socket_timeout,
            'socket_connect_timeout': self.socket_connect_timeout,
            'socket_keepalive': self.socket_keepalive,
            'max_connections': self.max_connections,
        }

        if self.redis_password:
            kwargs['password'] = self.redis_password.get_secret_value()

        if self.redis_username:
            kwargs['username'] = self.redis_username

        return kwargs

    def get_socket_keepalive_options(self) -> Dict[int, int]:
        """Get socket keepalive options"""
        import socket

        keepalive_opts = {}
        if self.socket_keepalive and self.socket_keepalive_interval > 0:
            if hasattr(socket, "TCP_KEEPIDLE"):
                keepalive_opts[socket.TCP_KEEPIDLE] = self.socket_keepalive_interval
            if hasattr(socket, "TCP_KEEPINTVL"):
                keepalive_opts[socket.TCP_KEEPINTVL] = max(1, self.socket_keepalive_interval // 3)
            if hasattr(socket, "TCP_KEEPCNT"):
                keepalive_opts[socket.TCP_KEEPCNT] = 3

        return keepalive_opts


# =============================================================================
# Factory Function
# =============================================================================

@lru_cache(maxsize=1)
def get_redis_config() -> RedisConfig:
    """Get Redis configuration singleton (cached)."""
    return RedisConfig()


def reset_redis_config() -> None:
    """Reset config singleton (for testing)."""
    get_redis_config.cache_clear()
