# =============================================================================
# File: chatcache/infra/persistence/redis_client.py
# Description: Async Redis client and the list store built on it
# =============================================================================
# - Client construction from RedisConfig (per-app, stored on app.state)
# - RedisListStore: the KeyValueListStore port over redis.asyncio
# - Every Redis/socket error surfaces as StoreUnavailableError; no retries
# =============================================================================

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Set

import redis.asyncio as redis
from redis.exceptions import RedisError

from chatcache.common.exceptions.exceptions import StoreUnavailableError
from chatcache.config.redis_config import RedisConfig, get_redis_config
from chatcache.infra.metrics.sync_metrics import (
    chatcache_store_failures_total,
    chatcache_store_slow_commands_total,
)

log = logging.getLogger("chatcache.infra.redis_client")


# -----------------------------------------------------------------------------
# Client lifecycle
# -----------------------------------------------------------------------------
def build_redis_client(config: Optional[RedisConfig] = None, **kwargs) -> redis.Redis:
    """Build a Redis client from RedisConfig (kwargs override config values)"""
    config = config or get_redis_config()
    opts = config.get_connection_kwargs()
    opts.update(kwargs)

    if config.socket_keepalive:
        keepalive_opts = config.get_socket_keepalive_options()
        if keepalive_opts:
            opts["socket_keepalive_options"] = keepalive_opts

    return redis.from_url(config.redis_url, **opts)


async def init_redis_client(config: Optional[RedisConfig] = None, **kwargs) -> redis.Redis:
    """Create the client and verify it with a ping. Raises StoreUnavailableError."""
    client = build_redis_client(config, **kwargs)
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        log.error(f"Failed to connect to Redis: {e}")
        await client.aclose()
        raise StoreUnavailableError("PING", e) from e

    log.info("Redis client connected.")
    return client


async def close_redis_client(client: Optional[redis.Redis]) -> None:
    if client is None:
        return
    try:
        await client.aclose()
        log.info("Redis client closed.")
    except Exception as e:
        log.warning(f"Error closing Redis client: {e}", exc_info=True)


# -----------------------------------------------------------------------------
# List store
# -----------------------------------------------------------------------------
class RedisListStore:
    """KeyValueListStore over redis.asyncio. Expects a client with decode_responses=True."""

    def __init__(self, client: redis.Redis, slow_command_threshold_ms: float = 20.0):
        self._client = client
        self._slow_ms = slow_command_threshold_ms

    @asynccontextmanager
    async def redis_operation(self, command: str, key: str) -> AsyncIterator[redis.Redis]:
        """Time one command and map backend errors to StoreUnavailableError"""
        started = time.perf_counter()
        try:
            yield self._client
        except (RedisError, OSError) as e:
            chatcache_store_failures_total.labels(command=command).inc()
            log.warning(f"Redis command {command} failed for key {key}: {e}")
            raise StoreUnavailableError(command, e) from e
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            if elapsed_ms > self._slow_ms:
                chatcache_store_slow_commands_total.labels(command=command).inc()
                log.debug(f"Slow Redis command {command} on {key}: {elapsed_ms:.1f}ms")

    async def get(self, key: str) -> Optional[str]:
        async with self.redis_operation("GET", key) as r:
            return await r.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self.redis_operation("SET", key) as r:
            await r.set(key, value)

    async def list_append(self, key: str, value: str) -> int:
        async with self.redis_operation("RPUSH", key) as r:
            return await r.rpush(key, value)

    async def list_range(self, key: str, start: int, stop: int) -> List[str]:
        async with self.redis_operation("LRANGE", key) as r:
            return await r.lrange(key, start, stop)

    async def list_index(self, key: str, index: int) -> Optional[str]:
        async with self.redis_operation("LINDEX", key) as r:
            return await r.lindex(key, index)

    async def list_length(self, key: str) -> int:
        async with self.redis_operation("LLEN", key) as r:
            return await r.llen(key)

    async def set_add(self, key: str, *members: str) -> int:
        if not members:
            return 0
        async with self.redis_operation("SADD", key) as r:
            return await r.sadd(key, *members)

    async def set_members(self, key: str) -> Set[str]:
        async with self.redis_operation("SMEMBERS", key) as r:
            return set(await r.smembers(key))

    async def ping(self) -> bool:
        async with self.redis_operation("PING", "-") as r:
            return bool(await r.ping())
