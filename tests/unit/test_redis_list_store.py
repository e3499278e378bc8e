# =============================================================================
# File: tests/unit/test_redis_list_store.py
# Description: RedisListStore command mapping and error translation
# =============================================================================

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from chatcache.common.exceptions.exceptions import StoreUnavailableError
from chatcache.infra.persistence.key_space import KeySpace
from chatcache.infra.persistence.redis_client import RedisListStore


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def redis_store(client):
    return RedisListStore(client, slow_command_threshold_ms=1000)


async def test_primitives_map_to_redis_commands(client, redis_store):
    client.get = AsyncMock(return_value='{"id": "x"}')
    client.set = AsyncMock(return_value=True)
    client.rpush = AsyncMock(return_value=3)
    client.lrange = AsyncMock(return_value=["a", "b"])
    client.lindex = AsyncMock(return_value="b")
    client.llen = AsyncMock(return_value=2)
    client.sadd = AsyncMock(return_value=1)
    client.smembers = AsyncMock(return_value={"j1", "j2"})

    assert await redis_store.get("k") == '{"id": "x"}'
    await redis_store.set("k", "v")
    assert await redis_store.list_append("l", "m") == 3
    assert await redis_store.list_range("l", 0, -1) == ["a", "b"]
    assert await redis_store.list_index("l", -1) == "b"
    assert await redis_store.list_length("l") == 2
    assert await redis_store.set_add("s", "j1") == 1
    assert await redis_store.set_members("s") == {"j1", "j2"}

    client.set.assert_awaited_once_with("k", "v")
    client.rpush.assert_awaited_once_with("l", "m")
    client.lrange.assert_awaited_once_with("l", 0, -1)
    client.sadd.assert_awaited_once_with("s", "j1")


async def test_set_add_without_members_skips_the_call(client, redis_store):
    client.sadd = AsyncMock()

    assert await redis_store.set_add("s") == 0
    client.sadd.assert_not_awaited()


@pytest.mark.parametrize("error", [RedisError("boom"), RedisConnectionError("refused"), OSError("reset")])
async def test_backend_errors_become_store_unavailable(client, redis_store, error):
    client.rpush = AsyncMock(side_effect=error)

    with pytest.raises(StoreUnavailableError) as exc_info:
        await redis_store.list_append("l", "m")

    assert exc_info.value.command == "RPUSH"
    assert exc_info.value.cause is error


async def test_failed_command_is_not_retried(client, redis_store):
    client.get = AsyncMock(side_effect=RedisError("boom"))

    with pytest.raises(StoreUnavailableError):
        await redis_store.get("k")

    assert client.get.await_count == 1


def test_key_layout():
    keys = KeySpace(session_id="dev1")

    assert keys.known_conversations() == "wa:dev1:knownJIDs"
    assert keys.chat_meta("1@s.whatsapp.net") == "wa:dev1:chatmeta:1@s.whatsapp.net"
    assert keys.contact("1@s.whatsapp.net") == "wa:dev1:contact:1@s.whatsapp.net"
    assert keys.group_meta("g@g.us") == "wa:dev1:groupmeta:g@g.us"
    assert keys.messages("1@s.whatsapp.net") == "wa:dev1:chat:1@s.whatsapp.net:messages"
