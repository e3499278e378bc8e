# =============================================================================
# File: tests/unit/test_config.py
# =============================================================================

import pytest
from pydantic import ValidationError

from chatcache.config.redis_config import RedisConfig, get_redis_config, reset_redis_config
from chatcache.config.store_config import StoreConfig, get_store_config, reset_store_config
from chatcache.infra.persistence.key_space import KeySpace


def test_store_config_from_env(monkeypatch):
    monkeypatch.setenv("CHATCACHE_SESSION_ID", "device-7")
    monkeypatch.setenv("CHATCACHE_DEFAULT_WINDOW_SIZE", "50")
    reset_store_config()

    config = get_store_config()

    assert config.session_id == "device-7"
    assert config.default_window_size == 50
    assert KeySpace.from_config(config).prefix == "wa:device-7"
    reset_store_config()


@pytest.mark.parametrize("session_id", ["", "a:b"])
def test_store_config_rejects_bad_key_parts(session_id):
    with pytest.raises(ValidationError):
        StoreConfig(session_id=session_id)


def test_redis_config_masks_password():
    config = RedisConfig(redis_url="redis://localhost:6379/0", redis_password="s3cret")

    assert config.get_connection_kwargs()["password"] == "s3cret"
    assert "s3cret" not in repr(config)


def test_redis_config_rejects_bad_url():
    with pytest.raises(ValidationError):
        RedisConfig(redis_url="http://localhost")


def test_redis_config_from_env(monkeypatch):
    monkeypatch.setenv("REDIS_SLOW_COMMAND_THRESHOLD_MS", "50")
    reset_redis_config()

    assert get_redis_config().slow_command_threshold_ms == 50
    reset_redis_config()
