# =============================================================================
# File: chatcache/core/lifespan.py
# Description: Application lifespan management (startup/shutdown)
# =============================================================================

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from chatcache import __version__
from chatcache.config.redis_config import get_redis_config
from chatcache.config.store_config import StoreConfig, get_store_config
from chatcache.infra.event_bus.event_router import EventRouter
from chatcache.infra.event_bus.in_process_bus import InProcessEventBus
from chatcache.infra.persistence.key_space import KeySpace
from chatcache.infra.persistence.redis_client import RedisListStore, close_redis_client, init_redis_client
from chatcache.sync.exporter import SnapshotExporter
from chatcache.sync.ports.group_metadata_port import GroupMetadataPort
from chatcache.sync.ports.list_store_port import KeyValueListStore
from chatcache.sync.projectors import SyncProjector
from chatcache.sync.read_views import StoreReadViews

logger = logging.getLogger("chatcache.lifespan")


def wire_components(
        state,
        store: KeyValueListStore,
        config: Optional[StoreConfig] = None,
        metadata_port: Optional[GroupMetadataPort] = None,
) -> None:
    """Build the sync engine around a store and attach every component to `state`"""
    config = config or get_store_config()
    keys = KeySpace.from_config(config)

    projector = SyncProjector(
        store,
        keys,
        metadata_port=metadata_port,
        fetch_group_metadata_on_history=config.history_fetch_group_metadata,
        group_suffix=config.group_suffix,
    )
    read_views = StoreReadViews(
        store,
        keys,
        metadata_port=metadata_port,
        group_suffix=config.group_suffix,
        default_window_size=config.default_window_size,
    )
    event_router = EventRouter(projector)
    event_bus = InProcessEventBus(maxsize=config.event_queue_size)
    event_router.bind(event_bus, use_origin_names=True)
    event_router.bind(event_bus)

    state.store = store
    state.keys = keys
    state.projector = projector
    state.read_views = read_views
    state.exporter = SnapshotExporter(read_views)
    state.event_router = event_router
    state.event_bus = event_bus


# =============================================================================
# LIFESPAN (Startup/Shutdown)
# =============================================================================
@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """
    Startup: Redis client -> store -> sync engine -> event bus consumer.

    A store already placed on app.state (embedding code, tests) is used
    as-is and no Redis client is created.
    """
    logger.info(f"chatcache {__version__} starting up...")
    state = app_instance.state
    redis_client = None

    try:
        store = getattr(state, "store", None)
        if store is None:
            redis_config = get_redis_config()
            redis_client = await init_redis_client(redis_config)
            store = RedisListStore(redis_client, redis_config.slow_command_threshold_ms)

        wire_components(
            state,
            store,
            metadata_port=getattr(state, "group_metadata_port", None),
        )
        state.event_bus.start()
        logger.info(f"Conversation cache ready for session {state.keys.session_id}")

    except Exception as startup_error:
        logger.error(f"Critical error during startup: {startup_error}", exc_info=True)
        await close_redis_client(redis_client)
        raise

    try:
        yield
    finally:
        logger.info("Shutting down...")
        await state.event_bus.stop()
        await close_redis_client(redis_client)
        logger.info("Shutdown complete")
