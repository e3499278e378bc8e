# =============================================================================
# File: tests/conftest.py
# Description: Shared fixtures - in-memory store, fake origin, wired engine
# =============================================================================

import pytest

from chatcache.infra.event_bus.event_router import EventRouter
from chatcache.infra.persistence.key_space import KeySpace
from chatcache.sync.exporter import SnapshotExporter
from chatcache.sync.projectors import SyncProjector
from chatcache.sync.read_views import StoreReadViews
from tests.fakes.fake_group_metadata_adapter import FakeGroupMetadataAdapter
from tests.fakes.fake_list_store import FakeListStore

FIXED_NOW_MS = 1700000000123


@pytest.fixture
def store():
    return FakeListStore()


@pytest.fixture
def metadata_port():
    return FakeGroupMetadataAdapter()


@pytest.fixture
def keys():
    return KeySpace(session_id="dev1")


@pytest.fixture
def projector(store, keys, metadata_port):
    return SyncProjector(store, keys, metadata_port=metadata_port, clock=lambda: FIXED_NOW_MS)


@pytest.fixture
def router(projector):
    return EventRouter(projector)


@pytest.fixture
def read_views(store, keys, metadata_port):
    return StoreReadViews(store, keys, metadata_port=metadata_port)


@pytest.fixture
def exporter(read_views):
    return SnapshotExporter(read_views)
