# =============================================================================
# File: tests/unit/test_group_metadata_port.py
# =============================================================================

from chatcache.sync.ports.group_metadata_port import fetch_group_metadata_best_effort
from chatcache.sync.read_models import GroupMetadata
from tests.fakes.fake_group_metadata_adapter import FakeGroupMetadataAdapter

GROUP = "999-123@g.us"


async def test_mapping_without_id_gets_the_requested_id():
    port = FakeGroupMetadataAdapter()
    port.groups[GROUP] = {"subject": "Team"}

    meta = await fetch_group_metadata_best_effort(port, GROUP, context="test")

    assert meta.id == GROUP
    assert meta.subject == "Team"


async def test_model_with_other_id_is_rekeyed():
    port = FakeGroupMetadataAdapter()
    port.groups[GROUP] = GroupMetadata(id="other@g.us", subject="Team")

    meta = await fetch_group_metadata_best_effort(port, GROUP, context="test")

    assert meta.id == GROUP
    assert meta.model_dump(by_alias=True, exclude_unset=True) == {"id": GROUP, "subject": "Team"}


async def test_unusable_answers_become_none():
    port = FakeGroupMetadataAdapter()
    port.groups[GROUP] = ["not", "a", "record"]

    assert await fetch_group_metadata_best_effort(port, GROUP, context="test") is None
    assert await fetch_group_metadata_best_effort(port, "missing@g.us", context="test") is None
    assert await fetch_group_metadata_best_effort(None, GROUP, context="test") is None
