# =============================================================================
# File: tests/unit/test_exporter.py
# =============================================================================

from chatcache.sync.enums import EventKind
from tests.fakes.factories import message_payload

ALICE = "111@s.whatsapp.net"
BOB = "222@s.whatsapp.net"


async def test_export_all_covers_every_known_conversation(router, exporter):
    await router.dispatch(EventKind.CHAT_UPSERT, [{"id": ALICE, "name": "A"}])
    await router.dispatch(EventKind.CONTACT_UPSERT, [{"id": ALICE, "name": "Alice"}])
    await router.dispatch(EventKind.MESSAGE_UPSERT, [message_payload(ALICE, "M1"), message_payload(BOB, "M2")])

    snapshot = await exporter.export_all()

    assert set(snapshot.conversation_meta) == {ALICE, BOB}
    assert snapshot.conversation_meta[ALICE].name == "A"
    assert snapshot.conversation_meta[BOB] is None
    assert [m.key.id for m in snapshot.messages[ALICE]] == ["M1"]
    assert [m.key.id for m in snapshot.messages[BOB]] == ["M2"]
    assert snapshot.contacts[ALICE].name == "Alice"
    assert snapshot.contacts[BOB] is None


async def test_export_uses_wire_names(router, exporter):
    await router.dispatch(EventKind.CHAT_UPSERT, [{"id": ALICE, "unreadCount": 1}])

    dumped = (await exporter.export_all()).model_dump(mode="json", by_alias=True, exclude_unset=True)

    assert dumped == {
        "conversationMeta": {ALICE: {"id": ALICE, "unreadCount": 1}},
        "messages": {ALICE: []},
        "contacts": {ALICE: None},
    }


async def test_empty_store_exports_empty_snapshot(exporter):
    snapshot = await exporter.export_all()

    assert snapshot.conversation_meta == {}
    assert snapshot.messages == {}
    assert snapshot.contacts == {}
