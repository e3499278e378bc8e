# =============================================================================
# File: tests/unit/test_codec.py
# =============================================================================

import json

import pytest

from chatcache.common.exceptions.exceptions import CorruptRecordError
from chatcache.sync.codec import EntityCodec
from chatcache.sync.read_models import Chat, Contact, GroupMetadata, Message
from tests.fakes.factories import group_payload, message_payload

codec = EntityCodec()


def test_encode_writes_only_set_fields_by_wire_name():
    contact = Contact(id="1@s.whatsapp.net", name="Alice", verified_name="Alice Inc")

    assert json.loads(codec.encode(contact)) == {
        "id": "1@s.whatsapp.net",
        "name": "Alice",
        "verifiedName": "Alice Inc",
    }


def test_decode_absent_value_is_none():
    assert codec.decode(Chat, None) is None


@pytest.mark.parametrize("raw", ["", "{not json", '{"name": "no id"}', "[]"])
def test_decode_invalid_value_raises_corrupt_record(raw):
    with pytest.raises(CorruptRecordError) as exc_info:
        codec.decode(Contact, raw)

    assert exc_info.value.entity == "Contact"


def test_message_with_unknown_fields_survives_storage():
    msg = Message.model_validate(message_payload("1@s.whatsapp.net", "M1", status=3, broadcast=False))

    decoded = codec.decode(Message, codec.encode(msg))

    assert decoded == msg
    assert decoded.model_extra == {"status": 3, "broadcast": False}
    assert codec.encode(decoded) == codec.encode(msg)


def test_group_metadata_round_trip_keeps_participants():
    meta = GroupMetadata.model_validate(group_payload("g1@g.us"))

    decoded = codec.decode(GroupMetadata, codec.encode(meta))

    assert decoded == meta
    assert [p.id for p in decoded.participants] == ["a@s.whatsapp.net", "b@s.whatsapp.net"]


def test_decode_many_fails_on_one_corrupt_entry():
    good = codec.encode(Message.model_validate(message_payload("1@s.whatsapp.net", "M1")))

    with pytest.raises(CorruptRecordError):
        codec.decode_many(Message, [good, "garbage"])
