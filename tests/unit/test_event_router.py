# =============================================================================
# File: tests/unit/test_event_router.py
# =============================================================================

import asyncio

import pytest

from chatcache.infra.cqrs.projector_decorators import get_projection_handlers, projection
from chatcache.infra.event_bus.event_router import EventRouter, resolve_kind
from chatcache.sync.enums import ORIGIN_EVENT_ALIASES, EventKind
from chatcache.sync.exceptions import UnknownEventKindError
from tests.fakes.factories import message_payload


class RecordingSource:
    """Minimal emitter exposing on(name, handler)"""

    def __init__(self):
        self.handlers = {}

    def on(self, name, handler):
        self.handlers[name] = handler


@pytest.mark.parametrize("name,kind", list(ORIGIN_EVENT_ALIASES.items()))
def test_origin_names_resolve(name, kind):
    assert resolve_kind(name) is kind


def test_ingress_names_resolve():
    assert resolve_kind("chat-upsert") is EventKind.CHAT_UPSERT
    assert resolve_kind(EventKind.GROUP_UPDATE) is EventKind.GROUP_UPDATE


def test_unknown_kind_is_rejected():
    with pytest.raises(UnknownEventKindError):
        resolve_kind("presence.update")


def test_projector_covers_every_event_kind(projector):
    handlers = get_projection_handlers(projector)

    assert set(handlers) == set(EventKind)
    assert handlers[EventKind.CHAT_UPSERT].method_name == "on_chats_upsert"


def test_duplicate_projection_is_rejected():
    class Broken:
        @projection(EventKind.CHAT_UPSERT)
        async def first(self, event):
            pass

        @projection(EventKind.CHAT_UPSERT)
        async def second(self, event):
            pass

    with pytest.raises(ValueError):
        get_projection_handlers(Broken())


def test_sync_handler_is_rejected():
    with pytest.raises(TypeError):
        @projection(EventKind.CHAT_UPSERT)
        def not_async(self, event):
            pass


async def test_invalid_payload_is_dropped(router, store):
    applied = await router.dispatch(EventKind.PARTICIPANT_UPDATE, {"participants": ["x"]})

    assert applied is False
    assert store.values == {}


async def test_unknown_kind_raises_on_dispatch(router):
    with pytest.raises(UnknownEventKindError):
        await router.dispatch("call", {})


async def test_unhandled_kind_is_dropped(store):
    class OnlyChats:
        def __init__(self):
            self.seen = []

        @projection(EventKind.CHAT_UPSERT)
        async def on_chats(self, event):
            self.seen.append(event)

    projector = OnlyChats()
    router = EventRouter(projector)

    assert await router.dispatch(EventKind.GROUP_UPSERT, []) is False
    assert await router.dispatch(EventKind.CHAT_UPSERT, [{"id": "1@s.whatsapp.net"}]) is True
    assert len(projector.seen) == 1


async def test_concurrent_dispatches_do_not_interleave():
    class SlowChats:
        def __init__(self):
            self.trace = []

        @projection(EventKind.CHAT_UPSERT)
        async def on_chats(self, event):
            self.trace.append(("enter", event.chats[0].id))
            await asyncio.sleep(0.01)
            self.trace.append(("exit", event.chats[0].id))

    projector = SlowChats()
    router = EventRouter(projector)

    results = await asyncio.gather(
        router.dispatch(EventKind.CHAT_UPSERT, [{"id": "1@s.whatsapp.net"}]),
        router.dispatch(EventKind.CHAT_UPSERT, [{"id": "2@s.whatsapp.net"}]),
    )

    assert results == [True, True]
    assert projector.trace == [
        ("enter", "1@s.whatsapp.net"),
        ("exit", "1@s.whatsapp.net"),
        ("enter", "2@s.whatsapp.net"),
        ("exit", "2@s.whatsapp.net"),
    ]


async def test_bind_registers_ingress_names(router, store, keys):
    source = RecordingSource()

    router.bind(source)
    await source.handlers["message-upsert"]([message_payload("1@s.whatsapp.net", "M1")])

    assert set(source.handlers) == {k.value for k in EventKind}
    assert len(store.lists[keys.messages("1@s.whatsapp.net")]) == 1


async def test_bind_with_origin_names(router, store, keys):
    source = RecordingSource()

    router.bind(source, use_origin_names=True)
    await source.handlers["chats.upsert"]([{"id": "1@s.whatsapp.net"}])

    assert set(source.handlers) == set(ORIGIN_EVENT_ALIASES)
    assert keys.chat_meta("1@s.whatsapp.net") in store.values
