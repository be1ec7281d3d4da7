from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from core.dispatcher import Dispatcher
from core.events import ConnectionNotice, ErrorNotice, InboundNotice, Notice, ReplyNotice
from core.menu import default_catalog
from core.models import (
    ButtonsPayload,
    ConnectionStatus,
    InboundMessage,
    ListPayload,
    Payload,
    Presentation,
    TextPayload,
)
from core.renderer import MultiModalRenderer
from core.router import ReplyRouter


class FakeSession:
    def __init__(self, reject: tuple[type, ...] = (), connected: bool = True) -> None:
        self.sent: list[tuple[str, Payload]] = []
        self._reject = reject
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected

    async def send(self, recipient: str, payload: Payload) -> bool:
        self.sent.append((recipient, payload))
        return not isinstance(payload, self._reject)

    async def request_pairing_code(self, phone_number: str) -> str:
        return "CODE"


class FakeSink:
    def __init__(self) -> None:
        self.events: list[Notice] = []

    def publish(self, event: Notice) -> None:
        self.events.append(event)


def _dispatcher(session: FakeSession, sink: FakeSink) -> Dispatcher:
    return Dispatcher(
        router=ReplyRouter(default_catalog()),
        renderer=MultiModalRenderer(session),
        sink=sink,
    )


def _inbound(identifier: str, display: str = "", from_me: bool = False) -> InboundMessage:
    return InboundMessage(
        sender_id="100@telegram",
        machine_identifier=identifier,
        display_text=display or identifier,
        from_me=from_me,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_handle_routes_renders_then_notifies_in_order() -> None:
    session = FakeSession()
    sink = FakeSink()
    outcome = asyncio.run(_dispatcher(session, sink).handle(_inbound("services", "🛍️ Services")))

    assert outcome is not None and outcome.delivered
    assert [event.kind for event in sink.events] == ["inbound-message", "reply-sent"]
    inbound, reply = sink.events
    assert isinstance(inbound, InboundNotice)
    assert inbound.text == "🛍️ Services"
    assert inbound.raw_identifier == "services"
    assert inbound.timestamp == "2024-01-01T00:00:00+00:00"
    assert isinstance(reply, ReplyNotice)
    assert reply.to == "100@telegram"
    assert reply.mode == "buttons"
    assert [option["id"] for option in reply.options or ()] == [
        "service_bot",
        "service_web",
        "service_app",
        "menu_main",
    ]


def test_display_text_never_participates_in_routing() -> None:
    session = FakeSession()
    sink = FakeSink()
    asyncio.run(_dispatcher(session, sink).handle(_inbound("unknown_id", display="services")))

    reply = sink.events[-1]
    assert isinstance(reply, ReplyNotice)
    assert reply.text == default_catalog().default.body


def test_self_authored_messages_are_ignored() -> None:
    session = FakeSession()
    sink = FakeSink()
    outcome = asyncio.run(_dispatcher(session, sink).handle(_inbound("services", from_me=True)))

    assert outcome is None
    assert session.sent == []
    assert sink.events == []


def test_degraded_delivery_is_reported() -> None:
    session = FakeSession(reject=(ButtonsPayload,))
    sink = FakeSink()
    asyncio.run(_dispatcher(session, sink).handle(_inbound("price_basic")))

    reply = sink.events[-1]
    assert isinstance(reply, ReplyNotice)
    assert reply.mode == "plain"
    assert reply.delivered is True
    assert reply.degraded is True


def test_not_connected_still_notifies() -> None:
    session = FakeSession(connected=False)
    sink = FakeSink()
    outcome = asyncio.run(_dispatcher(session, sink).handle(_inbound("menu")))

    assert outcome is not None and outcome.delivered is False
    assert [event.kind for event in sink.events] == ["error", "inbound-message", "reply-sent"]
    reply = sink.events[-1]
    assert isinstance(reply, ReplyNotice)
    assert reply.delivered is False


def test_run_processes_queue_in_order_and_survives_errors() -> None:
    session = FakeSession()
    sink = FakeSink()
    dispatcher = _dispatcher(session, sink)

    class BrokenMessage:
        sender_id = "broken"
        from_me = False
        machine_identifier = None  # route() fails on a missing identifier
        display_text = ""

    async def scenario() -> None:
        queue: asyncio.Queue = asyncio.Queue()
        for item in [_inbound("services"), BrokenMessage(), _inbound("support")]:
            queue.put_nowait(item)
        task = asyncio.create_task(dispatcher.run(queue))
        await queue.join()
        task.cancel()

    asyncio.run(scenario())

    kinds = [event.kind for event in sink.events]
    assert kinds == ["inbound-message", "reply-sent", "error", "inbound-message", "reply-sent"]
    replies = [event for event in sink.events if isinstance(event, ReplyNotice)]
    assert [reply.text for reply in replies] == [
        default_catalog().lookup("services").body,
        default_catalog().lookup("support").body,
    ]


def test_send_custom_normalizes_recipient_and_builds_list() -> None:
    session = FakeSession()
    sink = FakeSink()
    outcome = asyncio.run(
        _dispatcher(session, sink).send_custom(
            "12345",
            "Pick one",
            kind="list",
            options=[{"label": "First"}, {"id": "second", "text": "Second"}],
        )
    )

    assert outcome.mode is Presentation.LIST
    recipient, payload = session.sent[0]
    assert recipient == "12345@telegram"
    assert isinstance(payload, ListPayload)
    assert payload.title == "Choose"
    assert payload.footer == ""
    section = payload.sections[0]
    assert section.title == "Available options"
    assert [(row.id, row.title, row.description) for row in section.rows] == [
        ("row_0", "First", "Tap to choose"),
        ("second", "Second", "Tap to choose"),
    ]
    assert [event.kind for event in sink.events] == ["reply-sent"]


def test_send_custom_buttons_fall_back_like_catalog_replies() -> None:
    session = FakeSession(reject=(ButtonsPayload,))
    sink = FakeSink()
    outcome = asyncio.run(
        _dispatcher(session, sink).send_custom("1@telegram", "Hi", kind="buttons", options=[{"label": "Yes"}])
    )

    assert outcome.degraded is True
    assert session.sent[1] == ("1@telegram", TextPayload(text="Hi\n\n• Yes"))


def test_send_custom_without_options_sends_text() -> None:
    session = FakeSession()
    sink = FakeSink()
    asyncio.run(_dispatcher(session, sink).send_custom("1", "Hi", kind="buttons"))
    assert session.sent == [("1@telegram", TextPayload(text="Hi"))]


@pytest.mark.parametrize("to, text, kind", [("", "x", "text"), ("1", "", "text"), ("1", "x", "carousel")])
def test_send_custom_rejects_bad_input(to: str, text: str, kind: str) -> None:
    session = FakeSession()
    with pytest.raises(ValueError):
        asyncio.run(_dispatcher(session, FakeSink()).send_custom(to, text, kind=kind))
    assert session.sent == []


def test_handle_status_emits_connection_events() -> None:
    sink = FakeSink()
    dispatcher = _dispatcher(FakeSession(), sink)
    dispatcher.handle_status(ConnectionStatus(connected=True, identity="@menubot"))
    dispatcher.handle_status(ConnectionStatus(connected=False))

    assert sink.events == [
        ConnectionNotice(connected=True, message="Connected!", identity="@menubot"),
        ConnectionNotice(connected=False, message="Disconnected", identity=None),
    ]
    assert not any(isinstance(event, ErrorNotice) for event in sink.events)
