from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from core.errors import DeliveryFailure, NotConnected
from core.menu import default_catalog
from core.models import (
    ButtonsPayload,
    DeliveryOutcome,
    ListPayload,
    Payload,
    Presentation,
    ReplyEntry,
    TextPayload,
)
from core.renderer import MultiModalRenderer, compose_fallback_text
from core.router import ReplyRouter


class FakeSession:
    """Session double: fails the payload types listed in ``reject``."""

    def __init__(self, reject: tuple[type, ...] = (), raise_on_reject: bool = False, connected: bool = True) -> None:
        self.sent: list[tuple[str, Payload]] = []
        self._reject = reject
        self._raise = raise_on_reject
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected

    async def send(self, recipient: str, payload: Payload) -> bool:
        self.sent.append((recipient, payload))
        if isinstance(payload, self._reject):
            if self._raise:
                raise DeliveryFailure(Presentation.BUTTONS, "rejected")
            return False
        return True

    async def request_pairing_code(self, phone_number: str) -> str:
        return "CODE"


def _entry(trigger: str) -> ReplyEntry:
    return ReplyRouter(default_catalog()).route(trigger).entry


def _render(session: FakeSession, entry: ReplyEntry, recipient: str = "7@telegram") -> DeliveryOutcome:
    return asyncio.run(MultiModalRenderer(session).render(recipient, entry))


def test_services_buttons_render_without_degradation() -> None:
    session = FakeSession()
    outcome = _render(session, _entry("services"))

    assert outcome == DeliveryOutcome(mode=Presentation.BUTTONS, delivered=True, degraded=False)
    assert len(session.sent) == 1
    payload = session.sent[0][1]
    assert isinstance(payload, ButtonsPayload)
    assert [button.id for button in payload.buttons] == ["service_bot", "service_web", "service_app", "menu_main"]
    assert payload.footer == "Choose from the buttons below"


@pytest.mark.parametrize("raise_on_reject", [False, True])
def test_buttons_failure_falls_back_to_plain_once(raise_on_reject: bool) -> None:
    session = FakeSession(reject=(ButtonsPayload,), raise_on_reject=raise_on_reject)
    entry = _entry("price_basic")
    outcome = _render(session, entry)

    assert outcome == DeliveryOutcome(mode=Presentation.PLAIN, delivered=True, degraded=True)
    assert len(session.sent) == 2
    fallback = session.sent[1][1]
    assert isinstance(fallback, TextPayload)
    assert fallback.text == entry.body + "\n\n• ✅ Subscribe\n• 🔙 Back"


def test_fallback_text_contains_body_then_every_label() -> None:
    for entry in default_catalog().entries():
        if entry.presentation is not Presentation.BUTTONS:
            continue
        text = compose_fallback_text(entry)
        assert text.startswith(entry.body)
        tail = text[len(entry.body):]
        assert tail.strip().splitlines() == [f"• {option.label}" for option in entry.options]


def test_failed_fallback_is_reported_as_undelivered() -> None:
    session = FakeSession(reject=(ButtonsPayload, TextPayload))
    outcome = _render(session, _entry("support"))

    assert outcome == DeliveryOutcome(mode=Presentation.PLAIN, delivered=False, degraded=True)
    assert len(session.sent) == 2


def test_list_failure_has_no_text_fallback() -> None:
    session = FakeSession(reject=(ListPayload,))
    outcome = _render(session, _entry("prices"))

    assert outcome == DeliveryOutcome(mode=Presentation.LIST, delivered=False, degraded=False)
    assert len(session.sent) == 1


def test_list_payload_shape() -> None:
    session = FakeSession()
    outcome = _render(session, _entry("prices"))

    assert outcome.delivered is True
    payload = session.sent[0][1]
    assert isinstance(payload, ListPayload)
    assert payload.title == "Choose an option"
    assert payload.sections[0].title == "Available plans"
    assert [row.id for row in payload.sections[0].rows] == [
        "price_basic",
        "price_pro",
        "price_enterprise",
        "price_custom",
    ]


def test_plain_entry_sends_body_verbatim() -> None:
    session = FakeSession()
    entry = ReplyEntry(body="*hello*")
    outcome = _render(session, entry)

    assert outcome == DeliveryOutcome(mode=Presentation.PLAIN, delivered=True)
    assert session.sent == [("7@telegram", TextPayload(text="*hello*"))]


def test_unexpected_send_exception_counts_as_not_delivered() -> None:
    class ExplodingSession(FakeSession):
        async def send(self, recipient: str, payload: Payload) -> bool:
            self.sent.append((recipient, payload))
            raise OSError("socket closed")

    session = ExplodingSession()
    outcome = _render(session, ReplyEntry(body="hi"))
    assert outcome.delivered is False


def test_not_connected_raises_before_sending() -> None:
    session = FakeSession(connected=False)
    with pytest.raises(NotConnected):
        _render(session, _entry("services"))
    assert session.sent == []


def test_explicit_footer_overrides_default() -> None:
    session = FakeSession()
    entry = ReplyEntry(
        body="b",
        presentation=Presentation.BUTTONS,
        options=_entry("services").options,
        footer="",
    )
    _render(session, entry)
    payload: Optional[Payload] = session.sent[0][1]
    assert isinstance(payload, ButtonsPayload)
    assert payload.footer == ""


def test_session_drop_before_fallback_keeps_degraded_record() -> None:
    class DroppingSession(FakeSession):
        async def send(self, recipient: str, payload: Payload) -> bool:
            self.sent.append((recipient, payload))
            self.connected = False
            return False

    session = DroppingSession()
    outcome = _render(session, _entry("price_basic"))

    assert outcome == DeliveryOutcome(mode=Presentation.PLAIN, delivered=False, degraded=True)
    assert len(session.sent) == 1
