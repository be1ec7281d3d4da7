"""Multi-modal reply rendering with graceful degradation.

The renderer turns a ``ReplyEntry`` into a wire payload and drives the
session's send capability:

- LIST: one attempt, no fallback on failure.
- BUTTONS: on failure, exactly one fallback to PLAIN text listing each
  option label as a bullet under the body.
- PLAIN: body verbatim.
"""

from __future__ import annotations

import logging

from core.config import DeliveryConfig
from core.errors import DeliveryFailure, NotConnected
from core.models import (
    ButtonsPayload,
    DeliveryOutcome,
    ListPayload,
    ListRow,
    ListSection,
    Payload,
    Presentation,
    ReplyEntry,
    TextPayload,
)
from core.ports import SessionPort

LOGGER = logging.getLogger(__name__)

BULLET = "•"


def compose_fallback_text(entry: ReplyEntry) -> str:
    """Return the plain-text rendition of an interactive entry."""

    if not entry.options:
        return entry.body
    lines = [f"{BULLET} {option.label}" for option in entry.options]
    return entry.body + "\n\n" + "\n".join(lines)


class MultiModalRenderer:
    """Render catalog entries through a session, degrading buttons to text."""

    def __init__(self, session: SessionPort, delivery: DeliveryConfig = DeliveryConfig()) -> None:
        self._session = session
        self._delivery = delivery

    def build_payload(self, entry: ReplyEntry) -> Payload:
        """Return the richest payload for the entry's presentation."""

        if entry.presentation is Presentation.LIST:
            rows = tuple(
                ListRow(id=option.id, title=option.label, description=option.description)
                for option in entry.options
            )
            section = ListSection(title=entry.section_title or self._delivery.list_section_title, rows=rows)
            return ListPayload(
                text=entry.body,
                title=entry.title or self._delivery.list_title,
                sections=(section,),
                footer=entry.footer if entry.footer is not None else self._delivery.list_footer,
                button_text=entry.button_text or self._delivery.list_button_text,
            )
        if entry.presentation is Presentation.BUTTONS:
            return ButtonsPayload(
                text=entry.body,
                buttons=entry.options,
                footer=entry.footer if entry.footer is not None else self._delivery.buttons_footer,
            )
        return TextPayload(text=entry.body)

    async def render(self, recipient: str, entry: ReplyEntry) -> DeliveryOutcome:
        """Send the entry and report the delivered mode.

        Raises ``NotConnected`` when the session cannot send at all.
        """

        payload = self.build_payload(entry)
        mode = entry.presentation
        delivered = await self._attempt(recipient, payload, mode)

        if mode is Presentation.LIST:
            # Lists have no text rendition; the failure goes back to the caller.
            if not delivered:
                LOGGER.warning("List message to %s was not delivered", recipient)
            return DeliveryOutcome(mode=mode, delivered=delivered)

        if mode is Presentation.BUTTONS and not delivered:
            LOGGER.warning("Buttons rejected for %s, falling back to plain text", recipient)
            fallback = TextPayload(text=compose_fallback_text(entry))
            try:
                delivered = await self._attempt(recipient, fallback, Presentation.PLAIN)
            except NotConnected:
                LOGGER.error("Session dropped before the plain-text fallback to %s", recipient)
                delivered = False
            if not delivered:
                LOGGER.error("Plain-text fallback to %s failed as well", recipient)
            return DeliveryOutcome(mode=Presentation.PLAIN, delivered=delivered, degraded=True)

        return DeliveryOutcome(mode=mode, delivered=delivered)

    async def _attempt(self, recipient: str, payload: Payload, mode: Presentation) -> bool:
        if not self._session.is_connected():
            raise NotConnected("send")
        try:
            sent = await self._session.send(recipient, payload)
        except NotConnected:
            raise
        except DeliveryFailure as exc:
            LOGGER.warning("%s (to %s)", exc, recipient)
            return False
        except Exception:
            LOGGER.exception("Error sending %s message to %s", mode.value, recipient)
            return False
        if sent:
            LOGGER.info("%s message sent to %s", mode.value.capitalize(), recipient)
        return bool(sent)
