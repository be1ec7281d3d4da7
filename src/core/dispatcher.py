"""Core dispatch loop.

This module is transport-agnostic. It only relies on the session and
notification ports, enabling other transports or consoles without changes
here. Each inbound event goes through a strict order:

1) Drop self-authored messages
2) Route the machine identifier through the catalog
3) Render the reply (with the single buttons -> text fallback)
4) Notify: inbound message first, then the reply
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Optional

from core.addressing import ADDRESS_SUFFIX, normalize_recipient
from core.errors import NotConnected
from core.events import ConnectionNotice, ErrorNotice, InboundNotice, ReplyNotice
from core.models import (
    ConnectionStatus,
    DeliveryOutcome,
    InboundMessage,
    Presentation,
    ReplyEntry,
    ReplyOption,
)
from core.ports import NotificationSink
from core.renderer import MultiModalRenderer
from core.router import ReplyRouter

LOGGER = logging.getLogger(__name__)

CUSTOM_KINDS = {"text", "buttons", "list"}
CUSTOM_LIST_TITLE = "Choose"
CUSTOM_LIST_SECTION = "Available options"
CUSTOM_ROW_DESCRIPTION = "Tap to choose"


class Dispatcher:
    """Orchestrates routing, rendering, and notifications per inbound event."""

    def __init__(
        self,
        router: ReplyRouter,
        renderer: MultiModalRenderer,
        sink: NotificationSink,
        address_suffix: str = ADDRESS_SUFFIX,
    ) -> None:
        self._router = router
        self._renderer = renderer
        self._sink = sink
        self._address_suffix = address_suffix

    async def handle(self, message: InboundMessage) -> Optional[DeliveryOutcome]:
        """Process one inbound message through the reply cycle."""

        # Our own outbound messages must never be routed, or the bot would
        # answer itself forever.
        if message.from_me:
            LOGGER.debug("Ignoring self-authored message to %s", message.sender_id)
            return None

        LOGGER.info(
            "From %s: %s (id: %s)",
            message.sender_id,
            message.display_text,
            message.machine_identifier,
        )
        result = self._router.route(message.machine_identifier, message.sender_id)
        if not result.matched:
            LOGGER.debug("No catalog match for %r, using default entry", result.trigger)

        outcome = await self._deliver(result.recipient, result.entry)

        self._sink.publish(
            InboundNotice(
                sender=message.sender_id,
                text=message.display_text,
                raw_identifier=message.machine_identifier,
                timestamp=message.timestamp.isoformat(),
            )
        )
        self._sink.publish(ReplyNotice.from_delivery(result.recipient, result.entry, outcome))
        return outcome

    async def run(self, queue: "asyncio.Queue[InboundMessage]") -> None:
        """Consume inbound messages one at a time, in arrival order."""

        while True:
            message = await queue.get()
            try:
                await self.handle(message)
            except Exception as exc:
                LOGGER.exception("Error while handling message from %s", message.sender_id)
                self._sink.publish(ErrorNotice(f"Failed to handle message from {message.sender_id}: {exc}"))
            finally:
                queue.task_done()

    async def send_custom(
        self,
        to: str,
        text: str,
        kind: str = "text",
        options: Iterable[Mapping[str, str]] = (),
    ) -> DeliveryOutcome:
        """Send an operator-composed message outside the catalog.

        ``options`` items carry a ``label`` (or ``text``) and an optional
        ``id``. Buttons and lists without options are sent as plain text.
        """

        if not to or not to.strip() or not text:
            raise ValueError("Missing to or text")
        if kind not in CUSTOM_KINDS:
            raise ValueError(f"Unsupported message kind: {kind}")

        recipient = normalize_recipient(to, self._address_suffix)
        entry = self._custom_entry(text, kind, list(options))
        outcome = await self._deliver(recipient, entry)
        self._sink.publish(ReplyNotice.from_delivery(recipient, entry, outcome))
        return outcome

    def handle_status(self, status: ConnectionStatus) -> None:
        """Forward a session state transition to the sink."""

        if status.connected:
            message = "Connected!"
            LOGGER.info("Session connected as %s", status.identity or "unknown")
        else:
            message = status.reason or "Disconnected"
            LOGGER.warning("Session disconnected: %s", message)
        self._sink.publish(ConnectionNotice(connected=status.connected, message=message, identity=status.identity))

    async def _deliver(self, recipient: str, entry: ReplyEntry) -> DeliveryOutcome:
        try:
            return await self._renderer.render(recipient, entry)
        except NotConnected as exc:
            LOGGER.warning("Reply to %s not sent: %s", recipient, exc)
            self._sink.publish(ErrorNotice(str(exc)))
            return DeliveryOutcome(mode=entry.presentation, delivered=False)

    @staticmethod
    def _custom_entry(text: str, kind: str, raw_options: list[Mapping[str, str]]) -> ReplyEntry:
        if kind == "text" or not raw_options:
            return ReplyEntry(body=text)

        if kind == "buttons":
            buttons = tuple(
                ReplyOption(id=raw.get("id") or f"btn_{index}", label=raw.get("label") or raw.get("text", ""))
                for index, raw in enumerate(raw_options)
            )
            return ReplyEntry(body=text, presentation=Presentation.BUTTONS, options=buttons, footer="")

        rows = tuple(
            ReplyOption(
                id=raw.get("id") or f"row_{index}",
                label=raw.get("label") or raw.get("text", ""),
                description=CUSTOM_ROW_DESCRIPTION,
            )
            for index, raw in enumerate(raw_options)
        )
        return ReplyEntry(
            body=text,
            presentation=Presentation.LIST,
            options=rows,
            footer="",
            title=CUSTOM_LIST_TITLE,
            section_title=CUSTOM_LIST_SECTION,
        )
