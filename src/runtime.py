"""Composition root wiring the core to the Telegram session.

Both the headless runner and the console build the bot through here so the
wiring lives in one place.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Iterable, Mapping, Optional

from telethon import TelegramClient

import settings
from adapters.telegram_session import TelethonSession
from core.catalog import ReplyCatalog, build_catalog
from core.dispatcher import Dispatcher
from core.menu import default_catalog
from core.models import ConnectionStatus, DeliveryOutcome, InboundMessage
from core.pairing import PairingScheduler
from core.ports import NotificationSink
from core.renderer import MultiModalRenderer
from core.router import ReplyRouter

LOGGER = logging.getLogger(__name__)


def load_catalog() -> ReplyCatalog:
    """Return the configured catalog, or the built-in menu."""

    if settings.CATALOG_CONFIG:
        catalog = build_catalog(settings.CATALOG_CONFIG)
    else:
        catalog = default_catalog()
    for owner, option_id in catalog.dangling_references():
        LOGGER.warning("Catalog entry %s points at unknown trigger %s", owner, option_id)
    return catalog


class MenuBot:
    """One transport session plus the dispatch loop that answers it."""

    def __init__(self, client: TelegramClient, sink: NotificationSink, bot_token: Optional[str] = None) -> None:
        self.queue: "asyncio.Queue[InboundMessage]" = asyncio.Queue()
        self.session = TelethonSession(
            client,
            self.queue,
            on_status=self._on_status,
            bot_token=bot_token,
            address_suffix=settings.ADDRESS_SUFFIX,
        )
        self.catalog = load_catalog()
        self.dispatcher = Dispatcher(
            router=ReplyRouter(self.catalog),
            renderer=MultiModalRenderer(self.session, settings.DELIVERY),
            sink=sink,
            address_suffix=settings.ADDRESS_SUFFIX,
        )
        self.pairing = PairingScheduler(self.session, sink, settings.PAIRING)

    def _on_status(self, status: ConnectionStatus) -> None:
        self.dispatcher.handle_status(status)

    def request_pairing(self, phone_number: str) -> "asyncio.Task[Optional[str]]":
        return self.pairing.schedule(phone_number)

    async def send_custom(
        self,
        to: str,
        text: str,
        kind: str = "text",
        options: Iterable[Mapping[str, str]] = (),
    ) -> DeliveryOutcome:
        return await self.dispatcher.send_custom(to, text, kind, options)

    async def serve(self, pair_phone: Optional[str] = None) -> None:
        """Run until the transport disconnects for good."""

        LOGGER.info("%s catalog triggers are loaded", len(self.catalog))
        await self.session.start()
        if pair_phone and not self.session.is_connected():
            self.request_pairing(pair_phone)

        dispatch_task = asyncio.create_task(self.dispatcher.run(self.queue))
        try:
            await self.session.run_until_disconnected()
        finally:
            dispatch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await dispatch_task
            await self.session.stop()
