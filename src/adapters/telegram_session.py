"""Telethon session adapter.

Implements the core SessionPort on top of a TelegramClient and feeds
inbound messages onto the dispatch queue. Connection retries and backoff
are left to Telethon (``connection_retries`` / ``retry_delay``).
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Callable, Optional

from telethon import TelegramClient, errors, events

from adapters.payload_formatting import format_payload
from adapters.qr_rendering import render_qr_ascii
from adapters.telegram_mapper import inbound_from_callback, inbound_from_message
from core.addressing import ADDRESS_SUFFIX, chat_id_from_address
from core.errors import DeliveryFailure, NotConnected, PairingRequestFailure
from core.models import ButtonsPayload, ConnectionStatus, InboundMessage, ListPayload, Payload, Presentation

LOGGER = logging.getLogger(__name__)

PAIRING_TIMEOUT_SECONDS = 120

StatusCallback = Callable[[ConnectionStatus], None]


def _payload_mode(payload: Payload) -> Presentation:
    if isinstance(payload, ButtonsPayload):
        return Presentation.BUTTONS
    if isinstance(payload, ListPayload):
        return Presentation.LIST
    return Presentation.PLAIN


def _identity_of(user) -> str:
    username = getattr(user, "username", None)
    if username:
        return f"@{username}"
    phone = getattr(user, "phone", None)
    if phone:
        return f"+{phone}"
    return str(getattr(user, "id", "unknown"))


class TelethonSession:
    """Session lifecycle adapter for Telegram bots and user accounts.

    Only bot sessions can attach inline keyboards. User sessions report
    interactive payloads as undelivered, so buttons degrade to text and
    lists fail, exactly as any transport rejecting them would.
    """

    def __init__(
        self,
        client: TelegramClient,
        queue: "asyncio.Queue[InboundMessage]",
        on_status: StatusCallback,
        bot_token: Optional[str] = None,
        address_suffix: str = ADDRESS_SUFFIX,
    ) -> None:
        self._client = client
        self._queue = queue
        self._on_status = on_status
        self._bot_token = bot_token
        self._address_suffix = address_suffix
        self._authorized = False
        self._identity: Optional[str] = None
        self._background: set[asyncio.Task] = set()

        # Registered once; Telethon keeps handlers across reconnects.
        client.add_event_handler(self._on_new_message, events.NewMessage(incoming=True))
        client.add_event_handler(self._on_callback, events.CallbackQuery())

    @property
    def is_bot(self) -> bool:
        return bool(self._bot_token)

    def is_connected(self) -> bool:
        return self._authorized and self._client.is_connected()

    async def start(self) -> None:
        """Connect and sign in when credentials allow it without interaction."""

        await self._client.connect()
        authorized = await self._client.is_user_authorized()
        if self._bot_token and not authorized:
            await self._client.sign_in(bot_token=self._bot_token)
            authorized = True
        if authorized:
            await self._mark_authorized()
        else:
            LOGGER.info("Session not paired yet; request a pairing code to log in")
            self._on_status(ConnectionStatus(connected=False, reason="Waiting for pairing"))

    async def run_until_disconnected(self) -> None:
        try:
            await self._client.run_until_disconnected()
        finally:
            self._authorized = False
            self._on_status(ConnectionStatus(connected=False, reason="Disconnected"))

    async def stop(self) -> None:
        for task in list(self._background):
            task.cancel()
        await self._client.disconnect()

    async def send(self, recipient: str, payload: Payload) -> bool:
        if not self.is_connected():
            raise NotConnected("send")

        text, buttons = format_payload(payload)
        if buttons and not self.is_bot:
            raise DeliveryFailure(_payload_mode(payload), "inline keyboards require a bot session")

        chat_id = chat_id_from_address(recipient)
        try:
            await self._client.send_message(chat_id, text, buttons=buttons, link_preview=False)
        except errors.RPCError as exc:
            raise DeliveryFailure(_payload_mode(payload), str(exc)) from exc
        return True

    async def request_pairing_code(self, phone_number: str) -> str:
        """Start a QR login and return its login link as the pairing code."""

        if self.is_bot:
            raise PairingRequestFailure("Bot sessions authenticate with a token, not a pairing code")
        if not self._client.is_connected():
            await self._client.connect()
        if await self._client.is_user_authorized():
            raise PairingRequestFailure("Session is already paired")

        try:
            qr_login = await self._client.qr_login()
        except errors.RPCError as exc:
            raise PairingRequestFailure(str(exc)) from exc

        LOGGER.info("Scan to pair %s:\n%s", phone_number, render_qr_ascii(qr_login.url))
        task = asyncio.get_running_loop().create_task(self._await_pairing(qr_login, phone_number))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return qr_login.url

    async def _await_pairing(self, qr_login, phone_number: str) -> None:
        try:
            await self._complete_pairing(qr_login)
            me = await self._mark_authorized()
        except asyncio.TimeoutError:
            LOGGER.warning("Pairing for %s timed out", phone_number)
            self._on_status(ConnectionStatus(connected=False, reason="Pairing timed out"))
            return
        except PairingRequestFailure as exc:
            LOGGER.error("Pairing for %s stopped: %s", phone_number, exc)
            self._on_status(ConnectionStatus(connected=False, reason=str(exc)))
            return
        except Exception as exc:
            LOGGER.exception("Pairing for %s failed", phone_number)
            self._on_status(ConnectionStatus(connected=False, reason=f"Pairing failed: {exc}"))
            return

        me_phone = getattr(me, "phone", None)
        if me_phone and me_phone.lstrip("+") != phone_number.lstrip("+"):
            LOGGER.warning("Paired account %s differs from requested number %s", me_phone, phone_number)

    async def _complete_pairing(self, qr_login) -> None:
        try:
            await qr_login.wait(timeout=PAIRING_TIMEOUT_SECONDS)
        except errors.SessionPasswordNeededError:
            password = os.getenv("2FA")
            if not password:
                raise PairingRequestFailure("2FA password required")
            await self._client.sign_in(password=password)

    async def _mark_authorized(self):
        me = await self._client.get_me()
        self._identity = _identity_of(me)
        self._authorized = True
        self._on_status(ConnectionStatus(connected=True, identity=self._identity))
        return me

    async def _on_new_message(self, event) -> None:
        inbound = inbound_from_message(event.message, self._address_suffix)
        await self._queue.put(inbound)

    async def _on_callback(self, event) -> None:
        inbound = await inbound_from_callback(event, self._address_suffix)
        try:
            # Stops the client-side spinner on the pressed button.
            await event.answer()
        except errors.RPCError:
            LOGGER.debug("Callback answer failed for %s", inbound.sender_id)
        await self._queue.put(inbound)
