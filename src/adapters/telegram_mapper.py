"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core dispatch loop.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from telethon.tl.custom import Message

from adapters.payload_formatting import callback_data
from core.addressing import ADDRESS_SUFFIX, normalize_recipient
from core.models import InboundMessage


def address_from_chat_id(chat_id: int, suffix: str = ADDRESS_SUFFIX) -> str:
    return normalize_recipient(str(chat_id), suffix)


def inbound_from_message(message: Message, suffix: str = ADDRESS_SUFFIX) -> InboundMessage:
    """Build an InboundMessage from a typed Telethon message.

    Typed text is both the machine identifier and the display text.
    """

    text = message.raw_text or ""
    return InboundMessage(
        sender_id=address_from_chat_id(message.chat_id, suffix),
        machine_identifier=text,
        display_text=text,
        from_me=bool(getattr(message, "out", False)),
        timestamp=message.date or datetime.now(timezone.utc),
    )


def _decode_callback_data(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _label_for_data(message: Optional[Message], data: Optional[bytes]) -> Optional[str]:
    rows = getattr(message, "buttons", None) or []
    for row in rows:
        for button in row:
            if callback_data(button) == data:
                return getattr(button, "text", None)
    return None


async def inbound_from_callback(event, suffix: str = ADDRESS_SUFFIX) -> InboundMessage:
    """Build an InboundMessage from an inline-button press.

    The button data is the machine identifier; the pressed button's label
    becomes the display text, falling back to the identifier itself.
    """

    identifier = _decode_callback_data(event.data)
    try:
        origin = await event.get_message()
    except Exception:
        origin = None
    label = _label_for_data(origin, event.data) or identifier

    return InboundMessage(
        sender_id=address_from_chat_id(event.chat_id, suffix),
        machine_identifier=identifier,
        display_text=label,
        from_me=False,
    )
