"""Payload-to-Telegram formatting helpers.

Telegram has no native list message, so list payloads become an inline
keyboard with one row per list item, under a text block carrying the list
and section titles.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from telethon import Button

from core.models import ButtonsPayload, ListPayload, ListRow, Payload, ReplyOption, TextPayload

ButtonMatrix = List[List[Any]]


def _with_footer(text: str, footer: str) -> str:
    if not footer:
        return text
    return f"{text}\n\n{footer}"


def _button_for_option(option: ReplyOption) -> Any:
    # Callback data is capped at 64 bytes; Button.inline raises beyond that.
    return Button.inline(option.label, data=option.id.encode("utf-8"))


def row_label(row: ListRow) -> str:
    if row.description:
        return f"{row.title} - {row.description}"
    return row.title


def _format_list(payload: ListPayload) -> Tuple[str, ButtonMatrix]:
    lines = [payload.title, "", payload.text]
    keyboard: ButtonMatrix = []
    for section in payload.sections:
        if section.title:
            lines.extend(["", f"{section.title}:"])
        for row in section.rows:
            keyboard.append([Button.inline(row_label(row), data=row.id.encode("utf-8"))])
    return _with_footer("\n".join(lines), payload.footer), keyboard


def format_payload(payload: Payload) -> Tuple[str, Optional[ButtonMatrix]]:
    """Return (text, buttons) ready for ``TelegramClient.send_message``."""

    if isinstance(payload, TextPayload):
        return payload.text, None
    if isinstance(payload, ButtonsPayload):
        keyboard = [[_button_for_option(option)] for option in payload.buttons]
        return _with_footer(payload.text, payload.footer), keyboard
    if isinstance(payload, ListPayload):
        return _format_list(payload)
    raise ValueError(f"Unsupported payload type: {type(payload).__name__}")


def callback_data(button: Any) -> Optional[bytes]:
    """Return the callback payload of an inline button, or None.

    Older Telethon layers keep ``data`` on the button itself, newer ones on
    its ``type``; message button wrappers hold the raw button in ``button``.
    """

    for candidate in (button, getattr(button, "button", None)):
        if candidate is None:
            continue
        data = getattr(candidate, "data", None)
        if data is None:
            data = getattr(getattr(candidate, "type", None), "data", None)
        if isinstance(data, bytes):
            return data
    return None
