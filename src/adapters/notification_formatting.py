"""Shared notification formatting helpers.

Keeping formatting here prevents drift between sinks and keeps log lines
and console rows consistent regardless of where an event is shown.
"""

from __future__ import annotations

from core.events import (
    ConnectionNotice,
    ErrorNotice,
    InboundNotice,
    Notice,
    PairingCodeNotice,
    ReplyNotice,
)

SNIPPET_CHARS = 80


def snippet(text: str, limit: int = SNIPPET_CHARS) -> str:
    """Collapse a message body onto one line and clip it."""

    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[: limit - 1].rstrip() + "…"


def format_delivery(notice: ReplyNotice) -> str:
    if not notice.delivered:
        return f"{notice.mode} not delivered"
    if notice.degraded:
        return f"{notice.mode} (degraded)"
    return notice.mode


def format_notice(event: Notice) -> str:
    """Return a one-line human summary of a notification event."""

    if isinstance(event, InboundNotice):
        return f"<- {event.sender}: {snippet(event.text)} (id: {event.raw_identifier})"
    if isinstance(event, ReplyNotice):
        options = ""
        if event.options:
            options = " [" + ", ".join(option["id"] for option in event.options) + "]"
        return f"-> {event.to}: {snippet(event.text)}{options} | {format_delivery(event)}"
    if isinstance(event, ConnectionNotice):
        identity = f" as {event.identity}" if event.identity else ""
        return f"status: {event.message}{identity}"
    if isinstance(event, PairingCodeNotice):
        return f"pairing code: {event.code}"
    if isinstance(event, ErrorNotice):
        return f"error: {event.message}"
    raise ValueError(f"Unsupported notification event: {type(event).__name__}")
