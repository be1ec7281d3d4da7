"""Ports (interfaces) used by the core.

Ports define the minimal contracts for the session and notification
adapters so that the core can be reused with different transports.
"""

from __future__ import annotations

from typing import Protocol

from core.events import Notice
from core.models import Payload


class SessionPort(Protocol):
    """Messaging session operations required by the renderer and pairing."""

    def is_connected(self) -> bool:
        ...

    async def send(self, recipient: str, payload: Payload) -> bool:
        ...

    async def request_pairing_code(self, phone_number: str) -> str:
        ...


class NotificationSink(Protocol):
    """Receiver of observability events (console, logs)."""

    def publish(self, event: Notice) -> None:
        ...
