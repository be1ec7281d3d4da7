"""State container for the console header and counters."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConsoleState:
    connected: bool = False
    status_message: str = "Connecting..."
    identity: str | None = None
    pairing_code: str | None = None
    inbound_count: int = 0
    reply_count: int = 0
    error: str | None = None
