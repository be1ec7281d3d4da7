"""Error taxonomy shared by the core and adapters.

Unmatched triggers are deliberately absent: they resolve to the default
catalog entry and are never an error.
"""

from __future__ import annotations

from typing import Optional

from core.models import Presentation


class MenuBotError(Exception):
    """Base class for all menubot errors."""


class NotConnected(MenuBotError):
    """Raised when a send or pairing request is issued without a live session."""

    def __init__(self, action: str = "send") -> None:
        super().__init__(f"Cannot {action}: no active session")
        self.action = action


class DeliveryFailure(MenuBotError):
    """Raised by session adapters when the transport rejects a payload."""

    def __init__(self, mode: Presentation, detail: Optional[str] = None) -> None:
        message = f"Delivery failed for {mode.value} message"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.mode = mode
        self.detail = detail


class PairingRequestFailure(MenuBotError):
    """Raised when the transport could not produce a pairing code."""
