"""Notification events emitted to the console/observability sink."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional, Tuple, Union

from core.models import DeliveryOutcome, ReplyEntry


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class InboundNotice:
    kind: ClassVar[str] = "inbound-message"

    sender: str
    text: str
    raw_identifier: str
    timestamp: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.sender,
            "text": self.text,
            "rawIdentifier": self.raw_identifier,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ReplyNotice:
    kind: ClassVar[str] = "reply-sent"

    to: str
    text: str
    options: Optional[Tuple[dict[str, str], ...]]
    mode: str
    delivered: bool
    degraded: bool
    timestamp: str = field(default_factory=_now_iso)

    @classmethod
    def from_delivery(cls, to: str, entry: ReplyEntry, outcome: DeliveryOutcome) -> "ReplyNotice":
        options = None
        if entry.options:
            options = tuple({"id": option.id, "label": option.label} for option in entry.options)
        return cls(
            to=to,
            text=entry.body,
            options=options,
            mode=outcome.mode.value,
            delivered=outcome.delivered,
            degraded=outcome.degraded,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "to": self.to,
            "text": self.text,
            "options": list(self.options) if self.options is not None else None,
            "mode": self.mode,
            "delivered": self.delivered,
            "degraded": self.degraded,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ConnectionNotice:
    kind: ClassVar[str] = "connection-status"

    connected: bool
    message: str
    identity: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"connected": self.connected, "message": self.message, "identity": self.identity}


@dataclass(frozen=True)
class PairingCodeNotice:
    kind: ClassVar[str] = "pairing-code"

    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code}


@dataclass(frozen=True)
class ErrorNotice:
    kind: ClassVar[str] = "error"

    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


Notice = Union[InboundNotice, ReplyNotice, ConnectionNotice, PairingCodeNotice, ErrorNotice]
