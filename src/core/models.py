"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any transport-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple, Union


class Presentation(str, Enum):
    """Delivery shape of a reply."""

    PLAIN = "plain"
    BUTTONS = "buttons"
    LIST = "list"


@dataclass(frozen=True)
class ReplyOption:
    """One selectable next step (a button or a list row)."""

    id: str
    label: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ReplyEntry:
    """Immutable catalog record describing one conversational state."""

    body: str
    presentation: Presentation = Presentation.PLAIN
    options: Tuple[ReplyOption, ...] = ()
    footer: Optional[str] = None
    # List-only presentation details.
    title: Optional[str] = None
    section_title: Optional[str] = None
    button_text: Optional[str] = None

    def option_ids(self) -> Tuple[str, ...]:
        return tuple(option.id for option in self.options)


@dataclass(frozen=True)
class RoutingResult:
    """Outcome of routing one trigger; lives for a single reply cycle."""

    entry: ReplyEntry
    recipient: str
    trigger: str
    matched: bool


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of a render attempt."""

    mode: Presentation
    delivered: bool
    degraded: bool = False


@dataclass(frozen=True)
class InboundMessage:
    """Transport-neutral inbound event pushed by the session adapter."""

    sender_id: str
    machine_identifier: str
    display_text: str
    from_me: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ConnectionStatus:
    """Session state transition reported by the session adapter."""

    connected: bool
    reason: Optional[str] = None
    identity: Optional[str] = None


@dataclass(frozen=True)
class TextPayload:
    text: str


@dataclass(frozen=True)
class ButtonsPayload:
    text: str
    buttons: Tuple[ReplyOption, ...]
    footer: str = ""


@dataclass(frozen=True)
class ListRow:
    id: str
    title: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ListSection:
    title: str
    rows: Tuple[ListRow, ...]


@dataclass(frozen=True)
class ListPayload:
    text: str
    title: str
    sections: Tuple[ListSection, ...]
    footer: str = ""
    button_text: str = ""


Payload = Union[TextPayload, ButtonsPayload, ListPayload]
