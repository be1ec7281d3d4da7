"""Reply catalog compilation and lookup (core domain)."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from core.models import Presentation, ReplyEntry, ReplyOption

# Interactive-button messages are capped by the transport.
MAX_BUTTONS = 4


class ReplyCatalog:
    """Immutable mapping of trigger identifiers to reply entries.

    Aliases share the same ``ReplyEntry`` object, so identity comparisons are
    meaningful. Exactly one default entry answers every unmatched trigger.
    """

    def __init__(self, entries: Mapping[str, ReplyEntry], default: ReplyEntry) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._default = default

    @property
    def default(self) -> ReplyEntry:
        return self._default

    def lookup(self, trigger: str) -> Optional[ReplyEntry]:
        return self._entries.get(trigger)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._entries.keys())

    def entries(self) -> List[ReplyEntry]:
        """Return distinct entries (aliases collapsed), default last."""

        unique: List[ReplyEntry] = []
        for entry in self._entries.values():
            if not any(entry is seen for seen in unique):
                unique.append(entry)
        unique.append(self._default)
        return unique

    def aliases_of(self, entry: ReplyEntry) -> Tuple[str, ...]:
        return tuple(key for key, value in self._entries.items() if value is entry)

    def dangling_references(self) -> List[Tuple[str, str]]:
        """Return (owner, option_id) pairs whose option id is not a catalog key.

        The owner is the first alias of the referencing entry, or ``"<default>"``.
        """

        dangling: List[Tuple[str, str]] = []
        for entry in self.entries():
            aliases = self.aliases_of(entry)
            owner = aliases[0] if aliases else "<default>"
            for option_id in entry.option_ids():
                if option_id not in self._entries:
                    dangling.append((owner, option_id))
        return dangling

    def __contains__(self, trigger: object) -> bool:
        return trigger in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _build_options(raw_options: Iterable[dict]) -> Tuple[ReplyOption, ...]:
    options: List[ReplyOption] = []
    for raw in raw_options:
        option_id = raw.get("id")
        label = raw.get("label")
        if not option_id or not label:
            raise ValueError(f"Option requires id and label: {raw}")
        options.append(ReplyOption(id=option_id, label=label, description=raw.get("description")))
    return tuple(options)


def build_entry(raw: Mapping[str, Any]) -> ReplyEntry:
    """Normalize one raw entry config into a validated ``ReplyEntry``."""

    body = raw.get("body")
    if not body:
        raise ValueError(f"Entry requires a body: {raw}")

    presentation_name = str(raw.get("presentation", Presentation.PLAIN.value)).lower()
    try:
        presentation = Presentation(presentation_name)
    except ValueError:
        raise ValueError(f"Unsupported presentation: {presentation_name}") from None

    options = _build_options(raw.get("options", []) or [])
    if presentation is Presentation.PLAIN and options:
        raise ValueError("Plain entries cannot carry options")
    if presentation is not Presentation.PLAIN and not options:
        raise ValueError(f"{presentation.value} entries need at least one option")
    if presentation is Presentation.BUTTONS and len(options) > MAX_BUTTONS:
        raise ValueError(f"Button entries allow at most {MAX_BUTTONS} options, got {len(options)}")

    return ReplyEntry(
        body=body,
        presentation=presentation,
        options=options,
        footer=raw.get("footer"),
        title=raw.get("title"),
        section_title=raw.get("section_title"),
        button_text=raw.get("button_text"),
    )


def build_catalog(raw_catalog: Mapping[str, Any]) -> ReplyCatalog:
    """Compile a declarative catalog into a ``ReplyCatalog``.

    Expected shape::

        {
            "default": {...entry...},
            "entries": [{"triggers": ["menu", "menu_main"], ...entry...}],
        }

    Triggers are trimmed but otherwise kept verbatim, so lookups stay
    case-sensitive.
    """

    raw_default = raw_catalog.get("default")
    if not raw_default:
        raise ValueError("Catalog requires a default entry")
    default = build_entry(raw_default)

    entries: dict[str, ReplyEntry] = {}
    for raw in raw_catalog.get("entries", []):
        triggers = [str(trigger).strip() for trigger in raw.get("triggers", [])]
        triggers = [trigger for trigger in triggers if trigger]
        if not triggers:
            raise ValueError(f"Entry requires at least one trigger: {raw.get('body', '')[:40]!r}")
        entry = build_entry(raw)
        for trigger in triggers:
            if trigger in entries:
                raise ValueError(f"Duplicate trigger in catalog: {trigger}")
            entries[trigger] = entry

    return ReplyCatalog(entries, default)
