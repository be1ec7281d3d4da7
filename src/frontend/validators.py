"""Validation helpers for the console forms."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CustomMessageForm:
    to: str | None
    text: str | None
    kind: str
    options: list[dict[str, str]]
    error: str | None = None


def parse_options(raw_value: str) -> list[dict[str, str]]:
    """Parse one option per line, either ``id|label`` or just ``label``."""

    options: list[dict[str, str]] = []
    for line in raw_value.splitlines():
        line = line.strip()
        if not line:
            continue
        option_id, sep, label = line.partition("|")
        if sep:
            option = {"label": label.strip()}
            if option_id.strip():
                option["id"] = option_id.strip()
        else:
            option = {"label": line}
        if option["label"]:
            options.append(option)
    return options


def parse_custom_message(to: str, text: str, kind: str, raw_options: str) -> CustomMessageForm:
    to = to.strip()
    options = parse_options(raw_options)
    if not to:
        return CustomMessageForm(None, None, kind, options, "recipient is required")
    if not text.strip():
        return CustomMessageForm(to, None, kind, options, "text is required")
    local = to.split("@", 1)[0]
    if not _is_int(local):
        return CustomMessageForm(None, text, kind, options, "recipient must be a numeric chat id")
    if kind != "text" and not options:
        return CustomMessageForm(to, text, kind, options, f"{kind} messages need at least one option")
    return CustomMessageForm(to, text, kind, options)


def parse_phone(raw_value: str) -> tuple[str | None, str | None]:
    """Return (normalized_phone, error)."""

    phone = raw_value.strip().replace(" ", "").replace("-", "")
    if phone.startswith("+"):
        phone = phone[1:]
    if not phone:
        return None, "phone number is required"
    if not phone.isdigit():
        return None, "phone number must contain digits only"
    return phone, None


def _is_int(value: str) -> bool:
    try:
        int(value)
    except ValueError:
        return False
    return True
