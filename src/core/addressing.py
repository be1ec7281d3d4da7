"""Helpers for working with menubot recipient addresses.

Routing never looks at addresses; normalization happens once, at the
outbound boundary.
"""

from __future__ import annotations

from typing import Tuple

ADDRESS_SUFFIX = "@telegram"


def _is_bare_numeric(value: str) -> bool:
    digits = value[1:] if value.startswith("-") else value
    return digits.isdigit()


def normalize_recipient(raw_recipient: str, suffix: str = ADDRESS_SUFFIX) -> str:
    """Return a fully-qualified address for a bare numeric recipient id.

    Values that already carry a domain (anything with ``@``) are returned
    unchanged, as is any non-numeric value.
    """

    recipient = raw_recipient.strip()
    if "@" in recipient:
        return recipient
    if not _is_bare_numeric(recipient):
        return recipient
    return f"{recipient}{suffix}"


def split_address(address: str) -> Tuple[str, str]:
    """Split an address into (local_part, domain_suffix)."""

    local, sep, domain = address.partition("@")
    if not sep:
        return address, ""
    return local, f"@{domain}"


def chat_id_from_address(address: str) -> int:
    """Return the numeric chat id encoded in a normalized address."""

    local, _ = split_address(address)
    try:
        return int(local)
    except ValueError:
        raise ValueError(f"Address is not numeric: {address}") from None
