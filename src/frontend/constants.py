"""Shared constants for the Textual console."""

from __future__ import annotations

TELEGRAM_BLUE = "#2AABEE"
# Oldest rows are dropped past this many log entries.
MAX_LOG_ROWS = 500
MESSAGE_KINDS = [("text", "text"), ("buttons", "buttons"), ("list", "list")]
