"""Telethon client construction from environment credentials."""

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

from dotenv import load_dotenv
from telethon import TelegramClient

import settings

LOGGER = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "menubot"


def api_credentials() -> Tuple[int, str]:
    """Return (API_ID, API_HASH), naming whichever is missing or malformed."""

    load_dotenv()
    missing = [name for name in ("API_ID", "API_HASH") if not os.getenv(name)]
    if missing:
        raise RuntimeError(f"Missing {', '.join(missing)} in environment")
    raw_id = os.environ["API_ID"].strip()
    if not raw_id.isdigit():
        raise RuntimeError("API_ID must be the numeric id from my.telegram.org")
    return int(raw_id), os.environ["API_HASH"].strip()


def build_client(session_name: Optional[str] = None) -> TelegramClient:
    """One client per process; a user session file or a bot session file.

    The reconnect policy comes from the ``session`` section of config.json.
    """

    api_id, api_hash = api_credentials()
    name = session_name or os.getenv("SESSION_NAME") or DEFAULT_SESSION_NAME
    LOGGER.info("Opening Telegram session %r", name)
    return TelegramClient(
        name,
        api_id,
        api_hash,
        connection_retries=settings.CONNECTION_RETRIES,
        retry_delay=settings.RETRY_DELAY,
    )


def bot_token() -> Optional[str]:
    """BOT_TOKEN, when the responder should sign in as a bot account."""

    load_dotenv()
    token = (os.getenv("BOT_TOKEN") or "").strip()
    return token or None
