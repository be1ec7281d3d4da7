"""Static configuration for menubot.

All user-editable settings (menu catalog, delivery texts, pairing, logging)
live in a single JSON file for quick edits without touching Python. A
missing file means built-in defaults everywhere.
"""

import json
import os

from core.addressing import ADDRESS_SUFFIX as DEFAULT_ADDRESS_SUFFIX
from core.config import DeliveryConfig, PairingConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("MENUBOT_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be an object: {CONFIG_PATH}")
    return loaded


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Optional menu override; None keeps the built-in service menu.
CATALOG_CONFIG = _CONFIG.get("catalog")

# Presentation texts and the recipient address suffix used at the outbound
# boundary.
_delivery = _CONFIG.get("delivery", {})
_delivery_defaults = DeliveryConfig()
ADDRESS_SUFFIX = _delivery.get("address_suffix", DEFAULT_ADDRESS_SUFFIX)
DELIVERY = DeliveryConfig(
    buttons_footer=_delivery.get("buttons_footer", _delivery_defaults.buttons_footer),
    list_title=_delivery.get("list_title", _delivery_defaults.list_title),
    list_section_title=_delivery.get("list_section_title", _delivery_defaults.list_section_title),
    list_footer=_delivery.get("list_footer", _delivery_defaults.list_footer),
    list_button_text=_delivery.get("list_button_text", _delivery_defaults.list_button_text),
)

# Pairing requests wait this long after the session socket comes up.
_pairing = _CONFIG.get("pairing", {})
PAIRING = PairingConfig(delay_seconds=float(_pairing.get("delay_seconds", PairingConfig().delay_seconds)))

# Reconnect policy handed to Telethon.
_session = _CONFIG.get("session", {})
CONNECTION_RETRIES = int(_session.get("connection_retries", 5))
RETRY_DELAY = int(_session.get("retry_delay", 5))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
