"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeliveryConfig:
    """Presentation defaults applied by the renderer."""

    buttons_footer: str = "Choose from the buttons below"
    list_title: str = "Choose an option"
    list_section_title: str = "Available options"
    list_footer: str = "Tap the button below"
    list_button_text: str = "Open the menu"


@dataclass(frozen=True)
class PairingConfig:
    """Pairing request settings."""

    # Courtesy delay that lets a fresh session socket settle before the
    # pairing request goes out. Tunable, not required for correctness.
    delay_seconds: float = 3.0
