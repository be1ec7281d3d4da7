"""Deferred pairing-code requests (core domain)."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from core.config import PairingConfig
from core.events import ErrorNotice, PairingCodeNotice
from core.ports import NotificationSink, SessionPort

LOGGER = logging.getLogger(__name__)


class PairingScheduler:
    """Request a pairing code once, after a fixed stabilization delay.

    Each request is a one-shot task; failures are reported to the sink as an
    error event and never retried.
    """

    def __init__(self, session: SessionPort, sink: NotificationSink, config: PairingConfig = PairingConfig()) -> None:
        self._session = session
        self._sink = sink
        self._config = config
        self._pending: set[asyncio.Task] = set()

    def schedule(self, phone_number: str) -> "asyncio.Task[Optional[str]]":
        """Schedule a pairing request; must be called from a running loop."""

        phone = phone_number.strip()
        if not phone:
            raise ValueError("Phone number is required for pairing")

        LOGGER.info("Pairing code for %s requested in %ss", phone, self._config.delay_seconds)
        task = asyncio.get_running_loop().create_task(self._request_after_delay(phone))
        # Keep a strong reference until the task finishes.
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _request_after_delay(self, phone: str) -> Optional[str]:
        await asyncio.sleep(self._config.delay_seconds)
        try:
            code = await self._session.request_pairing_code(phone)
        except Exception as exc:
            LOGGER.exception("Failed to generate pairing code for %s", phone)
            self._sink.publish(ErrorNotice(f"Failed to generate pairing code: {exc}"))
            return None

        LOGGER.info("Pairing code issued for %s", phone)
        self._sink.publish(PairingCodeNotice(code=code))
        return code
