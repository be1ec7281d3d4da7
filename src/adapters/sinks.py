"""Notification sink adapters.

Implements the core NotificationSink port for logs and for fanning events
out to several sinks (logs plus the console).
"""

from __future__ import annotations

import logging
from typing import Iterable

from adapters.notification_formatting import format_notice
from core.events import ErrorNotice, Notice
from core.ports import NotificationSink

LOGGER = logging.getLogger(__name__)


class LoggingSink:
    """Sink that writes each event as a single log line."""

    def __init__(self, logger: logging.Logger = LOGGER) -> None:
        self._logger = logger

    def publish(self, event: Notice) -> None:
        level = logging.WARNING if isinstance(event, ErrorNotice) else logging.INFO
        self._logger.log(level, "[%s] %s", event.kind, format_notice(event))


class FanOutSink:
    """Deliver each event to every wrapped sink.

    A failing sink is logged and skipped so the others still see the event.
    """

    def __init__(self, sinks: Iterable[NotificationSink]) -> None:
        self._sinks = list(sinks)

    def publish(self, event: Notice) -> None:
        for sink in self._sinks:
            try:
                sink.publish(event)
            except Exception:
                LOGGER.exception("Sink %s failed on %s event", type(sink).__name__, event.kind)
