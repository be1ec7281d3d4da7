"""Notification sink that forwards core events into the Textual app."""

from __future__ import annotations

from textual.app import App
from textual.message import Message

from core.events import Notice


class NoticeReceived(Message):
    """Posted to the app for every core notification event."""

    def __init__(self, notice: Notice) -> None:
        super().__init__()
        self.notice = notice


class ConsoleSink:
    """Implements the NotificationSink port for the console."""

    def __init__(self, app: App) -> None:
        self._app = app

    def publish(self, event: Notice) -> None:
        self._app.post_message(NoticeReceived(event))
