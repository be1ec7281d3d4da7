"""Main Textual app for the menubot realtime console."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, DataTable, Footer, Input, Select, Static, TextArea

from adapters.notification_formatting import format_delivery, snippet
from adapters.qr_rendering import render_qr_ascii
from adapters.sinks import FanOutSink, LoggingSink
from core.events import ConnectionNotice, ErrorNotice, InboundNotice, PairingCodeNotice, ReplyNotice
from .constants import MAX_LOG_ROWS, MESSAGE_KINDS, TELEGRAM_BLUE
from .sink import ConsoleSink, NoticeReceived
from .state import ConsoleState
from .validators import parse_custom_message, parse_phone

LOGGER = logging.getLogger(__name__)


class ConsoleApp(App):
    """Console hosting the bot: live message log, pairing, custom sends."""

    BINDINGS = [
        ("ctrl+l", "clear_log", "Clear log"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        background: #0f1a21;
        color: #e8eef5;
    }

    #header {
        height: 7;
        padding: 1 4;
        border-bottom: solid #2a3a46;
    }

    #header-left, #header-right {
        width: 1fr;
    }

    #header-right {
        text-align: right;
    }

    .subtle {
        color: #c6d2dd;
    }

    .status-connected {
        color: #4caf50;
    }

    .status-disconnected {
        color: #e57373;
    }

    #body {
        height: 1fr;
    }

    #log-panel {
        width: 2fr;
        padding: 0 1;
    }

    #log-table {
        height: 1fr;
    }

    #side-panel {
        width: 1fr;
        padding: 0 1;
        border-left: solid #2a3a46;
    }

    .panel-title {
        color: #2AABEE;
        text-style: bold;
        margin-top: 1;
    }

    #custom-text, #custom-options {
        height: 5;
    }

    #pairing-qr {
        height: auto;
    }

    .form-error {
        color: #e57373;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.console_state = ConsoleState()
        self._bot = None
        self._row_keys: list[str] = []
        self._row_counter = 0

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal():
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("", id="header-status")
                    yield Static("", id="header-identity", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static("", id="header-counts", classes="subtle")
                    yield Static("", id="header-pairing", classes="subtle")

        with Horizontal(id="body"):
            with Vertical(id="log-panel"):
                yield DataTable(id="log-table", cursor_type="row")
                yield Static("", id="log-output", classes="subtle")
            with VerticalScroll(id="side-panel"):
                yield Static("Pairing", classes="panel-title")
                yield Input(placeholder="phone number (international)", id="pair-phone")
                yield Button("Request pairing code", id="pair-btn", variant="primary")
                yield Static("", id="pair-error", classes="form-error")
                yield Static("", id="pairing-qr")

                yield Static("Custom message", classes="panel-title")
                yield Input(placeholder="chat id", id="custom-to")
                yield TextArea(id="custom-text")
                yield Select(MESSAGE_KINDS, id="custom-kind", value="text", allow_blank=False)
                yield Static("options (id|label per line)", classes="subtle")
                yield TextArea(id="custom-options")
                yield Button("Send", id="send-btn", variant="success")
                yield Static("", id="send-output")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#log-table", DataTable)
        table.add_column("time", key="time", width=9)
        table.add_column("dir", key="direction", width=4)
        table.add_column("peer", key="peer", width=22)
        table.add_column("message", key="message", width=48)
        table.add_column("delivery", key="delivery", width=22)
        table.zebra_stripes = True
        self._refresh_header()
        self.run_worker(self._serve(), name="bot", exit_on_error=False)

    async def _serve(self) -> None:
        # Deferred until the screen is up.
        from client import bot_token, build_client
        from runtime import MenuBot

        try:
            sink = FanOutSink([ConsoleSink(self), LoggingSink()])
            self._bot = MenuBot(build_client(), sink, bot_token=bot_token())
        except RuntimeError as exc:
            self._set_error(str(exc))
            return
        try:
            await self._bot.serve()
        except Exception as exc:
            LOGGER.exception("Bot stopped with an error")
            self._set_error(str(exc))
        finally:
            self._bot = None

    def on_notice_received(self, message: NoticeReceived) -> None:
        notice = message.notice
        state = self.console_state
        if isinstance(notice, InboundNotice):
            state.inbound_count += 1
            self._add_row(notice.timestamp, "<-", notice.sender, notice.text, notice.raw_identifier)
        elif isinstance(notice, ReplyNotice):
            state.reply_count += 1
            self._add_row(notice.timestamp, "->", notice.to, notice.text, format_delivery(notice))
        elif isinstance(notice, ConnectionNotice):
            state.connected = notice.connected
            state.status_message = notice.message
            state.identity = notice.identity or state.identity
            if notice.connected:
                state.pairing_code = None
                self.query_one("#pairing-qr", Static).update("")
        elif isinstance(notice, PairingCodeNotice):
            state.pairing_code = notice.code
            self.query_one("#pairing-qr", Static).update(render_qr_ascii(notice.code))
        elif isinstance(notice, ErrorNotice):
            state.error = notice.message
            self.query_one("#log-output", Static).update(f"error: {notice.message}")
        self._refresh_header()

    @on(Button.Pressed, "#pair-btn")
    def _on_pair(self) -> None:
        error_label = self.query_one("#pair-error", Static)
        phone, error = parse_phone(self.query_one("#pair-phone", Input).value)
        if error:
            error_label.update(error)
            return
        if self._bot is None:
            error_label.update("bot is not running")
            return
        error_label.update("")
        self._bot.request_pairing(phone)
        self.query_one("#log-output", Static).update(f"pairing code requested for {phone}")

    @on(Button.Pressed, "#send-btn")
    async def _on_send(self) -> None:
        output = self.query_one("#send-output", Static)
        kind = self.query_one("#custom-kind", Select).value
        form = parse_custom_message(
            self.query_one("#custom-to", Input).value,
            self.query_one("#custom-text", TextArea).text,
            str(kind),
            self.query_one("#custom-options", TextArea).text,
        )
        if form.error:
            output.update(Text(form.error, style="red"))
            return
        if self._bot is None:
            output.update(Text("bot is not running", style="red"))
            return
        try:
            outcome = await self._bot.send_custom(form.to, form.text, form.kind, form.options)
        except ValueError as exc:
            output.update(Text(str(exc), style="red"))
            return
        style = "green" if outcome.delivered else "red"
        output.update(Text(f"success: {outcome.delivered} ({outcome.mode.value})", style=style))

    def action_clear_log(self) -> None:
        self.query_one("#log-table", DataTable).clear()
        self._row_keys.clear()
        self.console_state.inbound_count = 0
        self.console_state.reply_count = 0
        self._refresh_header()

    def _add_row(self, timestamp: str, direction: str, peer: str, text: str, detail: str) -> None:
        table = self.query_one("#log-table", DataTable)
        self._row_counter += 1
        key = str(self._row_counter)
        table.add_row(self._format_time(timestamp), direction, peer, snippet(text, 48), detail, key=key)
        self._row_keys.append(key)
        if len(self._row_keys) > MAX_LOG_ROWS:
            table.remove_row(self._row_keys.pop(0))
        table.move_cursor(row=table.row_count - 1)

    def _set_error(self, message: str) -> None:
        self.console_state.error = message
        self.console_state.status_message = "Not running"
        self.query_one("#log-output", Static).update(f"error: {message}")
        self._refresh_header()

    def _refresh_header(self) -> None:
        state = self.console_state
        status = self.query_one("#header-status", Static)
        status.remove_class("status-connected", "status-disconnected")
        status.add_class("status-connected" if state.connected else "status-disconnected")
        status.update(f"session: {state.status_message}")
        self.query_one("#header-identity", Static).update(f"account: {state.identity or '-'}")
        self.query_one("#header-counts", Static).update(
            f"received: {state.inbound_count}  replied: {state.reply_count}"
        )
        self.query_one("#header-pairing", Static).update(f"pairing: {state.pairing_code or '-'}")

    @staticmethod
    def _format_time(timestamp: str) -> str:
        try:
            return datetime.fromisoformat(timestamp).astimezone().strftime("%H:%M:%S")
        except ValueError:
            return timestamp[:8]

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("MENU", TELEGRAM_BLUE),
            ("BOT > Console", "bold"),
        )
