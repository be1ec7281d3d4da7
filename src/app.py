"""Application entry point for the menubot responder."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

import settings
from adapters.sinks import LoggingSink
from client import bot_token, build_client
from runtime import MenuBot, load_catalog

NAME = "MENUBOT"
FONT = "tarty-1"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_PATH = "logs/menubot.log"

# Environment variables whose values never reach a log line.
SECRET_ENV_VARS = ("API_HASH", "BOT_TOKEN", "2FA")


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _SecretMaskingFormatter(logging.Formatter):
    """Replace secret values with ``[NAME]`` placeholders."""

    def __init__(self, secrets: dict[str, str], fmt: str = LOG_FORMAT, datefmt: str = LOG_DATEFMT) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted(((value, name) for name, value in secrets.items() if value), key=lambda item: -len(item[0]))

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for value, name in self._secrets:
            message = message.replace(value, f"[{name}]")
        return message


def _secret_values(config: dict) -> dict[str, str]:
    redact = config.get("redact", {})
    if not redact.get("enabled", True):
        return {}
    names = redact.get("patterns", SECRET_ENV_VARS)
    return {name: os.environ[name] for name in names if os.getenv(name)}


def _file_handler(file_cfg: dict) -> logging.Handler:
    path = file_cfg.get("path", DEFAULT_LOG_PATH)
    if not os.path.isabs(path):
        path = os.path.join(settings.PROJECT_ROOT, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def _build_handlers(config: dict, console: bool) -> list[logging.Handler]:
    """Stream handler for the headless runner, rotating file otherwise.

    The Textual console owns the terminal, so it always logs to file.
    """

    handlers: list[logging.Handler] = []
    if console and config.get("console", True):
        handlers.append(logging.StreamHandler())
    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False) or not console:
        handlers.append(_file_handler(file_cfg))
    return handlers


def _configure_logging(console: bool = True) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    formatter = _SecretMaskingFormatter(_secret_values(config))
    handlers = _build_handlers(config, console)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    if handlers:
        logging.basicConfig(level=level, handlers=handlers)
    # Telethon logs every reconnect at INFO.
    logging.getLogger("telethon").setLevel(max(level, logging.WARNING))


def _run(pair_phone: Optional[str]) -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting menubot")

    async def _serve() -> None:
        bot = MenuBot(build_client(), LoggingSink(), bot_token=bot_token())
        await bot.serve(pair_phone=pair_phone)

    try:
        asyncio.run(_serve())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


def _console() -> None:
    _print_banner()
    _configure_logging(console=False)
    from frontend.app import ConsoleApp

    ConsoleApp().run()


def _show_catalog() -> int:
    catalog = load_catalog()
    table = Table(title="Reply catalog")
    table.add_column("triggers")
    table.add_column("presentation")
    table.add_column("options")

    for entry in catalog.entries():
        aliases = catalog.aliases_of(entry)
        triggers = ", ".join(aliases) if aliases else "<default>"
        table.add_row(triggers, entry.presentation.value, ", ".join(entry.option_ids()))

    console = Console()
    console.print(table)

    dangling = catalog.dangling_references()
    if not dangling:
        console.print("[green]closure ok[/green]: every option points at a catalog trigger")
        return 0
    for owner, option_id in dangling:
        console.print(f"[red]dangling[/red] {owner} -> {option_id}")
    return 1


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="menubot")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Start the responder without a UI")
    run_parser.add_argument("--pair", metavar="PHONE", help="Request a pairing code for this number")
    subparsers.add_parser("console", help="Launch the realtime console")
    subparsers.add_parser("catalog", help="Print the reply catalog and check its closure")

    args = parser.parse_args(argv)
    load_dotenv()
    if args.command == "console":
        _console()
        return
    if args.command == "catalog":
        raise SystemExit(_show_catalog())
    _run(getattr(args, "pair", None) or os.getenv("PHONE"))


if __name__ == "__main__":
    main()
