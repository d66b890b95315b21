"""Application entry point for the feedwatch bot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

from feedwatch import settings
from feedwatch.adapters.feed_fetcher import FeedparserFetcher
from feedwatch.adapters.sqlite_store import SQLiteStore
from feedwatch.adapters.telegram_commands import advertise_commands, clear_commands
from feedwatch.adapters.telegram_mapper import build_context
from feedwatch.adapters.telegram_notifier import TelegramChatNotifier
from feedwatch.client import start_bot_client
from feedwatch.core.config import CONFIG_KEY
from feedwatch.core.dispatch import CommandDispatcher
from feedwatch.core.errors import FeedwatchError
from feedwatch.core.refresh import RefreshEngine
from feedwatch.core.subscriptions import SubscriptionService

NAME = "FEEDWATCH"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/feedwatch.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)
    # Telethon is chatty at INFO about reconnects and updates.
    logging.getLogger("telethon").setLevel(max(level, logging.WARNING))


def _build_services(client) -> tuple[SQLiteStore, RefreshEngine, CommandDispatcher]:
    """Composition root: every service is built here and passed explicitly."""

    store = SQLiteStore(settings.DB_PATH)
    store.init_db()
    notifier = TelegramChatNotifier(
        client,
        mode=settings.PARSE_MODE,
        description_chars=settings.DESCRIPTION_CHARS,
    )
    engine = RefreshEngine(
        store=store,
        fetcher=FeedparserFetcher(agent=settings.FEED_USER_AGENT),
        notifier=notifier,
        config=settings.REFRESH_CONFIG,
    )
    dispatcher = CommandDispatcher(
        subscriptions=SubscriptionService(store),
        engine=engine,
        notifier=notifier,
        config=settings.COMMAND_CONFIG,
    )
    return store, engine, dispatcher


def _install_shutdown(client) -> None:
    """Clear the command menu and disconnect on SIGINT/SIGTERM."""

    logger = logging.getLogger(__name__)

    async def _shutdown() -> None:
        logger.critical("Shutting down feedwatch")
        if settings.ADVERTISE_COMMANDS:
            await clear_commands(client)
        await client.disconnect()

    def _on_signal() -> None:
        asyncio.ensure_future(_shutdown())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            client.loop.add_signal_handler(sig, _on_signal)
        except NotImplementedError:
            # Windows event loops have no signal handlers.
            logger.warning("Signal handler for %s not supported", sig)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting feedwatch")

    client = start_bot_client()
    _, _, dispatcher = _build_services(client)

    if settings.ADVERTISE_COMMANDS:
        client.loop.run_until_complete(clear_commands(client))
        client.loop.run_until_complete(advertise_commands(client, settings.COMMAND_CONFIG.prefix))

    # Single handler keeps Telethon integration minimal and defers all parsing
    # and scheduling to the core dispatcher.
    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            context = await build_context(event.message)
            dispatcher.submit(context)
        except Exception:
            logger.exception("Error while handling message")

    _install_shutdown(client)
    logger.info("Bot connected. Listening for %s commands...", settings.COMMAND_CONFIG.prefix)
    try:
        client.run_until_disconnected()
    finally:
        client.loop.run_until_complete(dispatcher.pool.drain())
        logger.info(
            "Worker pool finished: completed=%s, failed=%s",
            dispatcher.pool.completed,
            dispatcher.pool.failed,
        )


async def _refresh_channels(store: SQLiteStore, engine: RefreshEngine, channels: list[str]) -> int:
    """Refresh each channel in turn and return how many failed."""

    logger = logging.getLogger(__name__)
    if not channels:
        channels = sorted(
            channel for channel in store.list_channels() if CONFIG_KEY in store.list_keys(channel)
        )
    failures = 0
    for channel in channels:
        try:
            await engine.refresh(channel)
        except FeedwatchError as exc:
            failures += 1
            logger.error("Refresh failed for %s: %s", channel, exc)
    return failures


def _refresh(channels: list[str]) -> int:
    """One-off refresh for external schedulers such as cron."""

    _configure_logging()
    client = start_bot_client()
    store, engine, _ = _build_services(client)
    try:
        return client.loop.run_until_complete(_refresh_channels(store, engine, channels))
    finally:
        client.loop.run_until_complete(client.disconnect())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="feedwatch")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    refresh_parser = subparsers.add_parser(
        "refresh",
        help="Refresh the given channels once (all subscribed channels if none given).",
    )
    refresh_parser.add_argument("channels", nargs="*", help="Channel keys, e.g. @news or chat_id:-100123")

    args = parser.parse_args(argv)
    if args.command == "refresh":
        failures = _refresh(args.channels)
        raise SystemExit(1 if failures else 0)
    _run()


if __name__ == "__main__":
    main()
