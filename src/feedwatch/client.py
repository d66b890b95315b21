"""Telegram bot client factory for feedwatch.

The bot logs in with a bot token, so there is no interactive login step: the
client returned here is connected and authorized. The caller owns the rest of
its lifecycle (run_until_disconnected / disconnect).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from telethon import TelegramClient

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotCredentials:
    """Secrets read from the environment (or a .env file)."""

    api_id: int
    api_hash: str
    bot_token: str
    session_name: str

    @classmethod
    def from_env(cls) -> "BotCredentials":
        load_dotenv()
        api_id = os.getenv("API_ID")
        api_hash = os.getenv("API_HASH")
        token = os.getenv("BOT_TOKEN")

        missing = [
            name
            for name, value in (("API_ID", api_id), ("API_HASH", api_hash), ("BOT_TOKEN", token))
            if not value
        ]
        if missing:
            raise RuntimeError(f"Missing {', '.join(missing)} in environment")
        try:
            parsed_id = int(api_id)
        except ValueError:
            raise RuntimeError("API_ID must be numeric") from None

        return cls(
            api_id=parsed_id,
            api_hash=api_hash,
            bot_token=token,
            session_name=os.getenv("SESSION_NAME", "feedwatch"),
        )


def start_bot_client(credentials: BotCredentials | None = None) -> TelegramClient:
    """Create the Telethon client and log in as the bot.

    Must be called outside a running event loop: Telethon then completes the
    login synchronously.
    """

    credentials = credentials or BotCredentials.from_env()
    client = TelegramClient(credentials.session_name, credentials.api_id, credentials.api_hash)
    client.start(bot_token=credentials.bot_token)
    LOGGER.info("Logged in as bot (session %s)", credentials.session_name)
    return client
