"""Telegram notification adapter.

Formats item notifications and delivers them to the chat a channel key names.
"""

from __future__ import annotations

import logging

from feedwatch.adapters.notification_formatting import DEFAULT_DESCRIPTION_CHARS, format_notification
from feedwatch.core.channel_keys import chat_target
from feedwatch.core.models import ItemRecord

LOGGER = logging.getLogger(__name__)

_TELETHON_PARSE_MODES = {"markdown": "md", "html": "html"}


class TelegramChatNotifier:
    """Notifier adapter that posts into the subscribed chat via Telethon."""

    def __init__(
        self,
        client,
        mode: str = "markdown",
        description_chars: int = DEFAULT_DESCRIPTION_CHARS,
    ) -> None:
        if mode not in _TELETHON_PARSE_MODES:
            raise ValueError(f"Unsupported notification format: {mode}")
        self._client = client
        self._mode = mode
        self._description_chars = description_chars

    async def send_item(self, channel: str, record: ItemRecord) -> None:
        """Send the formatted notification for one feed item."""

        message = format_notification(record, self._mode, self._description_chars)
        await self._client.send_message(
            chat_target(channel),
            message,
            parse_mode=_TELETHON_PARSE_MODES[self._mode],
            link_preview=False,
        )
        LOGGER.info("Notified %s about %s", channel, record.id)

    async def send_text(self, channel: str, text: str) -> None:
        """Send a plain command reply."""

        await self._client.send_message(chat_target(channel), text, parse_mode="md")
