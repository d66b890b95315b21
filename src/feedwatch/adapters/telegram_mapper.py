"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core dispatcher.
"""

from __future__ import annotations

from telethon.tl.custom import Message

from feedwatch.core.channel_keys import build_channel_key
from feedwatch.core.models import CommandContext


def strip_bot_mention(text: str) -> str:
    """Turn ``/rss@my_bot status`` into ``/rss status``.

    Telegram appends the bot username to slash commands sent in groups.
    """

    head, sep, rest = text.partition(" ")
    if head.startswith("/") and "@" in head:
        head = head.split("@", 1)[0]
    return f"{head}{sep}{rest}"


def _sender_name(sender, sender_id) -> str:
    username = getattr(sender, "username", None)
    if isinstance(username, str) and username:
        return username
    return str(sender_id)


async def build_context(message: Message) -> CommandContext:
    """Build a core CommandContext from a Telethon Message."""

    chat = await message.get_chat()
    sender = await message.get_sender()

    return CommandContext(
        channel=build_channel_key(getattr(chat, "username", None), message.chat_id),
        # Groups and channels are shared spaces; private chats belong to one user.
        is_team=not message.is_private,
        user=_sender_name(sender, message.sender_id),
        text=strip_bot_mention(message.raw_text or ""),
    )
