"""Helpers for working with feedwatch channel keys.

A channel key names one chat namespace: ``@username`` for public chats and
``chat_id:<id>`` for everything else.
"""

from __future__ import annotations

from typing import Optional, Union

CHAT_ID_PREFIX = "chat_id:"


def build_channel_key(username: Optional[str], chat_id: int) -> str:
    """Return the normalized key, preferring a lowercased public username."""

    if isinstance(username, str) and username:
        return f"@{username.lower()}"
    return f"{CHAT_ID_PREFIX}{chat_id}"


def chat_target(channel_key: str) -> Union[str, int]:
    """Return what the transport needs to address the chat.

    ``@name`` keys pass through; ``chat_id:`` keys become integers.
    """

    if channel_key.startswith("@"):
        return channel_key
    if channel_key.startswith(CHAT_ID_PREFIX):
        raw = channel_key[len(CHAT_ID_PREFIX):]
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"chat_id must be numeric: {channel_key}") from None
    raise ValueError(f"channel key must start with @ or {CHAT_ID_PREFIX}: {channel_key}")
