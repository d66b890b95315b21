from __future__ import annotations

import asyncio
from typing import Optional

from feedwatch.adapters.telegram_mapper import build_context, strip_bot_mention


class DummyChat:
    def __init__(self, username: Optional[str] = None) -> None:
        self.username = username


class DummySender:
    def __init__(self, username: Optional[str] = None) -> None:
        self.username = username


class DummyMessage:
    def __init__(
        self,
        *,
        chat_id: int,
        text: str,
        is_private: bool,
        chat: Optional[DummyChat] = None,
        sender: Optional[DummySender] = None,
        sender_id: int = 555,
    ) -> None:
        self.chat_id = chat_id
        self.raw_text = text
        self.is_private = is_private
        self.sender_id = sender_id
        self._chat = chat
        self._sender = sender

    async def get_chat(self):
        return self._chat

    async def get_sender(self):
        return self._sender


def test_group_message_with_username() -> None:
    message = DummyMessage(
        chat_id=-100123,
        text="/rss status",
        is_private=False,
        chat=DummyChat(username="NewsRoom"),
        sender=DummySender(username="alice"),
    )
    context = asyncio.run(build_context(message))
    assert context.channel == "@newsroom"
    assert context.is_team is True
    assert context.user == "alice"
    assert context.text == "/rss status"


def test_private_message_without_usernames() -> None:
    message = DummyMessage(chat_id=777, text="/rss refresh", is_private=True, sender_id=777)
    context = asyncio.run(build_context(message))
    assert context.channel == "chat_id:777"
    assert context.is_team is False
    assert context.user == "777"


def test_bot_mention_is_stripped_from_command() -> None:
    assert strip_bot_mention("/rss@feed_bot get 42") == "/rss get 42"
    assert strip_bot_mention("/rss@feed_bot") == "/rss"
    assert strip_bot_mention("!rss get a@b") == "!rss get a@b"
