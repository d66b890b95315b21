from __future__ import annotations

import pytest

from feedwatch.core.channel_keys import build_channel_key, chat_target


def test_username_key_is_lowercased() -> None:
    assert build_channel_key("NewsRoom", -100123) == "@newsroom"


def test_chat_id_key_when_username_missing() -> None:
    assert build_channel_key(None, -100123) == "chat_id:-100123"
    assert build_channel_key("", 42) == "chat_id:42"


def test_chat_target_roundtrip() -> None:
    assert chat_target("@newsroom") == "@newsroom"
    assert chat_target("chat_id:-100123") == -100123


def test_chat_target_rejects_bad_keys() -> None:
    with pytest.raises(ValueError):
        chat_target("chat_id:abc")
    with pytest.raises(ValueError):
        chat_target("newsroom")
