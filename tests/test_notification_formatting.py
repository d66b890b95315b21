from __future__ import annotations

import pytest

from feedwatch.adapters.notification_formatting import (
    ELLIPSIS,
    MAX_MESSAGE_CHARS,
    clip,
    format_notification,
)
from feedwatch.core.models import ItemRecord


def _record(**overrides) -> ItemRecord:
    fields = {
        "id": "42",
        "title": "Release 1.0",
        "description": "Notes & fixes",
        "link": "https://x/feed?id=42",
        "pub_date": "Wed, 01 May 2024 11:00:00 GMT",
    }
    fields.update(overrides)
    return ItemRecord(**fields)


def test_markdown_layout() -> None:
    message = format_notification(_record(), mode="markdown")
    assert message == (
        "> Release 1.0\n"
        "```Notes & fixes```\n"
        "> Wed, 01 May 2024 11:00:00 GMT\n"
        "https://x/feed?id=42"
    )


def test_html_escapes_content() -> None:
    message = format_notification(_record(title="<b>x</b>"), mode="html")
    assert "<blockquote>&lt;b&gt;x&lt;/b&gt;</blockquote>" in message
    assert "<pre>Notes &amp; fixes</pre>" in message
    assert message.endswith('<a href="https://x/feed?id=42">https://x/feed?id=42</a>')


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        format_notification(_record(), mode="plain")


def test_clip() -> None:
    assert clip("short", 10) == "short"
    assert clip("abcdefghij", 5) == f"abcd{ELLIPSIS}"
    assert clip("abc", 0) == ""


def test_description_is_clipped_to_setting() -> None:
    message = format_notification(_record(description="y" * 500), mode="markdown", description_chars=100)
    assert f"```{'y' * 99}{ELLIPSIS}```" in message


def test_message_fits_telegram_limit_with_generous_setting() -> None:
    record = _record(description="z" * 10000)
    for mode in ("markdown", "html"):
        message = format_notification(record, mode=mode, description_chars=20000)
        assert len(message) <= MAX_MESSAGE_CHARS
        assert message.rstrip().endswith(("https://x/feed?id=42", "</a>"))


def test_escaped_html_description_fits_limit() -> None:
    record = _record(description="&" * 3000)
    message = format_notification(record, mode="html", description_chars=5000)
    assert len(message) <= MAX_MESSAGE_CHARS


def test_oversized_title_is_clipped_too() -> None:
    record = _record(title="t" * 6000, description="")
    message = format_notification(record, mode="markdown")
    assert len(message) <= MAX_MESSAGE_CHARS
    assert message.endswith("https://x/feed?id=42")
