from __future__ import annotations

import time
from datetime import datetime, timezone

import feedparser
import pytest

from feedwatch.adapters import feed_fetcher
from feedwatch.adapters.feed_fetcher import FeedparserFetcher, entry_to_item
from feedwatch.core.errors import FetchError

REAL_PARSE = feedparser.parse

RSS = """<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>Example</title>
    <item>
      <title>First post</title>
      <description>Hello</description>
      <link>https://x/feed?id=1</link>
      <guid>guid-1</guid>
      <pubDate>Wed, 01 May 2024 11:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second</title>
      <description>World</description>
      <link>https://x/feed?id=2</link>
      <pubDate>Wed, 01 May 2024 10:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


def test_entry_to_item_maps_fields() -> None:
    entry = {
        "title": "T",
        "description": "D",
        "link": "https://x/feed?id=9",
        "published": "Wed, 01 May 2024 11:00:00 GMT",
        "published_parsed": time.strptime("2024-05-01 11:00:00", "%Y-%m-%d %H:%M:%S"),
    }
    item = entry_to_item(entry)
    assert item.guid == ""
    assert item.link == "https://x/feed?id=9"
    assert item.published_at == datetime(2024, 5, 1, 11, 0, tzinfo=timezone.utc)


def test_entry_without_dates() -> None:
    item = entry_to_item({"title": "T"})
    assert item.published == ""
    assert item.published_at is None


def test_fetch_parses_document_in_order(monkeypatch) -> None:
    monkeypatch.setattr(feed_fetcher.feedparser, "parse", lambda url, **kw: REAL_PARSE(RSS))

    items = FeedparserFetcher().fetch("https://x/feed.xml")

    assert [item.link for item in items] == ["https://x/feed?id=1", "https://x/feed?id=2"]
    assert items[0].guid == "guid-1"
    assert items[0].published_at == datetime(2024, 5, 1, 11, 0, tzinfo=timezone.utc)


def test_fetch_http_error_raises(monkeypatch) -> None:
    monkeypatch.setattr(
        feed_fetcher.feedparser,
        "parse",
        lambda url, **kw: {"status": 404, "entries": [], "bozo": False},
    )
    with pytest.raises(FetchError, match="HTTP 404"):
        FeedparserFetcher().fetch("https://x/missing.xml")


def test_fetch_unparseable_raises(monkeypatch) -> None:
    monkeypatch.setattr(
        feed_fetcher.feedparser,
        "parse",
        lambda url, **kw: {"entries": [], "bozo": True, "bozo_exception": ValueError("bad xml")},
    )
    with pytest.raises(FetchError, match="bad xml"):
        FeedparserFetcher().fetch("https://x/broken.xml")


def test_fetch_transport_exception_raises(monkeypatch) -> None:
    def explode(url, **kw):
        raise OSError("connection refused")

    monkeypatch.setattr(feed_fetcher.feedparser, "parse", explode)
    with pytest.raises(FetchError, match="connection refused"):
        FeedparserFetcher().fetch("https://x/feed.xml")


@pytest.mark.parametrize("target", ["/etc/feed.xml", "file:///etc/feed.xml", "ftp://x/feed.xml"])
def test_fetch_rejects_non_http_targets(monkeypatch, target) -> None:
    def must_not_parse(url, **kw):
        raise AssertionError("feedparser must not be called")

    monkeypatch.setattr(feed_fetcher.feedparser, "parse", must_not_parse)
    with pytest.raises(FetchError, match="unsupported scheme"):
        FeedparserFetcher().fetch(target)


def test_fetch_does_not_read_local_files(tmp_path) -> None:
    path = tmp_path / "feed.xml"
    path.write_text(RSS, encoding="utf-8")
    with pytest.raises(FetchError, match="unsupported scheme"):
        FeedparserFetcher().fetch(str(path))
