"""feedparser-backed fetcher adapter.

Keeps feedparser types out of the core by mapping entries onto FeedItem.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional
from urllib.parse import urlsplit

import feedparser

from feedwatch.core.errors import FetchError
from feedwatch.core.models import FeedItem

LOGGER = logging.getLogger(__name__)

# feedparser also reads local files and raw strings; only remote feeds are allowed.
ALLOWED_SCHEMES = frozenset({"http", "https"})


def _published_at(entry: Any) -> Optional[datetime]:
    # feedparser normalizes dates to UTC struct_time.
    stamp = entry.get("published_parsed") or entry.get("updated_parsed")
    if not stamp:
        return None
    return datetime(*stamp[:6], tzinfo=timezone.utc)


def entry_to_item(entry: Any) -> FeedItem:
    """Map one feedparser entry onto the core FeedItem."""

    return FeedItem(
        title=entry.get("title", "") or "",
        description=entry.get("description", "") or "",
        link=entry.get("link", "") or "",
        guid=entry.get("id", "") or "",
        published=entry.get("published", "") or entry.get("updated", "") or "",
        published_at=_published_at(entry),
    )


class FeedparserFetcher:
    """Fetcher adapter that downloads and parses feeds with feedparser."""

    def __init__(self, agent: Optional[str] = None) -> None:
        self._agent = agent

    def _parse(self, url: str) -> Any:
        if self._agent:
            return feedparser.parse(url, agent=self._agent)
        return feedparser.parse(url)

    def fetch(self, url: str) -> List[FeedItem]:
        """Return the feed's entries in document order."""

        if urlsplit(url).scheme.lower() not in ALLOWED_SCHEMES:
            raise FetchError(url, "unsupported scheme")

        try:
            parsed = self._parse(url)
        except Exception as exc:
            raise FetchError(url, str(exc)) from exc

        status = parsed.get("status")
        if status is not None and status >= 400:
            raise FetchError(url, f"HTTP {status}")

        entries = parsed.get("entries", [])
        if parsed.get("bozo") and not entries:
            reason = parsed.get("bozo_exception") or "unparseable feed"
            raise FetchError(url, str(reason))
        if parsed.get("bozo"):
            LOGGER.warning("Feed %s is malformed, using %s recovered entries", url, len(entries))

        return [entry_to_item(entry) for entry in entries]
