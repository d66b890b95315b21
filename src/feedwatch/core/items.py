"""Item identity and classification helpers (core domain)."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from feedwatch.core.config import RefreshConfig
from feedwatch.core.models import FeedItem, ItemRecord

LINE_BREAK_MARKUP = "<br />"
ID_QUERY_MARKER = "id="


class ItemOutcome(enum.Enum):
    """What a refresh does with one feed item."""

    NOTIFY_AND_STORE = "notify_and_store"
    RETIRE = "retire"
    SKIP = "skip"


def strip_line_breaks(text: str) -> str:
    """Replace literal line-break markup with a single space."""

    return text.replace(LINE_BREAK_MARKUP, " ")


def resolve_item_id(guid: str, link: str) -> str:
    """Return the GUID, or the text after the last ``id=`` in the link."""

    if guid:
        return guid
    return link.split(ID_QUERY_MARKER)[-1]


def build_record(item: FeedItem) -> ItemRecord:
    """Normalize a fetched item into the record persisted for dedup."""

    return ItemRecord(
        id=resolve_item_id(item.guid, item.link),
        title=strip_line_breaks(item.title),
        description=strip_line_breaks(item.description),
        link=item.link,
        pub_date=item.published,
    )


def classify_item(
    published_at: Optional[datetime],
    exists: bool,
    now: datetime,
    config: RefreshConfig,
) -> ItemOutcome:
    """Classify one item against the pre-fetch snapshot.

    Retention and notification are mutually exclusive because one needs
    ``exists`` and the other needs its negation. A record that exists and is
    still inside the retention window is retired on every pass, so a freshly
    stored item is deleted on the next refresh and shows up as unseen on the
    one after that.
    """

    if published_at is None:
        return ItemOutcome.SKIP

    age = now - published_at
    if exists and age < config.retention_window:
        return ItemOutcome.RETIRE
    if not exists and age < config.freshness_window:
        return ItemOutcome.NOTIFY_AND_STORE
    return ItemOutcome.SKIP
