"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types. Records serialize to the JSON
shape stored in each channel namespace.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Subscription:
    """The single config record of a channel."""

    channel: str
    is_team: bool
    user: str
    url: str

    def to_json(self) -> str:
        return json.dumps(
            {
                "channel": self.channel,
                "is_team": self.is_team,
                "user": self.user,
                "url": self.url,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "Subscription":
        data = json.loads(raw)
        return cls(
            channel=data.get("channel", ""),
            is_team=bool(data.get("is_team", False)),
            user=data.get("user", ""),
            url=data.get("url", ""),
        )


@dataclass(frozen=True)
class FeedItem:
    """Normalized feed entry produced by a fetcher adapter."""

    title: str
    description: str
    link: str
    guid: str
    published: str
    published_at: Optional[datetime]


@dataclass(frozen=True)
class ItemRecord:
    """Persisted dedup record for one feed item, keyed by ``id``."""

    id: str
    title: str
    description: str
    link: str
    pub_date: str

    def to_json(self) -> str:
        return json.dumps(
            {
                "title": self.title,
                "description": self.description,
                "link": self.link,
                "id": self.id,
                "pubDate": self.pub_date,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "ItemRecord":
        data = json.loads(raw)
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            link=data.get("link", ""),
            pub_date=data.get("pubDate", ""),
        )


@dataclass(frozen=True)
class CommandContext:
    """Transport-neutral view of an inbound chat message."""

    channel: str
    is_team: bool
    user: str
    text: str
