"""Ports (interfaces) used by the core.

Ports define the minimal contracts for storage, feed fetching, and
notification adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Protocol, Set

from feedwatch.core.models import FeedItem, ItemRecord


class StorePort(Protocol):
    """Per-channel key-value namespace.

    Every call is atomic on its own; there is no transaction across keys.
    Backend failures surface as ``StoreUnavailable``.
    """

    def get(self, channel: str, key: str) -> str:
        """Return the value or raise ``NotFound``."""
        ...

    def put(self, channel: str, key: str, value: str) -> None:
        ...

    def delete(self, channel: str, key: str) -> None:
        """Remove the key; absent keys are not an error."""
        ...

    def list_keys(self, channel: str) -> Set[str]:
        ...


class FetcherPort(Protocol):
    """Feed download and parsing."""

    def fetch(self, url: str) -> List[FeedItem]:
        """Return items in feed order or raise ``FetchError``."""
        ...


class NotifierPort(Protocol):
    """Message delivery to a channel. Adapters own the message layout."""

    async def send_item(self, channel: str, record: ItemRecord) -> None:
        ...

    async def send_text(self, channel: str, text: str) -> None:
        ...
