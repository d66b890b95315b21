"""Domain errors raised by the core and translated into by adapters."""

from __future__ import annotations


class FeedwatchError(Exception):
    """Base class for every expected failure in feedwatch."""


class FetchError(FeedwatchError):
    """The feed could not be downloaded or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class StoreUnavailable(FeedwatchError):
    """The key-value backend failed a read, write, or delete."""


class NotFound(FeedwatchError):
    """A key is absent from a channel namespace."""

    def __init__(self, channel: str, key: str) -> None:
        super().__init__(f"Key {key!r} not found for {channel}")
        self.channel = channel
        self.key = key


class NoSubscription(NotFound):
    """The channel has no config record."""


class MalformedCommand(FeedwatchError):
    """The inbound text has too few parameters or an unknown verb."""
