"""Subscription operations layered directly on the store port."""

from __future__ import annotations

import logging

from feedwatch.core.config import CONFIG_KEY
from feedwatch.core.errors import NotFound
from feedwatch.core.models import ItemRecord, Subscription
from feedwatch.core.ports import StorePort

LOGGER = logging.getLogger(__name__)


class SubscriptionService:
    """Subscribe, unsubscribe, and read back raw channel records."""

    def __init__(self, store: StorePort) -> None:
        self._store = store

    def subscribe(self, channel: str, url: str, user: str, is_team: bool) -> Subscription:
        """Overwrite the channel's config record (last write wins)."""

        if "http" not in url:
            LOGGER.warning("URL not detected in subscribe from %s: %s", user, url)
        subscription = Subscription(channel=channel, is_team=is_team, user=user, url=url)
        self._store.put(channel, CONFIG_KEY, subscription.to_json())
        LOGGER.info("Subscribed %s to %s", channel, url)
        return subscription

    def unsubscribe(self, channel: str) -> int:
        """Delete every key in the namespace and return how many were removed.

        Stops at the first failed delete; keys already removed stay removed.
        """

        keys = self._store.list_keys(channel)
        for key in sorted(keys):
            self._store.delete(channel, key)
        LOGGER.info("Unsubscribed %s (%s keys removed)", channel, len(keys))
        return len(keys)

    def status(self, channel: str) -> str:
        """Return the raw config record or raise NotFound."""

        return self._store.get(channel, CONFIG_KEY)

    def get_by_id(self, channel: str, item_id: str) -> str:
        """Return the raw item record or raise NotFound."""

        return self._store.get(channel, item_id)

    def get_item(self, channel: str, item_id: str) -> ItemRecord:
        """Return the parsed item record; the config key is not an item."""

        if item_id == CONFIG_KEY:
            raise NotFound(channel, item_id)
        return ItemRecord.from_json(self.get_by_id(channel, item_id))
